# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Response type definitions.

This module provides the typed response models returned to callers.
"""

from .content import (
    BlockReason,
    Candidate,
    CodeExecutionResult,
    Content,
    ExecutableCode,
    FinishReason,
    FunctionCall,
    GenerateContentResponse,
    Part,
    PromptFeedback,
    SafetyRating,
    UsageMetadata,
)

__all__ = [
    "BlockReason",
    "Candidate",
    "CodeExecutionResult",
    "Content",
    "ExecutableCode",
    "FinishReason",
    "FunctionCall",
    "GenerateContentResponse",
    "Part",
    "PromptFeedback",
    "SafetyRating",
    "UsageMetadata",
]
