# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Typed views over generate-content response JSON.

The stream pipeline moves plain dicts; these Pydantic models are only built
by the response helpers when a fragment or aggregate is handed to the caller.
Wire keys are camelCase; models accept either spelling and keep fields they
do not know about.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FinishReason(str, Enum):
    """Reason a candidate stopped generating."""

    FINISH_REASON_UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    LANGUAGE = "LANGUAGE"
    OTHER = "OTHER"


class BlockReason(str, Enum):
    """Reason a prompt was blocked."""

    BLOCKED_REASON_UNSPECIFIED = "BLOCKED_REASON_UNSPECIFIED"
    SAFETY = "SAFETY"
    OTHER = "OTHER"


class WireModel(BaseModel):
    """Base for all response models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class FunctionCall(WireModel):
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class ExecutableCode(WireModel):
    language: str | None = None
    code: str = ""


class CodeExecutionResult(WireModel):
    outcome: str | None = None
    output: str | None = None


class Part(WireModel):
    """One unit of content. A wire part carries exactly one kind."""

    text: str | None = None
    function_call: FunctionCall | None = None
    executable_code: ExecutableCode | None = None
    code_execution_result: CodeExecutionResult | None = None


class Content(WireModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class SafetyRating(WireModel):
    category: str | None = None
    probability: str | None = None
    blocked: bool | None = None


class Candidate(WireModel):
    """One alternative model output, identified by index."""

    index: int = 0
    content: Content | None = None
    # str rather than FinishReason so values added server-side still parse
    finish_reason: str | None = None
    finish_message: str | None = None
    safety_ratings: list[SafetyRating] | None = None
    citation_metadata: dict[str, Any] | None = None
    grounding_metadata: dict[str, Any] | None = None


class PromptFeedback(WireModel):
    block_reason: str | None = None
    block_reason_message: str | None = None
    safety_ratings: list[SafetyRating] = Field(default_factory=list)


class UsageMetadata(WireModel):
    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None
    cached_content_token_count: int | None = None


class GenerateContentResponse(WireModel):
    """A full response, one streamed fragment, or an aggregate of fragments."""

    candidates: list[Candidate] | None = None
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None


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
    "WireModel",
]
