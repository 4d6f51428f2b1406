# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for collaborators of the stream processor.

Available protocols:
- TextStreamResponseProtocol: Interface for an opened streaming HTTP response
"""

from .streaming import TextStreamResponseProtocol

__all__ = ["TextStreamResponseProtocol"]
