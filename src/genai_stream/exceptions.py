# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the genai-stream library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from GenerativeAIError, making it easy to catch
all library-originated exceptions with a single except clause.

Errors raised by the underlying network stream are never wrapped: they
reach the caller as the exact exception object the transport raised.
"""

from __future__ import annotations

from typing import Any

_MESSAGE_PREFIX = "[GenerativeAI Error]: "


class GenerativeAIError(Exception):
    """Base exception for all genai-stream errors.

    The message is prefixed with ``[GenerativeAI Error]: `` so library
    errors are recognizable in logs next to transport errors.

    Example:
        try:
            response = await result.response
        except GenerativeAIError as e:
            logger.error(f"Generation failed: {e}")
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(f"{_MESSAGE_PREFIX}{message}")


class StreamError(GenerativeAIError):
    """Raised when the SSE stream cannot be decoded into response fragments.

    Both the live fragment stream and the aggregated response terminate
    with the same StreamError instance.
    """

    pass


class StreamParseError(StreamError):
    """Raised when a frame payload is not a valid JSON object.

    Attributes:
        payload: The raw payload text of the offending frame.

    Example:
        try:
            async for fragment in result.stream:
                handle(fragment)
        except StreamParseError as e:
            logger.warning(f"Bad frame from server: {e.payload!r}")
    """

    def __init__(self, payload: str, message: str | None = None) -> None:
        super().__init__(
            message
            if message is not None
            else f'Error parsing JSON response: "{payload}"'
        )
        self.payload = payload


class IncompleteStreamError(StreamError):
    """Raised when the stream closes in the middle of a frame.

    A non-whitespace remainder left in the decode buffer at end of input
    is never silently dropped.

    Attributes:
        remainder: The undecoded text left in the buffer.
    """

    def __init__(self, remainder: str) -> None:
        super().__init__("Failed to parse stream")
        self.remainder = remainder


class ResponseError(GenerativeAIError):
    """Raised when a response cannot provide the requested content.

    This covers blocked prompts, candidates that finished for a safety
    related reason and responses that do not match the wire schema. The
    offending response is kept for inspection.

    Attributes:
        response: The response that was blocked or failed validation.

    Example:
        try:
            print(response.text())
        except ResponseError as e:
            print(e.response.prompt_feedback)
    """

    def __init__(self, message: str, response: Any | None = None) -> None:
        super().__init__(message)
        self.response = response


class ConfigurationError(GenerativeAIError):
    """Raised when configuration is invalid.

    Common causes include:
    - An empty default role
    - An encoding name unknown to the codecs registry
    - A fork with fewer than one branch
    """

    pass


__all__ = [
    "ConfigurationError",
    "GenerativeAIError",
    "IncompleteStreamError",
    "ResponseError",
    "StreamError",
    "StreamParseError",
]
