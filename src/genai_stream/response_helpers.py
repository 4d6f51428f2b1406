# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Convenience accessors for generate-content responses.

add_helpers() is applied to every streamed fragment and to the final
aggregate. It builds a typed, enhanced view of the response dict and never
modifies the dict itself, so the same fragment can be enhanced for the
caller while the aggregator is still reading it.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import PrivateAttr, ValidationError

from .exceptions import ResponseError
from .types.content import (
    Candidate,
    FinishReason,
    FunctionCall,
    GenerateContentResponse,
)

logger = logging.getLogger(__name__)

BAD_FINISH_REASONS = frozenset(
    {
        FinishReason.RECITATION.value,
        FinishReason.SAFETY.value,
        FinishReason.LANGUAGE.value,
    }
)


class EnhancedGenerateContentResponse(GenerateContentResponse):
    """
    GenerateContentResponse with accessors for the first candidate.

    Accessors raise ResponseError when the prompt or the first candidate
    was blocked, so callers do not silently read an empty answer.
    """

    _warn_on_multiple: bool = PrivateAttr(default=True)

    def text(self) -> str:
        """
        Text of the first candidate, text parts joined in order.

        Returns:
            The text, or "" if the response carries neither candidates nor
            prompt feedback.

        Raises:
            ResponseError: If the prompt or first candidate was blocked.
        """
        if self.candidates:
            if len(self.candidates) > 1 and self._warn_on_multiple:
                logger.warning(
                    f"This response had {len(self.candidates)} candidates. "
                    f"Returning text from the first candidate only. "
                    f"Access response.candidates directly to use the other candidates."
                )
            self._raise_if_blocked()
            return get_text(self)
        if self.prompt_feedback is not None:
            raise ResponseError(
                f"Text not available. {format_block_error_message(self)}", self
            )
        return ""

    def function_calls(self) -> list[FunctionCall] | None:
        """
        Function calls of the first candidate, in part order.

        Returns:
            The calls, or None if the first candidate made none.

        Raises:
            ResponseError: If the prompt or first candidate was blocked.
        """
        if self.candidates:
            if len(self.candidates) > 1 and self._warn_on_multiple:
                logger.warning(
                    f"This response had {len(self.candidates)} candidates. "
                    f"Returning function calls from the first candidate only. "
                    f"Access response.candidates directly to use the other candidates."
                )
            self._raise_if_blocked()
            return get_function_calls(self)
        if self.prompt_feedback is not None:
            raise ResponseError(
                f"Function call not available. {format_block_error_message(self)}",
                self,
            )
        return None

    def function_call(self) -> FunctionCall | None:
        """First function call of the first candidate, or None."""
        calls = self.function_calls()
        return calls[0] if calls else None

    def _raise_if_blocked(self) -> None:
        if self.candidates and had_bad_finish_reason(self.candidates[0]):
            raise ResponseError(format_block_error_message(self), self)


def add_helpers(
    response: dict[str, Any] | GenerateContentResponse,
    warn_on_multiple_candidates: bool = True,
) -> EnhancedGenerateContentResponse:
    """
    Build the enhanced view of a response.

    Idempotent: an already enhanced response is returned as is.

    Args:
        response: A fragment or aggregate, as a dict or a typed response.
        warn_on_multiple_candidates: Log when accessors read only the first
            of several candidates.

    Returns:
        The enhanced response. The input is not modified.

    Raises:
        ResponseError: If the response does not match the wire schema.
    """
    if isinstance(response, EnhancedGenerateContentResponse):
        return response
    if isinstance(response, GenerateContentResponse):
        response = response.model_dump(by_alias=True, exclude_none=True)
    try:
        enhanced = EnhancedGenerateContentResponse.model_validate(response)
    except ValidationError as e:
        raise ResponseError(
            f"Malformed response: {e.error_count()} validation error(s)", response
        ) from e
    enhanced._warn_on_multiple = warn_on_multiple_candidates
    return enhanced


def get_text(response: GenerateContentResponse) -> str:
    """Join the text parts of the first candidate; "" if there are none."""
    if not response.candidates or response.candidates[0].content is None:
        return ""
    texts = [
        part.text
        for part in response.candidates[0].content.parts
        if part.text is not None
    ]
    return "".join(texts)


def get_function_calls(response: GenerateContentResponse) -> list[FunctionCall] | None:
    """Function calls of the first candidate, or None if there are none."""
    if not response.candidates or response.candidates[0].content is None:
        return None
    calls = [
        part.function_call
        for part in response.candidates[0].content.parts
        if part.function_call is not None
    ]
    return calls or None


def had_bad_finish_reason(candidate: Candidate) -> bool:
    return candidate.finish_reason in BAD_FINISH_REASONS


def format_block_error_message(response: GenerateContentResponse) -> str:
    """
    Describe why a response was blocked.

    Returns:
        A message naming the block reason of the prompt or of the first
        candidate, or "" if nothing was blocked.
    """
    message = ""
    if not response.candidates and response.prompt_feedback is not None:
        message += "Response was blocked"
        if response.prompt_feedback.block_reason:
            message += f" due to {response.prompt_feedback.block_reason}"
        if response.prompt_feedback.block_reason_message:
            message += f": {response.prompt_feedback.block_reason_message}"
    elif response.candidates:
        first = response.candidates[0]
        if had_bad_finish_reason(first):
            message += f"Candidate was blocked due to {first.finish_reason}"
            if first.finish_message:
                message += f": {first.finish_message}"
    return message


__all__ = [
    "BAD_FINISH_REASONS",
    "EnhancedGenerateContentResponse",
    "add_helpers",
    "format_block_error_message",
    "get_function_calls",
    "get_text",
    "had_bad_finish_reason",
]
