# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Fold streamed response fragments into one aggregated response.

Merge rules:
- Candidates are keyed by their ``index``. One running candidate exists per
  index seen anywhere in the stream and is updated in place.
- Candidate metadata (citation, grounding, finish reason, finish message,
  safety ratings) is last-write-wins, applied only when the fragment
  carries the field.
- Parts merge by position within the part list. A fragment's part at
  position N is the authoritative value for that slot: text is assigned,
  not appended. Function call, executable code and code execution result
  are set when present.
- usageMetadata and promptFeedback are last-write-wins across the stream.

Fragments are never mutated; the live stream hands the same dicts to the
caller.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"

_CANDIDATE_SCALAR_FIELDS = (
    "citationMetadata",
    "groundingMetadata",
    "finishReason",
    "finishMessage",
    "safetyRatings",
)

_PART_FIELDS = (
    "functionCall",
    "executableCode",
    "codeExecutionResult",
)


class ResponseAggregator:
    """
    Running aggregate of a fragment stream.

    Usage:
        aggregator = ResponseAggregator()
        for fragment in fragments:
            aggregator.add(fragment)
        response = aggregator.result()
    """

    __slots__ = (
        "_candidates",
        "_default_role",
        "_fragment_count",
        "_prompt_feedback",
        "_usage_metadata",
    )

    def __init__(self, default_role: str = DEFAULT_ROLE) -> None:
        self._default_role = default_role
        self._candidates: dict[int, dict[str, Any]] = {}
        self._prompt_feedback: Any = None
        self._usage_metadata: Any = None
        self._fragment_count = 0

    def add(self, fragment: dict[str, Any]) -> None:
        """Fold one fragment into the aggregate."""
        self._fragment_count += 1

        if fragment.get("usageMetadata") is not None:
            self._usage_metadata = fragment["usageMetadata"]
        if fragment.get("promptFeedback") is not None:
            self._prompt_feedback = fragment["promptFeedback"]

        for position, candidate in enumerate(fragment.get("candidates") or []):
            index = candidate.get("index")
            if index is None:
                index = position
            running = self._candidates.get(index)
            if running is None:
                running = {"index": index}
                self._candidates[index] = running

            for name in _CANDIDATE_SCALAR_FIELDS:
                if candidate.get(name) is not None:
                    running[name] = candidate[name]

            self._merge_content(running, candidate.get("content"))

    def _merge_content(
        self, running: dict[str, Any], content: dict[str, Any] | None
    ) -> None:
        if not content or not content.get("parts"):
            return

        if "content" not in running:
            running["content"] = {
                "role": content.get("role") or self._default_role,
                "parts": [],
            }
        parts: list[dict[str, Any]] = running["content"]["parts"]

        for position, part in enumerate(content["parts"]):
            if position == len(parts):
                parts.append({})
            slot = parts[position]

            if part.get("text") is not None:
                slot["text"] = part["text"]
            for name in _PART_FIELDS:
                if part.get(name) is not None:
                    slot[name] = part[name]

            if "text" not in slot and not any(name in slot for name in _PART_FIELDS):
                slot["text"] = ""

    def result(self) -> dict[str, Any]:
        """
        Snapshot of the aggregate.

        The candidate list is ordered by index, independent of arrival order.
        Keys whose value was never supplied are omitted.
        """
        response: dict[str, Any] = {}
        if self._candidates:
            response["candidates"] = [
                _copy_candidate(self._candidates[i]) for i in sorted(self._candidates)
            ]
        if self._prompt_feedback is not None:
            response["promptFeedback"] = self._prompt_feedback
        if self._usage_metadata is not None:
            response["usageMetadata"] = self._usage_metadata
        return response

    @property
    def fragment_count(self) -> int:
        return self._fragment_count

    @property
    def candidate_count(self) -> int:
        return len(self._candidates)


def _copy_candidate(candidate: dict[str, Any]) -> dict[str, Any]:
    # Copy the containers the aggregator mutates so a snapshot is not
    # changed by later add() calls; leaf values are shared.
    copied = dict(candidate)
    if "content" in candidate:
        copied["content"] = {
            "role": candidate["content"]["role"],
            "parts": [dict(part) for part in candidate["content"]["parts"]],
        }
    return copied


def aggregate_responses(
    fragments: Iterable[dict[str, Any]],
    default_role: str = DEFAULT_ROLE,
) -> dict[str, Any]:
    """Fold a finished sequence of fragments into one response dict."""
    aggregator = ResponseAggregator(default_role=default_role)
    for fragment in fragments:
        aggregator.add(fragment)
    return aggregator.result()


async def aggregate_stream(
    fragments: AsyncIterable[dict[str, Any]],
    default_role: str = DEFAULT_ROLE,
) -> dict[str, Any]:
    """
    Consume a fragment stream to completion and return the aggregate.

    Exceptions from the stream propagate unchanged; no partial aggregate is
    returned.
    """
    aggregator = ResponseAggregator(default_role=default_role)
    async for fragment in fragments:
        aggregator.add(fragment)
    logger.debug(
        f"Aggregated {aggregator.fragment_count} fragment(s) into "
        f"{aggregator.candidate_count} candidate(s)"
    )
    return aggregator.result()


__all__ = [
    "DEFAULT_ROLE",
    "ResponseAggregator",
    "aggregate_responses",
    "aggregate_stream",
]
