"""
Unit tests for ResponseAggregator, aggregate_responses and aggregate_stream.

Tests cover:
- One running candidate per index, ordered by index
- Last-write-wins candidate metadata
- Positional part merge with assignment semantics
- Function call / executable code / code execution result slots
- Role initialization and default role
- usageMetadata and promptFeedback last-write-wins
- Input fragments are not mutated
- Error propagation from aggregate_stream
"""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from genai_stream.streaming.aggregator import (
    ResponseAggregator,
    aggregate_responses,
    aggregate_stream,
)

FragmentFactory = Callable[..., dict[str, Any]]


class TestCandidateIdentity:
    """Tests for candidate keying by index."""

    def test_single_candidate_merged_in_place(
        self, text_fragment: FragmentFactory
    ) -> None:
        result = aggregate_responses(
            [text_fragment("Hello"), text_fragment("Hello world")]
        )

        assert len(result["candidates"]) == 1
        assert result["candidates"][0]["index"] == 0

    def test_candidates_ordered_by_index_not_arrival(
        self, text_fragment: FragmentFactory
    ) -> None:
        """Candidate list follows index order regardless of arrival order."""
        result = aggregate_responses(
            [
                text_fragment("second", index=1),
                text_fragment("first", index=0),
                {
                    "candidates": [
                        {"index": 1, "finishReason": "STOP"},
                        {"index": 0, "finishReason": "MAX_TOKENS"},
                    ]
                },
            ]
        )

        candidates = result["candidates"]
        assert [c["index"] for c in candidates] == [0, 1]
        assert candidates[0]["content"]["parts"] == [{"text": "first"}]
        assert candidates[0]["finishReason"] == "MAX_TOKENS"
        assert candidates[1]["content"]["parts"] == [{"text": "second"}]
        assert candidates[1]["finishReason"] == "STOP"

    def test_missing_index_uses_position(self) -> None:
        result = aggregate_responses(
            [{"candidates": [{"finishReason": "STOP"}, {"finishReason": "SAFETY"}]}]
        )

        assert [c["index"] for c in result["candidates"]] == [0, 1]
        assert result["candidates"][1]["finishReason"] == "SAFETY"

    def test_null_index_uses_position(self) -> None:
        """An explicit null index is treated like a missing one."""
        result = aggregate_responses(
            [
                {"candidates": [{"index": 1, "finishReason": "STOP"}]},
                {
                    "candidates": [
                        {"index": None, "finishReason": "MAX_TOKENS"},
                        {"index": 1, "finishMessage": "done"},
                    ]
                },
            ]
        )

        candidates = result["candidates"]
        assert [c["index"] for c in candidates] == [0, 1]
        assert candidates[0]["finishReason"] == "MAX_TOKENS"
        assert candidates[1]["finishReason"] == "STOP"
        assert candidates[1]["finishMessage"] == "done"

    def test_no_candidates_key_when_none_seen(self) -> None:
        result = aggregate_responses([{"usageMetadata": {"totalTokenCount": 3}}])

        assert "candidates" not in result


class TestCandidateMetadata:
    """Tests for last-write-wins scalar fields."""

    def test_later_value_overwrites(self) -> None:
        result = aggregate_responses(
            [
                {"candidates": [{"index": 0, "safetyRatings": [{"category": "A"}]}]},
                {"candidates": [{"index": 0, "safetyRatings": [{"category": "B"}]}]},
            ]
        )

        assert result["candidates"][0]["safetyRatings"] == [{"category": "B"}]

    def test_absent_field_does_not_erase(self) -> None:
        """A fragment without a field keeps the previous value."""
        result = aggregate_responses(
            [
                {"candidates": [{"index": 0, "citationMetadata": {"sources": [1]}}]},
                {"candidates": [{"index": 0, "finishReason": "STOP"}]},
            ]
        )

        candidate = result["candidates"][0]
        assert candidate["citationMetadata"] == {"sources": [1]}
        assert candidate["finishReason"] == "STOP"

    def test_all_scalar_fields_copied(self) -> None:
        fields = {
            "citationMetadata": {"c": 1},
            "groundingMetadata": {"g": 1},
            "finishReason": "STOP",
            "finishMessage": "done",
            "safetyRatings": [],
        }

        result = aggregate_responses([{"candidates": [{"index": 0, **fields}]}])

        for name, value in fields.items():
            assert result["candidates"][0][name] == value


class TestContentMerge:
    """Tests for positional part merging."""

    def test_text_slot_is_assigned_not_concatenated(
        self, text_fragment: FragmentFactory
    ) -> None:
        """The last fragment supplying a slot decides its text."""
        result = aggregate_responses(
            [text_fragment("Hel"), text_fragment("Hello"), text_fragment("Hello!")]
        )

        assert result["candidates"][0]["content"]["parts"] == [{"text": "Hello!"}]

    def test_parts_merge_by_position(self) -> None:
        result = aggregate_responses(
            [
                {
                    "candidates": [
                        {"index": 0, "content": {"parts": [{"text": "a"}]}}
                    ]
                },
                {
                    "candidates": [
                        {
                            "index": 0,
                            "content": {"parts": [{"text": "a2"}, {"text": "b"}]},
                        }
                    ]
                },
            ]
        )

        assert result["candidates"][0]["content"]["parts"] == [
            {"text": "a2"},
            {"text": "b"},
        ]

    def test_shorter_fragment_keeps_later_slots(
        self, text_fragment: FragmentFactory
    ) -> None:
        two_parts = {
            "candidates": [
                {"index": 0, "content": {"parts": [{"text": "x"}, {"text": "y"}]}}
            ]
        }

        result = aggregate_responses([two_parts, text_fragment("z")])

        assert result["candidates"][0]["content"]["parts"] == [
            {"text": "z"},
            {"text": "y"},
        ]

    def test_function_call_and_code_fields(self) -> None:
        call = {"name": "lookup", "args": {"q": "x"}}
        code = {"language": "PYTHON", "code": "print(1)"}
        outcome = {"outcome": "OUTCOME_OK", "output": "1\n"}

        result = aggregate_responses(
            [
                {
                    "candidates": [
                        {
                            "index": 0,
                            "content": {
                                "role": "model",
                                "parts": [
                                    {"functionCall": call},
                                    {"executableCode": code},
                                    {"codeExecutionResult": outcome},
                                ],
                            },
                        }
                    ]
                }
            ]
        )

        assert result["candidates"][0]["content"]["parts"] == [
            {"functionCall": call},
            {"executableCode": code},
            {"codeExecutionResult": outcome},
        ]

    def test_unknown_part_defaults_to_empty_text(self) -> None:
        """A slot with none of the known fields resolves to empty text."""
        result = aggregate_responses(
            [
                {
                    "candidates": [
                        {
                            "index": 0,
                            "content": {"parts": [{"inlineData": {"data": "AA=="}}]},
                        }
                    ]
                }
            ]
        )

        assert result["candidates"][0]["content"]["parts"] == [{"text": ""}]

    def test_unknown_part_keeps_existing_slot_value(
        self, text_fragment: FragmentFactory
    ) -> None:
        result = aggregate_responses(
            [
                text_fragment("kept"),
                {"candidates": [{"index": 0, "content": {"parts": [{"thought": True}]}}]},
            ]
        )

        assert result["candidates"][0]["content"]["parts"] == [{"text": "kept"}]

    def test_role_taken_from_first_content(
        self, text_fragment: FragmentFactory
    ) -> None:
        result = aggregate_responses([text_fragment("hi")])

        assert result["candidates"][0]["content"]["role"] == "model"

    def test_default_role_when_missing(self) -> None:
        fragment = {"candidates": [{"index": 0, "content": {"parts": [{"text": "x"}]}}]}

        assert aggregate_responses([fragment])["candidates"][0]["content"]["role"] == "user"
        assert (
            aggregate_responses([fragment], default_role="model")["candidates"][0][
                "content"
            ]["role"]
            == "model"
        )

    def test_content_without_parts_is_ignored(self) -> None:
        result = aggregate_responses(
            [{"candidates": [{"index": 0, "content": {"role": "model", "parts": []}}]}]
        )

        assert "content" not in result["candidates"][0]


class TestTopLevelMetadata:
    """Tests for usageMetadata and promptFeedback."""

    def test_usage_metadata_last_write_wins(self) -> None:
        result = aggregate_responses(
            [
                {"usageMetadata": {"totalTokenCount": 1}},
                {"candidates": []},
                {"usageMetadata": {"totalTokenCount": 7}},
            ]
        )

        assert result["usageMetadata"] == {"totalTokenCount": 7}

    def test_prompt_feedback_from_most_recent_carrier(self) -> None:
        result = aggregate_responses(
            [{"promptFeedback": {"blockReason": "SAFETY"}}, {"candidates": []}]
        )

        assert result["promptFeedback"] == {"blockReason": "SAFETY"}

    def test_empty_stream_aggregates_to_empty_response(self) -> None:
        assert aggregate_responses([]) == {}


class TestResponseAggregator:
    """Tests for incremental use of ResponseAggregator."""

    def test_does_not_mutate_fragments(self, text_fragment: FragmentFactory) -> None:
        fragments = [
            text_fragment("a", finishReason="STOP"),
            text_fragment("b"),
            {"candidates": [{"index": 0, "content": {"parts": [{}]}}]},
        ]
        originals = copy.deepcopy(fragments)

        aggregate_responses(fragments)

        assert fragments == originals

    def test_result_is_a_snapshot(self, text_fragment: FragmentFactory) -> None:
        aggregator = ResponseAggregator()
        aggregator.add(text_fragment("one"))
        first = aggregator.result()

        aggregator.add(text_fragment("two"))

        assert first["candidates"][0]["content"]["parts"] == [{"text": "one"}]
        assert aggregator.result()["candidates"][0]["content"]["parts"] == [
            {"text": "two"}
        ]

    def test_counts(self, text_fragment: FragmentFactory) -> None:
        aggregator = ResponseAggregator()
        aggregator.add(text_fragment("a", index=0))
        aggregator.add(text_fragment("b", index=2))

        assert aggregator.fragment_count == 2
        assert aggregator.candidate_count == 2


class TestAggregateStream:
    """Tests for aggregate_stream()."""

    @pytest.mark.asyncio
    async def test_matches_list_aggregation(
        self,
        chunk_source: Callable[..., AsyncIterator[Any]],
        text_fragment: FragmentFactory,
    ) -> None:
        fragments = [
            text_fragment("Hello"),
            {"candidates": [{"index": 0, "finishReason": "STOP"}]},
        ]

        result = await aggregate_stream(chunk_source(fragments))

        assert result == aggregate_responses(fragments)
        assert result["candidates"][0]["finishReason"] == "STOP"

    @pytest.mark.asyncio
    async def test_error_propagates_without_result(
        self,
        chunk_source: Callable[..., AsyncIterator[Any]],
        text_fragment: FragmentFactory,
    ) -> None:
        error = ConnectionError("lost")

        with pytest.raises(ConnectionError) as exc_info:
            await aggregate_stream(chunk_source([text_fragment("x")], error=error))

        assert exc_info.value is error
