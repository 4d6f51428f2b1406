"""Shared fixtures for streaming tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any

import pytest


@pytest.fixture
def chunk_source() -> Callable[..., AsyncIterator[Any]]:
    """Factory for an async source over items, optionally failing at the end."""

    async def _iterate(
        items: Iterable[Any], error: BaseException | None = None
    ) -> AsyncIterator[Any]:
        for item in items:
            yield item
        if error is not None:
            raise error

    return _iterate


@pytest.fixture
def text_fragment() -> Callable[..., dict[str, Any]]:
    """Factory for a fragment with one text part on one candidate."""

    def _make(text: str, index: int = 0, **candidate_fields: Any) -> dict[str, Any]:
        candidate: dict[str, Any] = {
            "index": index,
            "content": {"role": "model", "parts": [{"text": text}]},
        }
        candidate.update(candidate_fields)
        return {"candidates": [candidate]}

    return _make
