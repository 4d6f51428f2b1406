# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Fork one async iterator into independent branches.

This module provides tee() for asyncio: every branch reproduces the source's
items in order, branches are read at independent rates, and the source's
terminal state (exhaustion or exception) is replayed to each branch.

Key Design Decisions:
- One shared pull loop: whichever branch runs out of buffered items pulls
  the next item from the source and appends it to every other open branch.
- asyncio.Lock around the pull: two tasks may await the source at the same
  time, and an async generator cannot be advanced concurrently.
- Per-branch deque: an item stays buffered only until the branches that
  have not read it yet consume it.
- Detached branches: aclose() on a branch drops its buffer and stops
  queueing for it; the other branches run to completion.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator
from typing import Any, Generic, TypeVar, cast

from typing_extensions import Self

from ..exceptions import ConfigurationError, StreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _TeeSource(Generic[T]):
    """Shared state behind a group of branches."""

    __slots__ = (
        "_branches",
        "_done",
        "_error",
        "_iterator",
        "_lock",
        "_source_closed",
    )

    def __init__(self, source: AsyncIterable[T]) -> None:
        self._iterator: AsyncIterator[T] = source.__aiter__()
        self._lock = asyncio.Lock()
        self._branches: list[TeeBranch[T]] = []
        self._done = False
        self._error: BaseException | None = None
        self._source_closed = False

    def register(self, branch: TeeBranch[T]) -> None:
        self._branches.append(branch)

    @property
    def done(self) -> bool:
        return self._done

    @property
    def error(self) -> BaseException | None:
        return self._error

    async def pull(self, requester: TeeBranch[T]) -> None:
        """
        Advance the source by one item on behalf of requester.

        Returns without pulling if another branch already delivered an item
        to requester while it waited for the lock, or if the source is done.
        """
        async with self._lock:
            if requester._buffer or self._done:
                return
            try:
                item = await self._iterator.__anext__()
            except StopAsyncIteration:
                self._done = True
                return
            except asyncio.CancelledError:
                # The source generator is finished once a cancel lands
                # inside it; the other branches must not see a clean end.
                self._done = True
                self._error = StreamError("Stream read was cancelled")
                raise
            except Exception as e:
                self._done = True
                self._error = e
                logger.debug(
                    f"Source raised {type(e).__name__}; replaying to "
                    f"{sum(not b.closed for b in self._branches)} open branch(es)"
                )
                return

            for branch in self._branches:
                if not branch.closed:
                    branch._buffer.append(item)

    async def branch_closed(self) -> None:
        """Close the source once no branch is left to read it."""
        if self._source_closed or any(not b.closed for b in self._branches):
            return
        self._source_closed = True
        if self._done or not hasattr(self._iterator, "aclose"):
            return
        async with self._lock:
            try:
                await cast(AsyncGenerator[T, None], self._iterator).aclose()
            except Exception as e:
                logger.debug(f"Error closing tee source: {type(e).__name__}: {e}")


class TeeBranch(AsyncIterator[T], Generic[T]):
    """
    One independent reader of a forked async iterator.

    Yields exactly the source's items, in order. If the source raised, the
    same exception instance is raised here once this branch has consumed
    everything that preceded it.

    Usage:
        left, right = tee(source)
        async with right:
            async for item in right:
                ...
    """

    __slots__ = ("__weakref__", "_buffer", "_closed", "_error_raised", "_source")

    def __init__(self, source: _TeeSource[T]) -> None:
        self._source = source
        self._buffer: deque[T] = deque()
        self._closed = False
        self._error_raised = False
        source.register(self)

    async def __anext__(self) -> T:
        # A branch closed while its reader waits on the source stops at the
        # next check; aclose() has already emptied its buffer.
        while not self._buffer:
            if self._closed:
                raise StopAsyncIteration
            if self._source.done:
                error = self._source.error
                if error is not None and not self._error_raised:
                    self._error_raised = True
                    raise error
                raise StopAsyncIteration
            await self._source.pull(self)

        return self._buffer.popleft()

    def __aiter__(self) -> Self:
        return self

    async def aclose(self) -> None:
        """
        Detach this branch.

        Buffered items are dropped and no further items are queued for it.
        Idempotent. Other branches keep running.
        """
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        await self._source.branch_closed()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of items buffered for this branch and not yet read."""
        return len(self._buffer)


def tee(source: AsyncIterable[T], n: int = 2) -> tuple[TeeBranch[T], ...]:
    """
    Split an async iterable into n independent branches.

    Args:
        source: The async iterable to fork. Must not be consumed elsewhere.
        n: Number of branches.

    Returns:
        A tuple of n branches.

    Raises:
        ConfigurationError: If n is less than 1.
    """
    if n < 1:
        raise ConfigurationError(f"tee() needs at least one branch, got {n}")
    shared: _TeeSource[T] = _TeeSource(source)
    return tuple(TeeBranch(shared) for _ in range(n))


__all__ = ["TeeBranch", "tee"]
