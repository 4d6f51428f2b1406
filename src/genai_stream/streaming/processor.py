# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Turn a raw SSE response body into a live stream and a deferred aggregate.

Pipeline:
    raw chunks -> decode_stream -> tee -> branch A -> aggregate -> add_helpers
                                       -> branch B -> add_helpers -> caller

The aggregate runs as its own asyncio task, started as soon as the result
is created, so it completes whether or not the caller ever iterates the live
stream. Closing the live stream detaches branch B only.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator
from typing import Any

from typing_extensions import Self

from ..config import StreamConfig
from ..observability.metrics import (
    PrometheusStreamingMetrics,
    StreamingMetrics,
    get_prometheus_streaming_metrics,
    get_streaming_metrics,
)
from ..protocols.streaming import TextStreamResponseProtocol
from ..response_helpers import EnhancedGenerateContentResponse, add_helpers
from .aggregator import ResponseAggregator
from .decoder import decode_stream
from .fork import TeeBranch, tee

logger = logging.getLogger(__name__)


class GenerateContentStreamResult:
    """
    Result of a streaming generate-content call.

    Attributes:
        stream: Async iterator of enhanced fragments, one per SSE frame.
            Finite and not restartable.
        response: Task resolving to the enhanced aggregate once the body is
            exhausted, or raising the error that ended the stream.

    Usage:
        result = process_stream(body_chunks)
        async with result:
            async for fragment in result.stream:
                print(fragment.text(), end="")
        final = await result.response

    Note:
        Awaiting ``response`` alone is enough; fragments the caller never
        reads are dropped once the live stream is closed.
    """

    __slots__ = ("__weakref__", "_branch", "_response", "_stream", "_warn")

    def __init__(
        self,
        live_branch: TeeBranch[dict[str, Any]],
        response: asyncio.Task[EnhancedGenerateContentResponse],
        warn_on_multiple_candidates: bool = True,
    ) -> None:
        self._branch = live_branch
        self._response = response
        self._warn = warn_on_multiple_candidates
        self._stream = self._iterate_live()

    async def _iterate_live(
        self,
    ) -> AsyncGenerator[EnhancedGenerateContentResponse, None]:
        try:
            async for fragment in self._branch:
                yield add_helpers(fragment, self._warn)
        finally:
            await self._branch.aclose()

    @property
    def stream(self) -> AsyncIterator[EnhancedGenerateContentResponse]:
        return self._stream

    @property
    def response(self) -> asyncio.Task[EnhancedGenerateContentResponse]:
        return self._response

    async def aclose(self) -> None:
        """
        Stop the live stream.

        The aggregate keeps running to completion. Idempotent. Safe to call
        from another task while the stream is being iterated: that reader
        stops at its next read.
        """
        await self._branch.aclose()
        if self._stream.ag_running:
            logger.debug("Live stream is being iterated; it stops on its next read")
            return
        await self._stream.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


async def _metered(
    source: AsyncIterable[str | bytes], metrics: StreamingMetrics
) -> AsyncIterator[str | bytes]:
    async for chunk in source:
        metrics.record_chunk()
        yield chunk


async def _aggregate(
    branch: TeeBranch[dict[str, Any]],
    config: StreamConfig,
    metrics: StreamingMetrics | None,
    prometheus: PrometheusStreamingMetrics | None,
) -> EnhancedGenerateContentResponse:
    aggregator = ResponseAggregator(default_role=config.default_role)
    started_at = time.monotonic()

    try:
        async with branch:
            async for fragment in branch:
                aggregator.add(fragment)
                if metrics is not None:
                    metrics.record_fragment()
                if prometheus is not None:
                    prometheus.observe_fragment()
        response = add_helpers(
            aggregator.result(), config.warn_on_multiple_candidates
        )
    except Exception as e:
        duration = time.monotonic() - started_at
        logger.warning(
            f"Stream failed after {aggregator.fragment_count} fragment(s) "
            f"in {duration:.1f}s: {type(e).__name__}: {e}"
        )
        if metrics is not None:
            metrics.record_error(e)
        if prometheus is not None:
            prometheus.observe_error(e, duration)
        raise

    duration = time.monotonic() - started_at
    logger.debug(
        f"Stream completed: {aggregator.fragment_count} fragment(s), "
        f"{aggregator.candidate_count} candidate(s) in {duration:.1f}s"
    )
    if metrics is not None:
        metrics.record_completion()
    if prometheus is not None:
        prometheus.observe_completion(duration)

    return response


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    # Mark the failure as retrieved; awaiting the task still raises it.
    if not task.cancelled():
        task.exception()


def process_stream(
    source: AsyncIterable[str | bytes],
    config: StreamConfig | None = None,
    metrics: StreamingMetrics | None = None,
) -> GenerateContentStreamResult:
    """
    Process a raw SSE response body.

    Must be called from a running event loop: the aggregate task is created
    immediately.

    Args:
        source: Async iterable of raw body chunks (str or bytes), in order.
        config: Processing options. Defaults to StreamConfig().
        metrics: Counters to update. Always used when given, even with
            config.metrics_enabled off. When omitted, the process-wide
            instance is used if config.metrics_enabled is set.

    Returns:
        The live stream and the deferred aggregate.

    Raises:
        ConfigurationError: If config is invalid.
    """
    config = config or StreamConfig()
    config.validate()

    prometheus: PrometheusStreamingMetrics | None = None
    if config.metrics_enabled:
        if metrics is None:
            metrics = get_streaming_metrics()
        prometheus = get_prometheus_streaming_metrics()
    if metrics is not None:
        metrics.record_stream_started()
        source = _metered(source, metrics)

    fragments = decode_stream(source, encoding=config.encoding)
    aggregate_branch, live_branch = tee(fragments, 2)

    task = asyncio.get_running_loop().create_task(
        _aggregate(aggregate_branch, config, metrics, prometheus)
    )
    task.add_done_callback(_retrieve_exception)

    return GenerateContentStreamResult(
        live_branch, task, config.warn_on_multiple_candidates
    )


def process_response(
    response: TextStreamResponseProtocol,
    config: StreamConfig | None = None,
    metrics: StreamingMetrics | None = None,
) -> GenerateContentStreamResult:
    """
    Process an opened streaming HTTP response.

    Args:
        response: Any object exposing ``aiter_text()``.

    Raises:
        TypeError: If response does not implement TextStreamResponseProtocol.
    """
    if not isinstance(response, TextStreamResponseProtocol):
        raise TypeError(
            f"Expected a response with aiter_text(), got {type(response).__name__}"
        )
    return process_stream(response.aiter_text(), config=config, metrics=metrics)


__all__ = [
    "GenerateContentStreamResult",
    "process_response",
    "process_stream",
]
