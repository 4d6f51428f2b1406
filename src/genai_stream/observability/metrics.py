# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Stream processing metrics.

This module provides:
1. StreamingMetrics - Dataclass counting stream lifecycle events
2. PrometheusStreamingMetrics - Optional Prometheus metrics for observability

Usage:
    metrics = StreamingMetrics()

    metrics.record_stream_started()
    metrics.record_chunk()
    metrics.record_fragment()
    metrics.record_completion()

    stats = metrics.get_stats()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..exceptions import IncompleteStreamError, ResponseError, StreamError
from .constants import (
    ERROR_TYPE_INCOMPLETE,
    ERROR_TYPE_PARSE,
    ERROR_TYPE_UPSTREAM,
    FRAGMENTS_DECODED_TOTAL,
    STREAM_DURATION_BUCKETS,
    STREAM_DURATION_SECONDS,
    STREAM_ERRORS_TOTAL,
    STREAMS_COMPLETED_TOTAL,
)

logger = logging.getLogger(__name__)

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType, Histogram as HistogramType
else:
    CounterType = object
    HistogramType = object

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter, Histogram as _Histogram

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    PROMETHEUS_AVAILABLE = False


def classify_error(error: BaseException) -> str:
    """
    Map a stream failure to its error_type label.

    Returns:
        "incomplete" for a stream cut mid-frame, "parse" for any other
        decode failure or a payload that does not match the response
        schema, "upstream" for errors raised by the transport.
    """
    if isinstance(error, IncompleteStreamError):
        return ERROR_TYPE_INCOMPLETE
    if isinstance(error, (StreamError, ResponseError)):
        return ERROR_TYPE_PARSE
    return ERROR_TYPE_UPSTREAM


@dataclass
class StreamingMetrics:
    """
    Stream lifecycle counters.

    Thread Safety:
        Simple counter increments rely on the GIL. Streams run on one event
        loop, so there is no contention in the common case.

    Example:
        >>> metrics = StreamingMetrics()
        >>> metrics.record_fragment()
        >>> metrics.fragments_decoded
        1
    """

    streams_started: int = 0
    streams_completed: int = 0
    streams_failed: int = 0

    chunks_received: int = 0
    fragments_decoded: int = 0

    # Failure breakdown
    parse_errors: int = 0
    incomplete_streams: int = 0
    upstream_errors: int = 0

    def record_stream_started(self) -> None:
        self.streams_started += 1

    def record_chunk(self) -> None:
        """Record one raw body chunk read from the transport."""
        self.chunks_received += 1

    def record_fragment(self) -> None:
        """Record one decoded fragment delivered to the aggregator."""
        self.fragments_decoded += 1

    def record_completion(self) -> None:
        self.streams_completed += 1

    def record_error(self, error: BaseException) -> None:
        """
        Record a stream that ended in error.

        Args:
            error: The exception the stream terminated with.
        """
        self.streams_failed += 1
        error_type = classify_error(error)
        if error_type == ERROR_TYPE_INCOMPLETE:
            self.incomplete_streams += 1
        elif error_type == ERROR_TYPE_PARSE:
            self.parse_errors += 1
        else:
            self.upstream_errors += 1

    def get_success_rate(self) -> float:
        """
        Fraction of finished streams that completed without error.

        Returns 1.0 if no stream has finished yet.
        """
        finished = self.streams_completed + self.streams_failed
        return self.streams_completed / finished if finished > 0 else 1.0

    def get_stats(self) -> dict[str, Any]:
        """Return metrics as a JSON-serializable dictionary."""
        return {
            "streams_started": self.streams_started,
            "streams_completed": self.streams_completed,
            "streams_failed": self.streams_failed,
            "success_rate": self.get_success_rate(),
            "chunks_received": self.chunks_received,
            "fragments_decoded": self.fragments_decoded,
            "parse_errors": self.parse_errors,
            "incomplete_streams": self.incomplete_streams,
            "upstream_errors": self.upstream_errors,
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.streams_started = 0
        self.streams_completed = 0
        self.streams_failed = 0
        self.chunks_received = 0
        self.fragments_decoded = 0
        self.parse_errors = 0
        self.incomplete_streams = 0
        self.upstream_errors = 0


class PrometheusStreamingMetrics:
    """
    Optional Prometheus metrics for stream processing.

    Only instantiated if prometheus_client is available.

    Metrics:
        - genai_stream_fragments_decoded_total: Counter of decoded fragments
        - genai_stream_streams_completed_total: Counter of completed streams
        - genai_stream_stream_errors_total: Counter of failed streams by error_type
        - genai_stream_stream_duration_seconds: Histogram of stream durations
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus streaming metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None or Histogram is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install genai-stream[metrics]"
            )

        self.fragments_decoded = Counter(
            FRAGMENTS_DECODED_TOTAL,
            "Total response fragments decoded from SSE frames",
            registry=registry,
        )

        self.streams_completed = Counter(
            STREAMS_COMPLETED_TOTAL,
            "Total streams aggregated to completion",
            registry=registry,
        )

        self.stream_errors = Counter(
            STREAM_ERRORS_TOTAL,
            "Total streams that ended in an error",
            ["error_type"],  # Values: parse, incomplete, upstream
            registry=registry,
        )

        self.stream_duration_seconds = Histogram(
            STREAM_DURATION_SECONDS,
            "Duration of streamed responses",
            buckets=STREAM_DURATION_BUCKETS,
            registry=registry,
        )

        logger.info("Prometheus streaming metrics initialized")

    def observe_fragment(self) -> None:
        self.fragments_decoded.inc()

    def observe_completion(self, duration_seconds: float) -> None:
        self.streams_completed.inc()
        self.stream_duration_seconds.observe(duration_seconds)

    def observe_error(self, error: BaseException, duration_seconds: float) -> None:
        self.stream_errors.labels(error_type=classify_error(error)).inc()
        self.stream_duration_seconds.observe(duration_seconds)


# Module-level singleton for Prometheus metrics (optional)
_prometheus_streaming_metrics: PrometheusStreamingMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_streaming_metrics() -> PrometheusStreamingMetrics | None:
    """
    Get or create the Prometheus streaming metrics singleton.

    Double-checked locking keeps prometheus_client from seeing a duplicate
    registration when two threads initialize at once.

    Returns:
        PrometheusStreamingMetrics instance if prometheus_client is available,
        None otherwise.
    """
    global _prometheus_streaming_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_streaming_metrics is None:
        with _prometheus_lock:
            if _prometheus_streaming_metrics is None:
                try:
                    _prometheus_streaming_metrics = PrometheusStreamingMetrics()
                except Exception as e:
                    logger.warning(
                        f"Failed to initialize Prometheus streaming metrics: {e}"
                    )
                    return None

    return _prometheus_streaming_metrics


def reset_prometheus_streaming_metrics() -> None:
    """Reset the Prometheus streaming metrics singleton (mainly for testing)."""
    global _prometheus_streaming_metrics
    _prometheus_streaming_metrics = None


# Process-wide counters shared by every stream unless a caller passes its own
_default_metrics = StreamingMetrics()


def get_streaming_metrics() -> StreamingMetrics:
    """Return the process-wide StreamingMetrics instance."""
    return _default_metrics


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "PrometheusStreamingMetrics",
    "StreamingMetrics",
    "classify_error",
    "get_prometheus_streaming_metrics",
    "get_streaming_metrics",
    "reset_prometheus_streaming_metrics",
]
