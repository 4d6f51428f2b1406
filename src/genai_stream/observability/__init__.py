# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for genai-stream.

Classes:
    StreamingMetrics: Dataclass counting stream lifecycle events.
    PrometheusStreamingMetrics: Optional Prometheus metrics for observability.

Functions:
    get_streaming_metrics: Get the process-wide StreamingMetrics instance.
    get_prometheus_streaming_metrics: Get or create the Prometheus metrics singleton.
    reset_prometheus_streaming_metrics: Reset the Prometheus metrics singleton.

Constants:
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available.
    All metric name constants from constants module.
"""

from .constants import (
    ERROR_TYPE_INCOMPLETE,
    ERROR_TYPE_PARSE,
    ERROR_TYPE_UPSTREAM,
    FRAGMENTS_DECODED_TOTAL,
    METRIC_PREFIX,
    STREAM_DURATION_BUCKETS,
    STREAM_DURATION_SECONDS,
    STREAM_ERRORS_TOTAL,
    STREAMS_COMPLETED_TOTAL,
)
from .metrics import (
    PROMETHEUS_AVAILABLE,
    PrometheusStreamingMetrics,
    StreamingMetrics,
    classify_error,
    get_prometheus_streaming_metrics,
    get_streaming_metrics,
    reset_prometheus_streaming_metrics,
)

__all__ = [
    "ERROR_TYPE_INCOMPLETE",
    "ERROR_TYPE_PARSE",
    "ERROR_TYPE_UPSTREAM",
    "FRAGMENTS_DECODED_TOTAL",
    "METRIC_PREFIX",
    "PROMETHEUS_AVAILABLE",
    "STREAMS_COMPLETED_TOTAL",
    "STREAM_DURATION_BUCKETS",
    "STREAM_DURATION_SECONDS",
    "STREAM_ERRORS_TOTAL",
    "PrometheusStreamingMetrics",
    "StreamingMetrics",
    "classify_error",
    "get_prometheus_streaming_metrics",
    "get_streaming_metrics",
    "reset_prometheus_streaming_metrics",
]
