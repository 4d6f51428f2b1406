# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `genai_stream_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`

Label Best Practices:
    To prevent label cardinality explosion, use only:
    - `error_type` - Failure kind (enum: parse, incomplete, upstream)

Usage:
    >>> from genai_stream.observability.constants import FRAGMENTS_DECODED_TOTAL
    >>> print(FRAGMENTS_DECODED_TOTAL)
    'genai_stream_fragments_decoded_total'
"""

METRIC_PREFIX = "genai_stream"
"""Prefix for all Prometheus metrics in this library."""

FRAGMENTS_DECODED_TOTAL = f"{METRIC_PREFIX}_fragments_decoded_total"
"""Total response fragments decoded from SSE frames."""

STREAMS_COMPLETED_TOTAL = f"{METRIC_PREFIX}_streams_completed_total"
"""Total streams aggregated to completion."""

STREAM_ERRORS_TOTAL = f"{METRIC_PREFIX}_stream_errors_total"
"""Total streams that ended in an error, by error_type."""

STREAM_DURATION_SECONDS = f"{METRIC_PREFIX}_stream_duration_seconds"
"""Time from stream start to aggregate resolution."""

STREAM_DURATION_BUCKETS = (0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0)
"""Histogram buckets for stream duration, up to 5 minutes."""

ERROR_TYPE_PARSE = "parse"
ERROR_TYPE_INCOMPLETE = "incomplete"
ERROR_TYPE_UPSTREAM = "upstream"

__all__ = [
    "ERROR_TYPE_INCOMPLETE",
    "ERROR_TYPE_PARSE",
    "ERROR_TYPE_UPSTREAM",
    "FRAGMENTS_DECODED_TOTAL",
    "METRIC_PREFIX",
    "STREAMS_COMPLETED_TOTAL",
    "STREAM_DURATION_BUCKETS",
    "STREAM_DURATION_SECONDS",
    "STREAM_ERRORS_TOTAL",
]
