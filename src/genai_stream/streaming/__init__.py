# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Streaming response processing.

This module turns the raw SSE body of a streamed generate-content call into
a live sequence of fragments and one aggregated response, both derived from
the same decoded data.

Classes:
    FrameDecoder: Incremental parser for ``data:`` frames.
    TeeBranch: One independent reader of a forked async iterator.
    ResponseAggregator: Folds fragments into one response by candidate index.
    GenerateContentStreamResult: Live stream plus deferred aggregate.

Functions:
    decode_stream: Decode raw chunks into fragments.
    tee: Fork an async iterable into independent branches.
    aggregate_responses, aggregate_stream: Fold fragments.
    process_stream, process_response: Run the whole pipeline.
"""

from .aggregator import ResponseAggregator, aggregate_responses, aggregate_stream
from .decoder import FrameDecoder, decode_stream
from .fork import TeeBranch, tee
from .processor import GenerateContentStreamResult, process_response, process_stream

__all__ = [
    "FrameDecoder",
    "GenerateContentStreamResult",
    "ResponseAggregator",
    "TeeBranch",
    "aggregate_responses",
    "aggregate_stream",
    "decode_stream",
    "process_response",
    "process_stream",
    "tee",
]
