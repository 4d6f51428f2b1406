# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""genai-stream - Streaming response processing for generative-AI APIs.

This library consumes the server-sent-events body of a streamed
generate-content call and exposes it two ways at once: a live async stream
of response fragments and a single aggregated response, both built from the
same decoded data and consumable at independent rates.

Key Features:
    - Incremental SSE frame decoding across arbitrary network chunk boundaries
    - asyncio tee with independent branch lifecycles
    - Candidate-indexed aggregation of partial fragments
    - Typed response models with text and function-call accessors
    - Optional Prometheus metrics

Quick Start:
    >>> from genai_stream import process_response
    >>>
    >>> async with httpx.AsyncClient() as client:
    ...     async with client.stream("POST", url, json=body) as http_response:
    ...         result = process_response(http_response)
    ...         async for fragment in result.stream:
    ...             print(fragment.text(), end="")
    ...         final = await result.response

Main Exports:
    - process_stream, process_response: Run the pipeline
    - GenerateContentStreamResult: Live stream plus deferred aggregate
    - StreamConfig: Configuration options
    - EnhancedGenerateContentResponse: Typed response with accessors
    - GenerativeAIError and subclasses: Error hierarchy

Note: Prometheus metrics require the 'metrics' extra. Install with:
    pip install genai-stream[metrics]

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import StreamConfig
from .exceptions import (
    ConfigurationError,
    GenerativeAIError,
    IncompleteStreamError,
    ResponseError,
    StreamError,
    StreamParseError,
)
from .protocols import TextStreamResponseProtocol
from .response_helpers import (
    EnhancedGenerateContentResponse,
    add_helpers,
    format_block_error_message,
)
from .streaming import (
    FrameDecoder,
    GenerateContentStreamResult,
    ResponseAggregator,
    aggregate_responses,
    decode_stream,
    process_response,
    process_stream,
    tee,
)
from .types import (
    Candidate,
    Content,
    FinishReason,
    FunctionCall,
    GenerateContentResponse,
    Part,
    UsageMetadata,
)

__all__ = [
    "Candidate",
    # Exceptions
    "ConfigurationError",
    "Content",
    # Response helpers
    "EnhancedGenerateContentResponse",
    "FinishReason",
    # Streaming
    "FrameDecoder",
    "FunctionCall",
    # Types
    "GenerateContentResponse",
    "GenerateContentStreamResult",
    "GenerativeAIError",
    "IncompleteStreamError",
    "Part",
    "ResponseAggregator",
    "ResponseError",
    # Config
    "StreamConfig",
    "StreamError",
    "StreamParseError",
    # Protocols
    "TextStreamResponseProtocol",
    "UsageMetadata",
    "add_helpers",
    "aggregate_responses",
    "decode_stream",
    "format_block_error_message",
    "process_response",
    "process_stream",
    "tee",
]
