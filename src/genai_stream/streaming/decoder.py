# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Incremental SSE frame decoder.

This module turns an arbitrarily chunked ``alt=sse`` response body into one
parsed JSON object per frame. A frame is::

    data: <json-payload><terminator>

where the terminator is ``\\n\\n``, ``\\r\\r`` or ``\\r\\n\\r\\n``. Frames may
span several network reads and one read may carry several frames, so the
decoder keeps an accumulation buffer across reads and only consumes text
once a whole frame is present.
"""

from __future__ import annotations

import codecs
import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from typing import Any

from ..exceptions import IncompleteStreamError, StreamParseError

logger = logging.getLogger(__name__)

# Payload may not contain CR or LF, so a partially received terminator is
# never mistaken for payload text.
_FRAME_RE = re.compile(r"data: ([^\r\n]*)(?:\n\n|\r\r|\r\n\r\n)")


class FrameDecoder:
    """
    Stateful decoder for ``data:`` frames.

    Feed text chunks as they arrive with feed(), then drain the frames they
    completed with fragments(). Frames are parsed one at a time, so every
    fragment ahead of a bad payload has been handed out before the error is
    raised. Call close() at end of input to reject a dangling partial frame.

    Usage:
        decoder = FrameDecoder()
        for chunk in chunks:
            decoder.feed(chunk)
            for fragment in decoder.fragments():
                handle(fragment)
        decoder.close()
    """

    __slots__ = ("_buffer", "_closed", "_frames_decoded")

    def __init__(self) -> None:
        self._buffer = ""
        self._closed = False
        self._frames_decoded = 0

    def feed(self, chunk: str) -> None:
        """
        Append the next piece of response text to the buffer.

        Raises:
            RuntimeError: If the decoder was already closed.
        """
        if self._closed:
            raise RuntimeError("FrameDecoder is closed")
        self._buffer += chunk

    def next_fragment(self) -> dict[str, Any] | None:
        """
        Remove the frame at the front of the buffer and parse it.

        Returns:
            The parsed fragment, or None if no complete frame is buffered.

        Raises:
            StreamParseError: If the frame's payload is not a JSON object.
                The frame is consumed either way.
        """
        match = _FRAME_RE.match(self._buffer)
        if match is None:
            return None
        self._buffer = self._buffer[match.end() :]
        return self._parse_payload(match.group(1))

    def fragments(self) -> Iterator[dict[str, Any]]:
        """Yield every complete frame now in the buffer, in wire order."""
        fragment = self.next_fragment()
        while fragment is not None:
            yield fragment
            fragment = self.next_fragment()

    def close(self) -> None:
        """
        Signal end of input.

        Raises:
            IncompleteStreamError: If non-whitespace text is left in the buffer.
        """
        if self._closed:
            return
        self._closed = True
        if self._buffer.strip():
            raise IncompleteStreamError(self._buffer)
        self._buffer = ""

    def _parse_payload(self, payload: str) -> dict[str, Any]:
        try:
            parsed = json.loads(payload)
        except json.JSONDecodeError as e:
            raise StreamParseError(payload) from e
        if not isinstance(parsed, dict):
            raise StreamParseError(payload)
        self._frames_decoded += 1
        return parsed

    @property
    def buffered(self) -> str:
        """Text received but not yet part of a complete frame."""
        return self._buffer

    @property
    def frames_decoded(self) -> int:
        """Number of frames successfully parsed so far."""
        return self._frames_decoded


def _decode_bytes(
    text_decoder: codecs.IncrementalDecoder,
    data: bytes,
    encoding: str,
    final: bool = False,
) -> tuple[str, StreamParseError | None]:
    """
    Decode one read, stopping at the first undecodable byte.

    Returns:
        The text decoded before the bad byte, and the error to raise once
        that text has been consumed (None if the whole read decoded).
    """
    try:
        return text_decoder.decode(data, final), None
    except UnicodeDecodeError as e:
        error = StreamParseError(repr(e.object), f"Error decoding response bytes: {e}")
        error.__cause__ = e
        return e.object[: e.start].decode(encoding), error


async def decode_stream(
    source: AsyncIterable[str | bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[dict[str, Any]]:
    """
    Decode a raw response body into a lazy sequence of fragments.

    Chunks may be str or bytes; bytes are decoded incrementally, so a
    multi-byte character split across two reads is reassembled. Exceptions
    raised by the source propagate unchanged. Every fragment ahead of a bad
    frame or bad byte is yielded before the error, however the body was
    chunked.

    Args:
        source: Async iterable of raw body chunks.
        encoding: Encoding used for bytes chunks.

    Yields:
        One parsed fragment per frame, in wire order.

    Raises:
        StreamParseError: On an invalid payload or undecodable bytes.
        IncompleteStreamError: If input ends inside a frame.
    """
    decoder = FrameDecoder()
    text_decoder = codecs.getincrementaldecoder(encoding)()

    async for chunk in source:
        error: StreamParseError | None = None
        if isinstance(chunk, bytes):
            chunk, error = _decode_bytes(text_decoder, chunk, encoding)
        decoder.feed(chunk)
        for fragment in decoder.fragments():
            yield fragment
        if error is not None:
            raise error

    tail, error = _decode_bytes(text_decoder, b"", encoding, final=True)
    decoder.feed(tail)
    for fragment in decoder.fragments():
        yield fragment
    if error is not None:
        raise error

    logger.debug(
        f"Stream decoded: {decoder.frames_decoded} frame(s), "
        f"{len(decoder.buffered)} char(s) left over"
    )
    decoder.close()


__all__ = ["FrameDecoder", "decode_stream"]
