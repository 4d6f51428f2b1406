from collections.abc import AsyncIterator

from genai_stream.protocols import TextStreamResponseProtocol
from genai_stream.protocols.streaming import (
    TextStreamResponseProtocol as StreamingModuleProtocol,
)


class TestProtocols:
    def test_text_stream_protocol_runtime_checkable(self):
        """Verify TextStreamResponseProtocol is runtime checkable."""

        class ValidResponse:
            async def aiter_text(self) -> AsyncIterator[str]:
                yield 'data: {"candidates": []}\n\n'

        assert isinstance(ValidResponse(), TextStreamResponseProtocol)

    def test_text_stream_protocol_rejects_missing_method(self):
        """Verify objects without aiter_text() do not satisfy the protocol."""

        class BytesOnlyResponse:
            async def aiter_bytes(self) -> AsyncIterator[bytes]:
                yield b""

        assert not isinstance(BytesOnlyResponse(), TextStreamResponseProtocol)
        assert not isinstance("text", TextStreamResponseProtocol)

    def test_reexported_from_package(self):
        """Verify the package re-exports the same protocol object."""
        assert TextStreamResponseProtocol is StreamingModuleProtocol
