# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for raw streaming HTTP responses."""

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class TextStreamResponseProtocol(Protocol):
    """
    Protocol for an opened streaming HTTP response.

    The request layer owns the connection; this library only reads the
    decoded body text. Async HTTP client responses (for example
    ``httpx.Response``) satisfy this protocol as is.
    """

    def aiter_text(self) -> AsyncIterator[str]:
        """Iterate over the response body as decoded text chunks."""
        ...
