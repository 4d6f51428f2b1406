# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Stream processing configuration.

This module provides the configuration dataclass consumed by the stream
processor, the frame decoder and the aggregator.
"""

import codecs
from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass
class StreamConfig:
    """
    Configuration for processing a streamed generate-content response.

    All fields have defaults matching the service's wire conventions, so
    ``StreamConfig()`` is valid for the common case.
    """

    # === Decoding ===

    encoding: str = "utf-8"
    """Text encoding used when the raw stream delivers bytes."""

    # === Aggregation ===

    default_role: str = "user"
    """Role assigned to aggregated content when no fragment supplies one."""

    # === Response helpers ===

    warn_on_multiple_candidates: bool = True
    """Log a warning when text() is read from a multi-candidate response."""

    # === Metrics and Monitoring ===

    metrics_enabled: bool = True
    """Record stream lifecycle metrics."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Check the configuration for invalid values.

        Raises:
            ConfigurationError: If the role is empty or the encoding is unknown.
        """
        if not self.default_role:
            raise ConfigurationError("default_role must be a non-empty string")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigurationError(f"Unknown encoding: {self.encoding!r}") from e


__all__ = ["StreamConfig"]
