"""Error types raised by the gNMI -> N-Triples pipeline."""
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    pass


class DecodeError(ConversionError):
    pass


class EnvelopeDecodeError(DecodeError):
    """Top-level document is not valid JSON or not the expected shape. Fatal."""


class CounterDecodeError(DecodeError):
    pass


class ExtractionError(ConversionError):
    pass


class EmitError(ConversionError):
    pass


class ResponseProcessingError(ConversionError):
    """A single update failed. The underlying error is kept as __cause__."""

    def __init__(self, message: str, source: str = "", path: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.path = path

    def as_dict(self) -> dict:
        return {
            "source": self.source,
            "path": self.path,
            "error": str(self),
            "kind": type(self.__cause__).__name__ if self.__cause__ else None,
        }


class ConfigError(Exception):
    pass
