"""Stream event: one item of a decoded response stream.

Each event holds either a parsed :class:`StreamChunk` or the error produced
while obtaining it. Decode errors are per-item and non-fatal; any other
error is the last item of its stream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import DecodeError, ProviderError
from ..models_parts.response import StreamChunk


@dataclass(frozen=True)
class StreamEvent:
    """A decoded delta or the error that replaced it."""

    chunk: Optional[StreamChunk] = None
    error: Optional[ProviderError] = None

    def is_error(self) -> bool:
        return self.error is not None

    def is_fatal(self) -> bool:
        """True for errors that end the stream (anything but a decode error)."""
        return self.error is not None and not isinstance(self.error, DecodeError)

    def unwrap(self) -> StreamChunk:
        """Return the chunk or raise the carried error."""
        if self.error is not None:
            raise self.error
        assert self.chunk is not None  # nosec B101 - constructor invariant
        return self.chunk

    @classmethod
    def of(cls, chunk: StreamChunk) -> "StreamEvent":
        return cls(chunk=chunk)

    @classmethod
    def failed(cls, error: ProviderError) -> "StreamEvent":
        return cls(error=error)


__all__ = ["StreamEvent"]
