"""Streaming metrics data structures.

Isolated within the streaming package to keep the stream wrapper small.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models_parts.usage import Usage


@dataclass
class StreamMetrics:
    """Collected metrics for a single streamed exchange.

    Attributes:
        emitted: Number of successfully decoded deltas handed to the consumer.
        errors: Number of error items (decode errors plus any final error).
        time_to_first_delta_ms: Latency from stream open to the first delta.
        total_duration_ms: Latency from stream open to release.
        usage: Last usage block reported by the provider, if any.
    """

    emitted: int = 0
    errors: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    usage: Optional[Usage] = None

    @property
    def tokens(self) -> Optional[Dict[str, Optional[int]]]:
        return self.usage.as_tokens() if self.usage is not None else None


__all__ = ["StreamMetrics"]
