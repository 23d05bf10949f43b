"""HTTP timeouts, overridable through the environment.

Only the transport applies timeouts. ``get_timeout_config`` re-reads these
variables whenever one of them changes (positive seconds; anything else keeps
the default):

- ``LLMHUB_TIMEOUT_HTTP_SECONDS``: whole non-streaming exchange
- ``LLMHUB_TIMEOUT_CONNECT_SECONDS``: connection setup
- ``LLMHUB_TIMEOUT_STREAM_SECONDS``: idle gap between stream chunks
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    http_timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 60.0

    def as_httpx(self, *, streaming: bool = False) -> httpx.Timeout:
        """``httpx.Timeout`` whose read limit depends on ``streaming``."""
        return httpx.Timeout(
            self.http_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.stream_timeout_seconds if streaming else self.http_timeout_seconds,
        )


_ENV_FOR_FIELD: Dict[str, str] = {
    "http_timeout_seconds": "LLMHUB_TIMEOUT_HTTP_SECONDS",
    "connect_timeout_seconds": "LLMHUB_TIMEOUT_CONNECT_SECONDS",
    "stream_timeout_seconds": "LLMHUB_TIMEOUT_STREAM_SECONDS",
}

_cache: Optional[Tuple[Tuple[Optional[str], ...], TimeoutConfig]] = None
_cache_lock = threading.Lock()


def _positive(raw: Optional[str]) -> Optional[float]:
    try:
        value = float(raw) if raw else None
    except ValueError:
        return None
    return value if value is not None and value > 0 else None


def get_timeout_config() -> TimeoutConfig:
    """Current timeouts; rebuilt only when the environment changed."""
    global _cache  # noqa: PLW0603 - module cache
    raw = tuple(os.getenv(name) for name in _ENV_FOR_FIELD.values())
    with _cache_lock:
        if _cache is not None and _cache[0] == raw:
            return _cache[1]
        overrides = {}
        for name, value in zip(_ENV_FOR_FIELD, raw):
            parsed = _positive(value)
            if parsed is not None:
                overrides[name] = parsed
        config = TimeoutConfig(**overrides)
        _cache = (raw, config)
        return config


__all__ = ["TimeoutConfig", "get_timeout_config"]
