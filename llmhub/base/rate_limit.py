"""Per-provider admission check.

``RequestRateLimiter`` keeps the time of the last admitted request for each
provider. A request is admitted only if at least ``min_interval_seconds``
have passed since the previous admitted request to the same provider;
otherwise ``RateLimited`` is raised and nothing is sent. Check and record
happen under one lock, so two threads cannot both be admitted inside the
same interval.

The limiter is created by the client, shared by every call the client makes,
and cleared when the client closes. It never sleeps or retries.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional

from .constants import DEFAULT_MIN_REQUEST_INTERVAL_SECONDS
from .errors import RateLimited


class RequestRateLimiter:
    """Last-request timestamp table keyed by provider.

    Parameters:
        min_interval_seconds: Minimum spacing between two admitted requests
            to the same provider. ``0`` disables the check.
        clock: Monotonic clock in seconds (injectable for tests).
    """

    def __init__(
        self,
        min_interval_seconds: float = DEFAULT_MIN_REQUEST_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        self.min_interval_seconds = float(min_interval_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._last: Dict[str, float] = {}
        self._closed = False

    def check_and_record(self, provider: str, model: Optional[str] = None) -> None:
        """Admit one request to ``provider`` or raise.

        Raises:
            RateLimited: The previous request to ``provider`` was admitted less
                than ``min_interval_seconds`` ago.
            RuntimeError: The limiter has been closed.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("rate limiter is closed")
            now = self._clock()
            last = self._last.get(provider)
            if last is not None:
                elapsed = now - last
                if elapsed < self.min_interval_seconds:
                    raise RateLimited(provider, self.min_interval_seconds - elapsed, model=model)
            self._last[provider] = now

    def last_request_at(self, provider: str) -> Optional[float]:
        with self._lock:
            return self._last.get(provider)

    def reset(self, provider: Optional[str] = None) -> None:
        """Forget the timestamp for ``provider`` (or for every provider)."""
        with self._lock:
            if provider is None:
                self._last.clear()
            else:
                self._last.pop(provider, None)

    def close(self) -> None:
        with self._lock:
            self._last.clear()
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed


__all__ = ["RequestRateLimiter"]
