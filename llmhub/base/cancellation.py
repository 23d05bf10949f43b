"""Cooperative cancellation for streams.

A :class:`CancellationToken` is checked by ``DeltaStream`` before each item is
handed out. Cancelling never interrupts a blocking network read; the stream
stops at the next item boundary and releases its connection.
"""

from __future__ import annotations

import threading
from typing import List, Optional


class CancelledError(RuntimeError):
    """Raised by :meth:`CancellationToken.raise_if_cancelled`."""


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    Tokens form a tree: cancelling a token cancels every token linked below
    it (including ones linked afterwards), never the ones above. The first
    reason given is kept.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._event = threading.Event()
        self._mutex = threading.Lock()
        self._reason: Optional[str] = None
        self._linked: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel this token and everything linked below it. Idempotent."""
        with self._mutex:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            linked = tuple(self._linked)
        for token in linked:
            token.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` below this one and return it."""
        with self._mutex:
            self._linked.append(token)
            already = self._event.is_set()
        if already:
            token.cancel(self._reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; True if cancelled."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        """Raise :class:`CancelledError` once the token is cancelled."""
        if self._event.is_set():
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken", "CancelledError"]
