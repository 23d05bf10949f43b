"""Bounded conversation history.

``ChatSession`` is caller-owned data: the client reads it to seed a request
and never writes to it. After every mutation the history holds at most
``max_history`` messages; when the bound is exceeded the oldest messages are
dropped first.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from .constants import DEFAULT_MAX_HISTORY
from .models_parts.message import Message


class ChatSession:
    """Ordered, bounded message history for one conversation.

    Thread safety: Not thread-safe. A session belongs to one caller.
    """

    def __init__(
        self,
        model: str,
        provider: Optional[str] = None,
        *,
        max_history: int = DEFAULT_MAX_HISTORY,
        session_id: Optional[str] = None,
        messages: Iterable[Message] = (),
    ) -> None:
        if max_history < 0:
            raise ValueError("max_history must be >= 0")
        self.id = session_id or str(uuid4())
        self.model = model
        self.provider = provider
        self._max_history = max_history
        self._messages: List[Message] = []
        for message in messages:
            self.add_message(message)

    @property
    def max_history(self) -> int:
        """Upper bound on the number of retained messages."""
        return self._max_history

    def _evict(self) -> None:
        overflow = len(self._messages) - self._max_history
        if overflow > 0:
            del self._messages[:overflow]

    def add_message(self, message: Message) -> None:
        """Append ``message``, evicting the oldest entries beyond the bound."""
        self._messages.append(message)
        self._evict()

    def extend(self, messages: Iterable[Message]) -> None:
        """Append ``messages`` in order; eviction applies after each one."""
        for message in messages:
            self.add_message(message)

    def clear_history(self) -> None:
        """Drop every message; the bound and session id are kept."""
        self._messages.clear()

    def set_max_history(self, max_history: int) -> None:
        """Change the bound and re-apply eviction immediately.

        Raises:
            ValueError: If ``max_history`` is negative.
        """
        if max_history < 0:
            raise ValueError("max_history must be >= 0")
        self._max_history = max_history
        self._evict()

    def messages(self) -> Tuple[Message, ...]:
        """Return the history, oldest first, as an immutable snapshot."""
        return tuple(self._messages)

    get_messages = messages

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"ChatSession(id={self.id!r}, model={self.model!r}, provider={self.provider!r}, "
            f"messages={len(self._messages)}, max_history={self._max_history})"
        )


__all__ = ["ChatSession"]
