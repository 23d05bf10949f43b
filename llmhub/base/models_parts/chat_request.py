"""
ChatRequest document and the prepared (URL-resolved) request.

A ``ChatRequest`` owns a copy of the message list it was built from, so later
changes to a session never leak into an already-built request. Its wire form
flattens the options next to ``model`` and ``messages`` and never carries
``null`` for an unset option.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from ..dto.request_options import RequestOptions
from .message import Message


@dataclass(frozen=True)
class ChatRequest:
    """Serializable chat request document.

    Attributes:
        model: Target model identifier.
        messages: Ordered, owned tuple of :class:`Message` values.
        options: Generation options flattened into the body.
    """

    model: str
    messages: Tuple[Message, ...]
    options: RequestOptions = field(default_factory=RequestOptions)

    @property
    def stream(self) -> bool:
        return bool(self.options.stream)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body: ``{"model", "messages", **options}``."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_wire() for m in self.messages],
        }
        body.update(self.options.to_wire())
        return body


@dataclass(frozen=True)
class PreparedRequest:
    """A request document paired with its resolved endpoint.

    ``provider`` and ``capability`` are kept as plain strings so logging and
    error enrichment need no registry import.
    """

    url: str
    provider: str
    capability: str
    request: ChatRequest

    @property
    def model(self) -> str:
        return self.request.model

    @property
    def stream(self) -> bool:
        return self.request.stream

    def body(self) -> Dict[str, Any]:
        return self.request.to_payload()


__all__ = ["ChatRequest", "PreparedRequest"]
