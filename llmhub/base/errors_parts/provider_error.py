"""Root of the llmhub exception hierarchy."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Failure of one exchange, tagged with its :class:`ErrorCode`.

    ``provider`` and ``model`` may be filled in after construction by the
    layer that knows them (the client enriches errors raised by the
    transport). ``retryable`` is advisory only; llmhub never retries. ``raw``
    keeps the underlying exception, if any.
    """

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f"{self.provider or '-'}:{self.model or '-'}"
        return f"{where} {self.code.value}: {self.message}"

    def user_message(self) -> str:
        """Message suitable for showing to an end user."""
        return self.message


__all__ = ["ProviderError"]
