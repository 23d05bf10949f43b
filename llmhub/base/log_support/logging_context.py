"""Per-exchange identifiers attached to every log event."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Provider, model and request ids of one exchange.

    ``to_dict`` flattens ``extra`` into the top level and leaves out unset
    values, so events only carry what is known.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    capability: Optional[str] = None
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        for key, value in (self.extra or {}).items():
            if value is not None:
                out[key] = value
        return out


__all__ = ["LogContext"]
