"""
Tool-call descriptors shared by request messages and responses.

In a complete response or an assistant request message a tool call carries an
``id``, a ``type`` (``"function"``) and a function name plus an opaque argument
string. In a stream delta the same shape arrives in fragments keyed by
``index``; any field may be absent in a given fragment.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ToolCallFunction(BaseModel):
    """Function name and (possibly partial) JSON argument string."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCall(BaseModel):
    """A tool invocation requested by the assistant.

    Attributes:
        id: Provider-assigned call identifier answered by a ``tool`` message.
        type: Call type, ``"function"`` for all current providers.
        function: Name and argument payload.
        index: Fragment position within a streamed delta (absent otherwise).
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    type: Optional[str] = None
    function: Optional[ToolCallFunction] = None
    index: Optional[int] = None

    @classmethod
    def function_call(cls, call_id: str, name: str, arguments: str) -> "ToolCall":
        return cls(id=call_id, type="function", function=ToolCallFunction(name=name, arguments=arguments))


__all__ = ["ToolCall", "ToolCallFunction"]
