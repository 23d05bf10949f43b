"""
Message DTO used to build requests and seed sessions.

Defines the immutable `Message` model and the `Role` literal. The role decides
which fields are meaningful:

- ``system`` / ``user``: ``content`` only.
- ``assistant``: exactly one of ``content`` or a non-empty ``tool_calls`` list.
- ``tool``: ``content`` answering the call named by ``tool_call_id``.

Violations raise ``pydantic.ValidationError`` at construction, so an invalid
message never reaches a request document.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from .tool_call import ToolCall

Role = Literal["system", "user", "assistant", "tool"]


class Message(BaseModel):
    """A single chat message.

    Attributes:
        role: Author role.
        content: Text content (absent for tool-calling assistant messages).
        tool_calls: Tool invocations requested by the assistant.
        tool_call_id: Identifier of the call a ``tool`` message answers.
        name: Optional participant name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Role
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def _check_role_fields(self) -> "Message":
        has_content = self.content is not None
        has_calls = bool(self.tool_calls)
        if self.role == "assistant":
            if has_content == has_calls:
                raise ValueError("assistant message needs exactly one of content or tool_calls")
        elif has_calls:
            raise ValueError(f"{self.role} message cannot carry tool_calls")
        elif not has_content:
            raise ValueError(f"{self.role} message requires content")
        if self.role == "tool":
            if not self.tool_call_id:
                raise ValueError("tool message requires tool_call_id")
        elif self.tool_call_id is not None:
            raise ValueError(f"{self.role} message cannot carry tool_call_id")
        return self

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)

    @classmethod
    def assistant_with_tools(cls, tool_calls: List[ToolCall]) -> "Message":
        return cls(role="assistant", tool_calls=list(tool_calls))

    @classmethod
    def tool(cls, content: str, tool_call_id: str) -> "Message":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize for the request body, omitting absent fields."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ["Message", "Role"]
