"""
Response units: complete responses and stream chunks.

``ChatCompletion`` is the non-streaming envelope (``choices[].message``);
``StreamChunk`` is one decoded SSE payload (``choices[].delta``). Both share
the accessor surface in :class:`_ChoiceAccessors`, which projects text,
reasoning text, finish status, tool calls and usage without mutating the
response. Every field is optional and unknown wire fields are ignored: an
absent field means the provider did not report it.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .message import Message
from .tool_call import ToolCall
from .usage import Usage

_LENIENT = ConfigDict(extra="ignore")


class ResponseMessage(BaseModel):
    """A finished assistant message inside a complete response."""

    model_config = _LENIENT

    role: Optional[str] = None
    content: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None


class Choice(BaseModel):
    model_config = _LENIENT

    index: int = 0
    message: ResponseMessage = Field(default_factory=ResponseMessage)
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None


class StreamDelta(BaseModel):
    """Incremental fragment of one choice."""

    model_config = _LENIENT

    role: Optional[str] = None
    content: Optional[str] = None
    reasoning_content: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None


class StreamChoice(BaseModel):
    model_config = _LENIENT

    index: int = 0
    delta: StreamDelta = Field(default_factory=StreamDelta)
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None


class _ChoiceAccessors:
    """Read-only projections shared by complete and streamed responses.

    Subclasses declare ``choices`` and ``usage`` fields and implement ``_body`` to
    return the message-like part of a choice.
    """

    def _body(self, choice: Any) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError

    def _first_body(self) -> Any:
        return self._body(self.choices[0]) if self.choices else None

    def content(self) -> Optional[str]:
        """Primary text of the first choice."""
        body = self._first_body()
        return body.content if body is not None else None

    def reasoning(self) -> Optional[str]:
        """Auxiliary reasoning text of the first choice."""
        body = self._first_body()
        return body.reasoning_content if body is not None else None

    def text(self) -> Optional[str]:
        """Primary text if present, otherwise reasoning text."""
        return self.content() or self.reasoning()

    def role(self) -> Optional[str]:
        body = self._first_body()
        return body.role if body is not None else None

    def tool_calls(self) -> List[ToolCall]:
        body = self._first_body()
        return list(body.tool_calls or []) if body is not None else []

    @property
    def finished(self) -> bool:
        """True once any choice carries a finish reason."""
        return any(c.finish_reason is not None for c in self.choices)

    def finish_reason(self) -> Optional[str]:
        return next((c.finish_reason for c in self.choices if c.finish_reason is not None), None)

    def token_usage(self) -> Optional[Usage]:
        return self.usage


class ChatCompletion(_ChoiceAccessors, BaseModel):
    """Complete (non-streaming) response."""

    model_config = _LENIENT

    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None
    choices: List[Choice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    system_fingerprint: Optional[str] = None

    def _body(self, choice: Choice) -> ResponseMessage:
        return choice.message

    def to_message(self, index: int = 0) -> Optional[Message]:
        """Convert a choice into a :class:`Message` suitable for a session.

        Tool calls take precedence over text when both are present. Returns
        ``None`` when the choice carries neither.
        """
        choice = next((c for c in self.choices if c.index == index), None)
        if choice is None:
            return None
        msg = choice.message
        if msg.tool_calls:
            calls = [tc.model_copy(update={"index": None}) for tc in msg.tool_calls]
            return Message.assistant_with_tools(calls)
        if msg.content is not None:
            return Message.assistant(msg.content)
        return None


class StreamChunk(_ChoiceAccessors, BaseModel):
    """One decoded streaming payload (a delta)."""

    model_config = _LENIENT

    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None
    choices: List[StreamChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    system_fingerprint: Optional[str] = None

    def _body(self, choice: StreamChoice) -> StreamDelta:
        return choice.delta


__all__ = [
    "ChatCompletion",
    "Choice",
    "ResponseMessage",
    "StreamChunk",
    "StreamChoice",
    "StreamDelta",
]
