"""Fold stream deltas into a complete response.

Deltas are merged per choice index: text and reasoning fragments are
concatenated in arrival order, tool-call fragments are merged by their
fragment ``index`` (argument strings concatenated), and the last reported
finish reason and usage win.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..models_parts.response import ChatCompletion, Choice, ResponseMessage, StreamChunk
from ..models_parts.tool_call import ToolCall, ToolCallFunction
from ..models_parts.usage import Usage


@dataclass
class _ToolCallParts:
    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    arguments: List[str] = field(default_factory=list)

    def build(self) -> ToolCall:
        return ToolCall(
            id=self.id,
            type=self.type or "function",
            function=ToolCallFunction(name=self.name, arguments="".join(self.arguments)),
        )


@dataclass
class _ChoiceParts:
    role: Optional[str] = None
    content: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)
    tool_calls: Dict[int, _ToolCallParts] = field(default_factory=dict)
    finish_reason: Optional[str] = None

    def build(self, index: int) -> Choice:
        calls = [self.tool_calls[k].build() for k in sorted(self.tool_calls)]
        message = ResponseMessage(
            role=self.role or "assistant",
            content="".join(self.content) if self.content else None,
            reasoning_content="".join(self.reasoning) if self.reasoning else None,
            tool_calls=calls or None,
        )
        return Choice(index=index, message=message, finish_reason=self.finish_reason)


def _merge_tool_call(parts: _ChoiceParts, fragment: ToolCall, position: int) -> None:
    key = fragment.index if fragment.index is not None else position
    slot = parts.tool_calls.setdefault(key, _ToolCallParts())
    slot.id = slot.id or fragment.id
    slot.type = slot.type or fragment.type
    if fragment.function is not None:
        slot.name = slot.name or fragment.function.name
        if fragment.function.arguments:
            slot.arguments.append(fragment.function.arguments)


def accumulate_chunks(chunks: Iterable[StreamChunk]) -> ChatCompletion:
    """Accumulate stream chunks into a :class:`ChatCompletion`.

    Envelope fields (``id``, ``model``, ``created``) come from the first chunk
    that reports them. An empty input yields a completion with no choices.
    """
    choices: Dict[int, _ChoiceParts] = {}
    usage: Optional[Usage] = None
    envelope: Dict[str, object] = {}
    for chunk in chunks:
        for name in ("id", "model", "created", "system_fingerprint"):
            value = getattr(chunk, name)
            if value is not None and name not in envelope:
                envelope[name] = value
        if chunk.usage is not None:
            usage = chunk.usage
        for choice in chunk.choices:
            parts = choices.setdefault(choice.index, _ChoiceParts())
            delta = choice.delta
            if delta.role:
                parts.role = delta.role
            if delta.content:
                parts.content.append(delta.content)
            if delta.reasoning_content:
                parts.reasoning.append(delta.reasoning_content)
            for position, fragment in enumerate(delta.tool_calls or []):
                _merge_tool_call(parts, fragment, position)
            if choice.finish_reason is not None:
                parts.finish_reason = choice.finish_reason
    return ChatCompletion(
        object="chat.completion",
        choices=[choices[i].build(i) for i in sorted(choices)],
        usage=usage,
        **envelope,
    )


__all__ = ["accumulate_chunks"]
