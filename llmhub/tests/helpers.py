"""Shared fakes for the llmhub test suite.

``FakeTransport`` implements the transport contract in memory: it records
every call, returns a canned JSON document for one-shot exchanges, and serves
a scripted list of byte chunks (or exceptions) for streaming exchanges while
counting how many times the stream was opened and released.
"""
from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

Chunk = Union[bytes, Exception]


def sse(*payloads: Any, done: bool = True, ensure_ascii: bool = False) -> bytes:
    """Encode payloads as ``data:`` lines; dicts are JSON encoded.

    Non-ASCII text is sent as raw UTF-8 unless ``ensure_ascii`` is set, in
    which case it is escaped as ``\\uXXXX`` the way some providers do.
    """
    lines = []
    for p in payloads:
        body = p if isinstance(p, str) else json.dumps(p, ensure_ascii=ensure_ascii)
        lines.append(f"data: {body}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def delta_payload(
    content: Optional[str] = None,
    *,
    reasoning: Optional[str] = None,
    role: Optional[str] = None,
    finish_reason: Optional[str] = None,
    index: int = 0,
    usage: Optional[Dict[str, int]] = None,
    tool_calls: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build one streaming chunk document."""
    delta: Dict[str, Any] = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    if reasoning is not None:
        delta["reasoning_content"] = reasoning
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    doc: Dict[str, Any] = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "deepseek-chat",
        "choices": [{"index": index, "delta": delta, "finish_reason": finish_reason}],
    }
    if usage is not None:
        doc["usage"] = usage
    return doc


def completion_payload(content: str = "hello", *, reasoning: Optional[str] = None) -> Dict[str, Any]:
    """Build one complete (non-streaming) response document."""
    message: Dict[str, Any] = {"role": "assistant", "content": content}
    if reasoning is not None:
        message["reasoning_content"] = reasoning
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "deepseek-chat",
        "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
    }


@dataclass
class RecordedCall:
    kind: str
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]


@dataclass
class FakeTransport:
    """In-memory transport recording calls and stream lifecycle."""

    document: Dict[str, Any] = field(default_factory=completion_payload)
    chunks: Sequence[Chunk] = ()
    error: Optional[Exception] = None
    calls: List[RecordedCall] = field(default_factory=list)
    opened: int = 0
    released: int = 0
    pulled: int = 0

    def send_once(self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(RecordedCall("once", url, dict(headers), dict(body)))
        if self.error is not None:
            raise self.error
        return self.document

    def _iter_chunks(self) -> Iterator[bytes]:
        for chunk in self.chunks:
            if isinstance(chunk, Exception):
                raise chunk
            self.pulled += 1
            yield chunk

    @contextmanager
    def _stream(self) -> Iterator[Iterator[bytes]]:
        self.opened += 1
        try:
            yield self._iter_chunks()
        finally:
            self.released += 1

    def send_streaming(self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]):
        self.calls.append(RecordedCall("stream", url, dict(headers), dict(body)))
        if self.error is not None:
            raise self.error
        return self._stream()

    @property
    def open_streams(self) -> int:
        return self.opened - self.released


class ManualClock:
    """Settable monotonic clock for admission tests."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
