"""Server-sent event decoder for chat-completion streams.

Turns the raw byte chunks of a ``text/event-stream`` response into an ordered
sequence of :class:`StreamEvent` items.

State machine
-------------
``OPEN`` → ``READING`` (first chunk received) → ``CLOSED``. ``CLOSED`` is
reached on the ``data: [DONE]`` sentinel, on input exhaustion, or on a
transport failure; nothing is produced afterwards.

Line handling
-------------
- Lines are framed on raw bytes and end at ``\\n``; a trailing ``\\r`` is
  dropped. Each complete line is then decoded as strict UTF-8, so a
  multi-byte character split across chunks survives and invalid UTF-8 in a
  payload becomes a :class:`DecodeError` item instead of replacement text.
- Lines not starting with ``data: `` carry no payload and are discarded
  (blank keep-alives, ``event:``/``id:`` fields, ``:`` comments).
- ``data: [DONE]`` closes the stream successfully.
- Any other payload is parsed into a :class:`StreamChunk`. A payload that is
  not valid JSON or not a chunk object yields a :class:`DecodeError` item and
  decoding continues with the next line.
- A transport failure while reading yields one final error item.
- A final line without a terminating newline is still processed at end of
  input.

A stream that ends without the sentinel ends quietly; ``sentinel_seen``
stays ``False`` so the owner can report it as truncated.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

import httpx
from pydantic import ValidationError

from ..errors import DecodeError, ProviderError
from ..http.transport import to_transport_error
from ..models_parts.response import StreamChunk
from .stream_event import StreamEvent

DATA_PREFIX = "data: "
_DATA_PREFIX_BYTES = DATA_PREFIX.encode("ascii")
DONE_SENTINEL = "[DONE]"


class DecoderState(str, Enum):
    OPEN = "open"
    READING = "reading"
    CLOSED = "closed"


class SSEDecoder:
    """Incremental SSE line framer and payload decoder.

    One instance decodes one stream. ``feed``/``flush`` expose the framing
    layer on its own; :meth:`events` drives the whole state machine.
    """

    def __init__(self, *, provider: Optional[str] = None, model: Optional[str] = None) -> None:
        self.provider = provider
        self.model = model
        self.state = DecoderState.OPEN
        self.sentinel_seen = False
        self._buffer = b""

    # Framing -----------------------------------------------------------
    def feed(self, data: bytes) -> List[bytes]:
        """Add ``data`` and return every raw line it completed."""
        self._buffer += data
        if b"\n" not in self._buffer:
            return []
        *complete, self._buffer = self._buffer.split(b"\n")
        return [line[:-1] if line.endswith(b"\r") else line for line in complete]

    def flush(self) -> List[bytes]:
        """Return the unterminated trailing line, if any, and reset the buffer."""
        rest, self._buffer = self._buffer, b""
        rest = rest[:-1] if rest.endswith(b"\r") else rest
        return [rest] if rest else []

    # Payloads ----------------------------------------------------------
    def decode_line(self, line: Union[bytes, str]) -> Optional[StreamEvent]:
        """Decode one line; ``None`` when it carries no item.

        Raw lines are decoded as strict UTF-8 only once they are known to be
        ``data:`` lines. Seeing the sentinel closes the decoder.
        """
        if self.state is DecoderState.CLOSED:
            return None
        if isinstance(line, bytes):
            if not line.startswith(_DATA_PREFIX_BYTES):
                return None
            raw = line[len(_DATA_PREFIX_BYTES):]
            try:
                payload = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                reason = f"stream payload is not valid UTF-8 (byte {exc.start})"
                shown = raw.decode("utf-8", errors="backslashreplace")
                return StreamEvent.failed(self._decode_error(reason, shown, exc))
        elif line.startswith(DATA_PREFIX):
            payload = line[len(DATA_PREFIX):]
        else:
            return None
        if payload.strip() == DONE_SENTINEL:
            self.sentinel_seen = True
            self.state = DecoderState.CLOSED
            return None
        try:
            return StreamEvent.of(StreamChunk.model_validate(json.loads(payload)))
        except json.JSONDecodeError as exc:
            reason = f"malformed stream payload: {exc.msg}"
            return StreamEvent.failed(self._decode_error(reason, payload, exc))
        except ValidationError as exc:
            reason = f"unexpected stream payload shape ({exc.error_count()} errors)"
            return StreamEvent.failed(self._decode_error(reason, payload, exc))

    def _decode_error(self, reason: str, payload: str, exc: Exception) -> DecodeError:
        return DecodeError(reason, payload=payload, provider=self.provider, model=self.model, raw=exc)

    def _enrich(self, err: ProviderError) -> ProviderError:
        if err.provider is None:
            err.provider = self.provider
        if err.model is None:
            err.model = self.model
        return err

    # Driver ------------------------------------------------------------
    def events(self, chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
        """Decode ``chunks`` lazily into stream events.

        Reading stops as soon as the sentinel is seen; bytes after it are
        never pulled from ``chunks``.
        """
        source = iter(chunks)
        while self.state is not DecoderState.CLOSED:
            try:
                data = next(source)
            except StopIteration:
                break
            except ProviderError as exc:
                self.state = DecoderState.CLOSED
                yield StreamEvent.failed(self._enrich(exc))
                return
            except httpx.HTTPError as exc:
                self.state = DecoderState.CLOSED
                yield StreamEvent.failed(self._enrich(to_transport_error(exc)))
                return
            self.state = DecoderState.READING
            for line in self.feed(data):
                event = self.decode_line(line)
                if event is not None:
                    yield event
                if self.state is DecoderState.CLOSED:
                    return
        for line in self.flush():
            event = self.decode_line(line)
            if event is not None:
                yield event
        self.state = DecoderState.CLOSED


def decode_events(
    chunks: Iterable[bytes],
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> Iterator[StreamEvent]:
    """Decode an SSE byte stream with a fresh :class:`SSEDecoder`."""
    return SSEDecoder(provider=provider, model=model).events(chunks)


__all__ = [
    "SSEDecoder",
    "DecoderState",
    "decode_events",
    "DATA_PREFIX",
    "DONE_SENTINEL",
]
