"""Cancellable, single-use stream of decoded deltas.

``DeltaStream`` owns one streamed exchange: it opens the transport's
streaming context, feeds the bytes through an :class:`SSEDecoder`, and hands
:class:`StreamEvent` items to the consumer one at a time. The connection is
released when the stream ends, when ``close()`` is called, when a ``with``
block exits, or as soon as the last reference to an abandoned stream is
dropped. The stream is its own iterator and nothing it owns refers back to
it, so that last case never waits for the cyclic garbage collector.

Cancellation is cooperative: ``cancel()`` marks the token, and the stream
stops before handing out its next item. A blocking read in progress is not
interrupted.
"""
from __future__ import annotations

import logging
import time
import weakref
from contextlib import ExitStack
from typing import Callable, ContextManager, Iterator, List, Optional

from ..cancellation import CancellationToken
from ..errors import ProviderError
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models_parts.response import ChatCompletion, StreamChunk
from .accumulate import accumulate_chunks
from .sse_decoder import SSEDecoder
from .stream_event import StreamEvent
from .streaming_metrics import StreamMetrics

ByteStreamOpener = Callable[[], ContextManager[Iterator[bytes]]]


class DeltaStream:
    """Lazy, forward-only sequence of :class:`StreamEvent` items.

    Parameters:
        opener: Zero-argument callable returning the transport's streaming
            context manager (see ``Transport.send_streaming``).
        provider: Provider name for logging and error context.
        model: Model identifier for logging and error context.
        token: Optional cancellation token (a fresh one is created otherwise).
        logger: Optional logger; defaults to ``llmhub.stream``.
    """

    def __init__(
        self,
        opener: ByteStreamOpener,
        *,
        provider: str,
        model: str,
        token: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._opener = opener
        self.provider = provider
        self.model = model
        self._token = token or CancellationToken()
        self._logger = logger or get_logger("llmhub.stream")
        self._ctx = LogContext(provider=provider, model=model, capability="chat")
        self._decoder = SSEDecoder(provider=provider, model=model)
        self._stack = ExitStack()
        # runs when the stream is released or, if abandoned, when it is freed
        self._releaser = weakref.finalize(self, self._stack.close)
        self._bytes: Optional[Iterator[bytes]] = None
        self._events: Optional[Iterator[StreamEvent]] = None
        self._iterated = False
        self._closed = False
        self._finished = False
        self._final_error: Optional[ProviderError] = None
        self._t0: Optional[float] = None
        self.metrics = StreamMetrics()

    # Lifecycle ---------------------------------------------------------
    def open(self) -> "DeltaStream":
        """Issue the request and enter the transport's streaming context.

        Non-success statuses and connection failures raise here, before any
        item is produced. Calling ``open`` on an open stream is a no-op.
        """
        if self._closed:
            raise RuntimeError("stream is closed")
        if self._bytes is not None:
            return self
        self._t0 = time.perf_counter()
        log_event(self._logger, "stream.start", self._ctx)
        try:
            self._bytes = self._stack.enter_context(self._opener())
        except ProviderError as exc:
            exc.provider = exc.provider or self.provider
            exc.model = exc.model or self.model
            self._release()
            self._log_error(exc)
            raise
        return self

    def close(self) -> None:
        """Release the connection. Idempotent.

        Closing mid-iteration ends the iteration; the next pull raises
        ``StopIteration``.
        """
        self._end(finished=False)
        self._release()

    def _release(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._releaser()
        if self._t0 is not None and self.metrics.total_duration_ms is None:
            self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0

    def _end(self, *, finished: bool) -> None:
        """Stop iterating: release the connection and log the outcome once."""
        events, self._events = self._events, None
        if events is None:
            return
        self._finished = finished
        self._release()
        self._finalize()

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cooperative cancellation; safe after completion."""
        self._token.cancel(reason or "cancelled by caller")

    def __enter__(self) -> "DeltaStream":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Iteration ---------------------------------------------------------
    def __iter__(self) -> "DeltaStream":
        if self._closed:
            raise RuntimeError("stream is closed")
        if self._iterated:
            raise RuntimeError("DeltaStream can only be iterated once")
        self._iterated = True
        self.open()
        assert self._bytes is not None  # nosec B101 - open() ran
        self._events = self._decoder.events(self._bytes)
        return self

    def __next__(self) -> StreamEvent:
        events = self._events
        if events is None:
            raise StopIteration
        if not self._token.cancelled:
            try:
                event = next(events)
            except StopIteration:
                self._end(finished=not self._token.cancelled)
                raise
            except BaseException:
                self._end(finished=False)
                raise
            if not self._token.cancelled:
                self._record(event)
                return event
        self._end(finished=False)
        raise StopIteration

    def _record(self, event: StreamEvent) -> None:
        """Update metrics for ``event``; remember a fatal error for finalization."""
        if event.error is not None:
            self.metrics.errors += 1
            if event.is_fatal():
                self._final_error = event.error
            else:
                log_event(
                    self._logger,
                    "stream.decode_error",
                    self._ctx,
                    level=logging.WARNING,
                    error=event.error.message,
                    payload=getattr(event.error, "payload", None),
                )
            return
        chunk = event.chunk
        if self.metrics.emitted == 0 and self._t0 is not None:
            self.metrics.time_to_first_delta_ms = (time.perf_counter() - self._t0) * 1000.0
        self.metrics.emitted += 1
        if chunk is not None and chunk.usage is not None:
            self.metrics.usage = chunk.usage

    def _finalize(self) -> None:
        if self._final_error is not None:
            self._log_error(self._final_error)
            return
        if self.truncated:
            log_event(
                self._logger,
                "stream.truncated",
                self._ctx,
                level=logging.WARNING,
                emitted_count=self.metrics.emitted,
            )
        normalized_log_event(
            self._logger,
            "stream.end",
            self._ctx,
            phase="finalize",
            emitted=self.metrics.emitted > 0,
            tokens=self.metrics.tokens,
            emitted_count=self.metrics.emitted,
            error_count=self.metrics.errors,
            time_to_first_delta_ms=self.metrics.time_to_first_delta_ms,
            total_duration_ms=self.metrics.total_duration_ms,
            cancelled=self.cancelled or None,
            truncated=self.truncated or None,
        )

    def _log_error(self, err: ProviderError) -> None:
        normalized_log_event(
            self._logger,
            "stream.error",
            self._ctx,
            phase="finalize",
            error_code=err.code.value,
            emitted=self.metrics.emitted > 0,
            tokens=self.metrics.tokens,
            level=logging.ERROR,
            error=err.message,
            emitted_count=self.metrics.emitted,
            total_duration_ms=self.metrics.total_duration_ms,
        )

    # Status ------------------------------------------------------------
    @property
    def finished(self) -> bool:
        """Input was consumed to its end without cancellation or a fatal error."""
        return self._finished and self._final_error is None

    @property
    def truncated(self) -> bool:
        """The stream ended without the ``[DONE]`` sentinel."""
        return self._finished and self._final_error is None and not self._decoder.sentinel_seen

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def error(self) -> Optional[ProviderError]:
        """The error that ended the stream, if any."""
        return self._final_error

    # Convenience -------------------------------------------------------
    def chunks(self) -> Iterator[StreamChunk]:
        """Yield decoded chunks, skipping decode errors.

        Raises the final error if the stream fails.
        """
        for event in self:
            if event.is_fatal():
                self.close()
                raise event.error  # type: ignore[misc]
            if event.chunk is not None:
                yield event.chunk

    def text_deltas(self, *, include_reasoning: bool = False) -> Iterator[str]:
        """Yield text fragments; reasoning fragments too when requested."""
        for chunk in self.chunks():
            if include_reasoning and (reasoning := chunk.reasoning()):
                yield reasoning
            if text := chunk.content():
                yield text

    def collect(self) -> ChatCompletion:
        """Drain the stream into a single :class:`ChatCompletion`."""
        collected: List[StreamChunk] = list(self.chunks())
        return accumulate_chunks(collected)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"DeltaStream(provider={self.provider!r}, model={self.model!r}, "
            f"emitted={self.metrics.emitted}, closed={self._closed})"
        )


__all__ = ["DeltaStream", "ByteStreamOpener"]
