"""Streaming package.

Exposes the SSE decoder, the cancellable delta stream, stream metrics and
chunk accumulation under a single namespace.
"""

from .stream_event import StreamEvent
from .sse_decoder import DATA_PREFIX, DONE_SENTINEL, DecoderState, SSEDecoder, decode_events
from .streaming_metrics import StreamMetrics
from .accumulate import accumulate_chunks
from .delta_stream import DeltaStream

__all__ = [
    "StreamEvent",
    "SSEDecoder",
    "DecoderState",
    "decode_events",
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "StreamMetrics",
    "accumulate_chunks",
    "DeltaStream",
]
