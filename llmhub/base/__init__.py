"""
llmhub base package.

Provider-agnostic building blocks used by the client:
- Registry: provider descriptors and URL resolution
- Models (DTOs): messages, request documents, complete and streamed responses
- Request builder and request options
- Transport contract and the httpx transport
- Streaming: SSE decoding, delta streams, accumulation
- Session history and per-provider admission
"""

from .registry import (
    REGISTRY,
    ApiProvider,
    Capability,
    ProviderDescriptor,
    get_descriptor,
    parse_capability,
    parse_provider,
    resolve,
    supports,
)
from .models import (
    ChatCompletion,
    ChatRequest,
    Message,
    PreparedRequest,
    Role,
    StreamChunk,
    ToolCall,
    ToolCallFunction,
    Usage,
)
from .dto import RequestOptions, ResponseFormat
from .request_builder import build_request, build_request_url, prepare_request
from .http import HttpxTransport, Transport, build_headers
from .timeouts import TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .streaming import DeltaStream, SSEDecoder, StreamEvent, StreamMetrics, accumulate_chunks, decode_events
from .session import ChatSession
from .rate_limit import RequestRateLimiter

__all__ = [
    # Registry
    "REGISTRY",
    "ApiProvider",
    "Capability",
    "ProviderDescriptor",
    "get_descriptor",
    "parse_capability",
    "parse_provider",
    "resolve",
    "supports",
    # Models
    "ChatCompletion",
    "ChatRequest",
    "Message",
    "PreparedRequest",
    "Role",
    "StreamChunk",
    "ToolCall",
    "ToolCallFunction",
    "Usage",
    "RequestOptions",
    "ResponseFormat",
    # Building
    "build_request",
    "build_request_url",
    "prepare_request",
    # Transport
    "HttpxTransport",
    "Transport",
    "build_headers",
    "TimeoutConfig",
    "get_timeout_config",
    # Streaming
    "CancellationToken",
    "CancelledError",
    "DeltaStream",
    "SSEDecoder",
    "StreamEvent",
    "StreamMetrics",
    "accumulate_chunks",
    "decode_events",
    # State
    "ChatSession",
    "RequestRateLimiter",
]
