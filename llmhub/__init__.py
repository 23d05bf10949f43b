"""llmhub: provider-agnostic chat-completion client.

Typical use::

    from llmhub import LLMClient, Message

    with LLMClient.from_config() as client:
        reply = client.chat("deepseek-chat", [Message.user("hello")])
        print(reply.text())
"""

from .base import (
    ApiProvider,
    Capability,
    CancellationToken,
    ChatCompletion,
    ChatSession,
    DeltaStream,
    Message,
    RequestOptions,
    StreamChunk,
    StreamEvent,
    ToolCall,
    Usage,
)
from .base.errors import (
    ApiError,
    CapabilityUnsupported,
    ConfigurationError,
    DecodeError,
    ErrorCode,
    ProviderError,
    RateLimited,
    RequestValidationError,
    TransportError,
)
from .client import LLMClient
from .config import ProviderConfig, load_provider_configs

__version__ = "0.1.0"

__all__ = [
    "LLMClient",
    "ApiProvider",
    "Capability",
    "CancellationToken",
    "ChatCompletion",
    "ChatSession",
    "DeltaStream",
    "Message",
    "RequestOptions",
    "StreamChunk",
    "StreamEvent",
    "ToolCall",
    "Usage",
    "ProviderConfig",
    "load_provider_configs",
    "ErrorCode",
    "ProviderError",
    "ApiError",
    "CapabilityUnsupported",
    "ConfigurationError",
    "DecodeError",
    "RateLimited",
    "RequestValidationError",
    "TransportError",
    "__version__",
]
