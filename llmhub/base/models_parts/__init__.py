"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
``llmhub.base.models_parts`` if needed, while ``llmhub.base.models`` remains
the primary stable import path.
"""

from .tool_call import ToolCall, ToolCallFunction
from .usage import PromptTokensDetails, Usage
from .message import Message, Role
from .response import ChatCompletion, Choice, ResponseMessage, StreamChoice, StreamChunk, StreamDelta
from .chat_request import ChatRequest, PreparedRequest

__all__ = [
    "ToolCall",
    "ToolCallFunction",
    "PromptTokensDetails",
    "Usage",
    "Message",
    "Role",
    "ChatCompletion",
    "Choice",
    "ResponseMessage",
    "StreamChoice",
    "StreamChunk",
    "StreamDelta",
    "ChatRequest",
    "PreparedRequest",
]
