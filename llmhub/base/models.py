"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``llmhub.base.models_parts`` to keep a single stable import path.
"""

from .models_parts.tool_call import ToolCall, ToolCallFunction
from .models_parts.usage import PromptTokensDetails, Usage
from .models_parts.message import Message, Role
from .models_parts.response import (
    ChatCompletion,
    Choice,
    ResponseMessage,
    StreamChoice,
    StreamChunk,
    StreamDelta,
)
from .models_parts.chat_request import ChatRequest, PreparedRequest

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
