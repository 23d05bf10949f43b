"""Failure categories shared by every llmhub error.

The string values appear in log events (``error_code``) and are stable.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    CONFIGURATION = "configuration"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    DECODE = "decode"
    # API failures, refined from the HTTP status
    API = "api"
    AUTH = "auth"
    QUOTA = "quota"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
