"""Map arbitrary exceptions and HTTP statuses onto :class:`ErrorCode`.

llmhub's own errors already carry a code. Everything else (httpx, pydantic,
caller callbacks) is classified by, in order: timeout type, an HTTP status
found on the exception or its ``response``, then keywords in the message.
"""
from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import Iterator, Optional, Tuple

from .error_code import ErrorCode
from .provider_error import ProviderError

STATUS_CODES = MappingProxyType(
    {
        400: ErrorCode.VALIDATION,
        401: ErrorCode.AUTH,
        402: ErrorCode.QUOTA,
        403: ErrorCode.AUTH,
        404: ErrorCode.NOT_FOUND,
        408: ErrorCode.TIMEOUT,
        422: ErrorCode.VALIDATION,
        429: ErrorCode.RATE_LIMIT,
        500: ErrorCode.SERVER_ERROR,
        502: ErrorCode.UNAVAILABLE,
        503: ErrorCode.UNAVAILABLE,
        504: ErrorCode.TIMEOUT,
    }
)

# first match wins; every keyword of an entry must occur in the message
_MESSAGE_KEYWORDS: Tuple[Tuple[ErrorCode, Tuple[str, ...]], ...] = (
    (ErrorCode.QUOTA, ("quota",)),
    (ErrorCode.RATE_LIMIT, ("rate", "limit")),
    (ErrorCode.TIMEOUT, ("timeout",)),
    (ErrorCode.TIMEOUT, ("timed out",)),
    (ErrorCode.AUTH, ("invalid_api_key",)),
    (ErrorCode.AUTH, ("authentication",)),
    (ErrorCode.AUTH, ("api key",)),
    (ErrorCode.AUTH, ("unauthorized",)),
    (ErrorCode.UNSUPPORTED, ("unsupported",)),
    (ErrorCode.UNSUPPORTED, ("not supported",)),
    (ErrorCode.NOT_FOUND, ("not found",)),
    (ErrorCode.UNAVAILABLE, ("unavailable",)),
    (ErrorCode.VALIDATION, ("validation",)),
    (ErrorCode.VALIDATION, ("invalid",)),
    (ErrorCode.DECODE, ("malformed",)),
    (ErrorCode.DECODE, ("json",)),
    (ErrorCode.SERVER_ERROR, ("server error",)),
    (ErrorCode.SERVER_ERROR, ("internal error",)),
)


def _status_candidates(exc: BaseException) -> Iterator[object]:
    yield getattr(exc, "status_code", None)
    yield getattr(exc, "status", None)
    yield getattr(getattr(exc, "response", None), "status_code", None)


def status_of(exc: BaseException) -> Optional[int]:
    """First plausible HTTP status attached to ``exc``, else ``None``."""
    for value in _status_candidates(exc):
        if isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599:
            return value
    return None


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status code to an :class:`ErrorCode`.

    Unmapped 5xx statuses become ``SERVER_ERROR``; anything else unmapped is
    the generic ``API`` code.
    """
    code = STATUS_CODES.get(status)
    if code is not None:
        return code
    return ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.API


def code_for_message(message: str) -> Optional[ErrorCode]:
    """Keyword match on ``message`` (case-insensitive); ``None`` when nothing matches."""
    text = message.lower()
    for code, keywords in _MESSAGE_KEYWORDS:
        if all(k in text for k in keywords):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Best-effort :class:`ErrorCode` for ``exc``; ``UNKNOWN`` when nothing matches."""
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = status_of(exc)
    if status is not None:
        return code_for_status(status)
    return code_for_message(str(exc)) or ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "code_for_status",
    "code_for_message",
    "status_of",
    "STATUS_CODES",
]
