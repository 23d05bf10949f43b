"""
Concrete error variants raised by llmhub.

Each variant pins its :class:`ErrorCode` (``ApiError`` derives it from the HTTP
status) and provides a ``user_message()`` rendering. Variants detected before
any I/O (configuration, capability, validation, admission) are raised
synchronously from the client; transport and API failures abort the exchange;
decode failures are reported per stream item without aborting the stream.
"""
from __future__ import annotations

import math
from typing import Optional

from .classification import code_for_status
from .error_code import ErrorCode
from .provider_error import ProviderError


class ConfigurationError(ProviderError):
    """Missing or invalid credentials, base URL, or provider selection."""

    def __init__(self, message: str, provider: Optional[str] = None, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION, message=message, provider=provider, model=model)

    def user_message(self) -> str:
        return f"Configuration error: {self.message}. Please check your API keys and settings"


class CapabilityUnsupported(ProviderError):
    """The provider does not expose the requested capability endpoint."""

    def __init__(self, provider: str, capability: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED,
            message=f"API type '{capability}' is not supported by provider '{provider}'",
            provider=provider,
            model=model,
        )
        self.capability = capability

    def user_message(self) -> str:
        return f"Provider {self.provider} does not support {self.capability}"


class RequestValidationError(ProviderError):
    """The request could not be built from the supplied model and messages."""

    def __init__(self, message: str, provider: Optional[str] = None, model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider=provider, model=model)

    def user_message(self) -> str:
        return f"Invalid request: {self.message}"


class TransportError(ProviderError):
    """Connection, timeout or read failure reported by the transport.

    ``kind`` is one of ``"timeout"``, ``"connect"`` or ``"network"``.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        *,
        kind: str = "network",
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TIMEOUT if kind == "timeout" else ErrorCode.TRANSPORT,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
            raw=raw,
        )
        self.kind = kind

    def user_message(self) -> str:
        if self.kind == "timeout":
            return "Request timed out, please check your network connection"
        if self.kind == "connect":
            return "Failed to connect to API server, please check your network"
        return f"Network issue detected: {self.message}"


class ApiError(ProviderError):
    """Non-success HTTP status with the provider-supplied error body."""

    def __init__(
        self,
        status_code: int,
        body: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        code = code_for_status(status_code)
        lowered = (body or "").lower()
        if "insufficient_quota" in lowered:
            code = ErrorCode.QUOTA
        elif "invalid_api_key" in lowered:
            code = ErrorCode.AUTH
        super().__init__(
            code=code,
            message=f"HTTP {status_code}: {body}",
            provider=provider,
            model=model,
            retryable=status_code == 429 or status_code >= 500,
        )
        self.status_code = status_code
        self.body = body

    def user_message(self) -> str:
        body = self.body or ""
        if "invalid_api_key" in body or "authentication" in body.lower():
            return "Invalid API key. Please verify your credentials"
        if "insufficient_quota" in body:
            return "API quota exhausted. Please check your account balance"
        return f"API operation failed: {body or f'HTTP {self.status_code}'}"


class DecodeError(ProviderError):
    """A single response payload could not be deserialized.

    ``payload`` holds the offending text (truncated) for diagnostics.
    """

    def __init__(
        self,
        message: str,
        payload: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(code=ErrorCode.DECODE, message=message, provider=provider, model=model, raw=raw)
        self.payload = payload[:512] if payload is not None else None

    def user_message(self) -> str:
        return f"Data parsing failed: {self.message}"


class RateLimited(ProviderError):
    """The local admission check rejected the call before any network I/O."""

    def __init__(self, provider: str, retry_after_seconds: float, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMIT,
            message=f"admission rejected; retry after {retry_after_seconds:.3f}s",
            provider=provider,
            model=model,
            retryable=True,
        )
        self.retry_after_seconds = retry_after_seconds

    def user_message(self) -> str:
        wait = max(1, math.ceil(self.retry_after_seconds))
        return f"API rate limit exceeded. Please wait {wait} seconds before retrying"


__all__ = [
    "ConfigurationError",
    "CapabilityUnsupported",
    "RequestValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "RateLimited",
]
