"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llmhub.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, code_for_status
from .hub_errors import (
    ApiError,
    CapabilityUnsupported,
    ConfigurationError,
    DecodeError,
    RateLimited,
    RequestValidationError,
    TransportError,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "code_for_status",
    "ApiError",
    "CapabilityUnsupported",
    "ConfigurationError",
    "DecodeError",
    "RateLimited",
    "RequestValidationError",
    "TransportError",
]
