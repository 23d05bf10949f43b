"""Unified error taxonomy public surface.

This module re-exports the implementations under ``llmhub.base.errors_parts``
to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, code_for_status
from .errors_parts.hub_errors import (
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
