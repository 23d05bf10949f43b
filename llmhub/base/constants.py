"""Base shared constants.

Central location to avoid scattering magic strings and default numbers
across the builder, session, admission and client layers.

# pragma: allowlist secret
"""
from __future__ import annotations

# Session history bound applied to new sessions
DEFAULT_MAX_HISTORY = 20

# Minimum spacing between two requests to the same provider (seconds)
DEFAULT_MIN_REQUEST_INTERVAL_SECONDS = 1.0

# Missing credential sentinel
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - generic placeholder string, not a real secret

__all__ = [
    "DEFAULT_MAX_HISTORY",
    "DEFAULT_MIN_REQUEST_INTERVAL_SECONDS",
    "MISSING_API_KEY_ERROR",
]
