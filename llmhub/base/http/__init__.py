"""HTTP package: pooled httpx clients and the transport contract."""

from .client import get_httpx_client, close_all_clients
from .transport import HttpxTransport, Transport, build_headers, to_transport_error

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "HttpxTransport",
    "Transport",
    "build_headers",
    "to_transport_error",
]
