"""Process-wide pool of ``httpx.Client`` instances.

One client per ``(base_url, purpose)`` pair, created lazily under a lock and
rebuilt if a caller closed it. The ``"stream"`` purpose gets the longer read
timeout from :func:`get_timeout_config`. Every pooled client is closed at
interpreter exit.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, List, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

PoolKey = Tuple[Optional[str], str]

_pool: Dict[PoolKey, httpx.Client] = {}
_pool_lock = threading.Lock()


def _build_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    timeout = get_timeout_config().as_httpx(streaming=purpose == "stream")
    if base_url:
        return httpx.Client(base_url=base_url, timeout=timeout)
    return httpx.Client(timeout=timeout)


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return the pooled client for ``base_url`` and ``purpose``.

    ``base_url=None`` means callers pass absolute URLs.
    """
    key: PoolKey = (base_url, purpose)
    with _pool_lock:
        client = _pool.get(key)
        if client is None or client.is_closed:
            client = _pool[key] = _build_client(base_url, purpose)
        return client


def close_all_clients() -> None:
    """Close every pooled client and empty the pool."""
    with _pool_lock:
        clients: List[httpx.Client] = list(_pool.values())
        _pool.clear()
    for client in clients:
        client.close()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients", "PoolKey"]
