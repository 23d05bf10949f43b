"""Transport contract and its httpx implementation.

The core talks to the network only through :class:`Transport`:

- ``send_once(url, headers, body)`` returns the decoded JSON document of a
  non-streaming exchange.
- ``send_streaming(url, headers, body)`` returns a context manager yielding a
  lazy iterator of raw byte chunks. Leaving the context releases the
  connection, whether or not the iterator was exhausted.

Both raise :class:`TransportError` for connect/timeout/network failures and
:class:`ApiError` for non-success statuses. The byte iterator raises
``TransportError`` if the connection fails mid-stream. No retries, TLS or
pool policy are specified here beyond what ``httpx`` provides.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, ContextManager, Dict, Iterator, Mapping, Optional, Protocol, runtime_checkable

import httpx

from ..errors import ApiError, DecodeError, TransportError
from ..timeouts import TimeoutConfig, get_timeout_config
from .client import get_httpx_client

JSON_CONTENT_TYPE = "application/json"
EVENT_STREAM_CONTENT_TYPE = "text/event-stream"


@runtime_checkable
class Transport(Protocol):
    """Abstract HTTP exchange capability consumed by the client."""

    def send_once(self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]) -> Dict[str, Any]:
        """POST ``body`` as JSON and return the decoded response document."""
        ...

    def send_streaming(
        self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]
    ) -> ContextManager[Iterator[bytes]]:
        """POST ``body`` and return a context yielding the raw response bytes.

        Entering the context sends the request and raises for non-success
        statuses; leaving it releases the connection.
        """
        ...


def build_headers(api_key: str, *, stream: bool = False) -> Dict[str, str]:
    """Return the outbound headers for a request authorized by ``api_key``."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": JSON_CONTENT_TYPE,
        "Accept": EVENT_STREAM_CONTENT_TYPE if stream else JSON_CONTENT_TYPE,
    }


def to_transport_error(exc: httpx.HTTPError) -> TransportError:
    """Translate an ``httpx`` exception into a :class:`TransportError`."""
    if isinstance(exc, httpx.TimeoutException):
        kind = "timeout"
    elif isinstance(exc, httpx.ConnectError):
        kind = "connect"
    else:
        kind = "network"
    return TransportError(str(exc) or exc.__class__.__name__, kind=kind, raw=exc)


def _iter_response_bytes(resp: httpx.Response) -> Iterator[bytes]:
    """Yield raw body chunks, translating mid-stream failures."""
    try:
        yield from resp.iter_bytes()
    except httpx.HTTPError as exc:
        raise to_transport_error(exc) from exc


class HttpxTransport:
    """:class:`Transport` implementation backed by ``httpx.Client``.

    Parameters:
        client: Optional explicit client (e.g. one built over
            ``httpx.MockTransport`` in tests). When omitted, pooled clients
            from :func:`get_httpx_client` are used.
        timeout_config: Optional timeout override; defaults to
            :func:`get_timeout_config` at call time.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        self._client = client
        self._timeout_config = timeout_config

    def _get_client(self, purpose: str) -> httpx.Client:
        """The injected client, else the pooled one for ``purpose``."""
        return self._client if self._client is not None else get_httpx_client(None, purpose)

    def _timeouts(self) -> TimeoutConfig:
        return self._timeout_config or get_timeout_config()

    def send_once(self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]) -> Dict[str, Any]:
        """Send one non-streaming exchange.

        Raises:
            TransportError: Connect, timeout or network failure.
            ApiError: Non-success status, carrying the response body.
            DecodeError: The body is not a JSON object.
        """
        client = self._get_client("chat")
        try:
            resp = client.post(url, headers=dict(headers), json=dict(body), timeout=self._timeouts().as_httpx())
        except httpx.HTTPError as exc:
            raise to_transport_error(exc) from exc
        if not resp.is_success:
            raise ApiError(resp.status_code, resp.text)
        try:
            data = resp.json()
        except ValueError as exc:
            raise DecodeError("response body is not valid JSON", payload=resp.text, raw=exc) from exc
        if not isinstance(data, dict):
            raise DecodeError("response body is not a JSON object", payload=resp.text)
        return data

    @contextmanager
    def _stream(self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]) -> Iterator[Iterator[bytes]]:
        client = self._get_client("stream")
        try:
            cm = client.stream(
                "POST",
                url,
                headers=dict(headers),
                json=dict(body),
                timeout=self._timeouts().as_httpx(streaming=True),
            )
            resp = cm.__enter__()
        except httpx.HTTPError as exc:
            raise to_transport_error(exc) from exc
        try:
            if not resp.is_success:
                try:
                    resp.read()
                    text = resp.text
                except httpx.HTTPError:
                    text = ""
                raise ApiError(resp.status_code, text)
            yield _iter_response_bytes(resp)
        finally:
            cm.__exit__(None, None, None)

    def send_streaming(
        self, url: str, headers: Mapping[str, str], body: Mapping[str, Any]
    ) -> ContextManager[Iterator[bytes]]:
        return self._stream(url, headers, body)


__all__ = [
    "Transport",
    "HttpxTransport",
    "build_headers",
    "to_transport_error",
    "JSON_CONTENT_TYPE",
    "EVENT_STREAM_CONTENT_TYPE",
]
