"""Client façade: one call from model + messages to a response.

Summary:
- ``chat`` sends one non-streaming exchange and returns a ``ChatCompletion``.
- ``chat_stream`` opens one streaming exchange and returns a ``DeltaStream``.
- ``send_request`` / ``send_stream_request`` take an already prepared request.

Order of checks for every call (first failure wins, nothing is sent before
the last one passes):

1. provider resolution: explicit provider, else the session's provider, else
   the model catalog, else ``ConfigurationError``;
2. request build: capability, model, messages (``CapabilityUnsupported`` /
   ``RequestValidationError``);
3. configuration: a record with a usable API key (``ConfigurationError``);
4. admission: per-provider minimum interval (``RateLimited``);
5. transport (``TransportError`` / ``ApiError``).

Errors & Observability:
- Errors raised by the transport are enriched with provider and model.
- Structured ``chat.start`` / ``chat.end`` / ``chat.error`` events; streams log
  their own ``stream.*`` events. API keys are never logged.

The client does not retry; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, Optional, Tuple, Union

from pydantic import ValidationError

from .base.cancellation import CancellationToken
from .base.constants import DEFAULT_MAX_HISTORY, DEFAULT_MIN_REQUEST_INTERVAL_SECONDS, MISSING_API_KEY_ERROR
from .base.dto.request_options import RequestOptions
from .base.errors import ConfigurationError, DecodeError, ProviderError, RateLimited
from .base.http import HttpxTransport, Transport, build_headers
from .base.logging import LogContext, get_logger, log_event, normalized_log_event
from .base.models import ChatCompletion, PreparedRequest
from .base.rate_limit import RequestRateLimiter
from .base.registry import ApiProvider, Capability, parse_provider
from .base.request_builder import MessageLike, OptionsLike, prepare_request
from .base.session import ChatSession
from .base.streaming import DeltaStream
from .config import ProviderConfig, load_provider_configs
from .models import default_provider

Conversation = Union[ChatSession, Iterable[MessageLike]]


class LLMClient:
    """Provider-agnostic chat client.

    Parameters:
        configs: Provider configuration records. Later records for the same
            provider replace earlier ones.
        transport: Transport implementation; defaults to ``HttpxTransport``.
        rate_limiter: Shared admission limiter. When omitted the client
            creates its own and closes it in :meth:`close`.
        min_interval_seconds: Interval for the client-owned limiter.

    Thread safety: independent calls may run concurrently; they share only
    the admission limiter and the configuration table, both lock-guarded.
    """

    def __init__(
        self,
        configs: Iterable[ProviderConfig] = (),
        *,
        transport: Optional[Transport] = None,
        rate_limiter: Optional[RequestRateLimiter] = None,
        min_interval_seconds: float = DEFAULT_MIN_REQUEST_INTERVAL_SECONDS,
    ) -> None:
        self._configs: Dict[ApiProvider, ProviderConfig] = {}
        for cfg in configs:
            self._configs[cfg.api_provider] = cfg
        self._config_lock = threading.Lock()
        self._transport: Transport = transport or HttpxTransport()
        self._owns_limiter = rate_limiter is None
        self._limiter = rate_limiter or RequestRateLimiter(min_interval_seconds)
        self._logger = get_logger("llmhub.client")
        self._closed = False

    @classmethod
    def from_config(cls, path: Optional[str] = None, **kwargs) -> "LLMClient":
        """Create a client from the config file and environment."""
        return cls(load_provider_configs(path), **kwargs)

    # Configuration -----------------------------------------------------
    def configs(self) -> Tuple[ProviderConfig, ...]:
        """Snapshot of the configured providers, one record each."""
        with self._config_lock:
            return tuple(self._configs.values())

    def get_config(self, provider: Union[str, ApiProvider]) -> Optional[ProviderConfig]:
        """Return the record for ``provider`` or ``None`` when it is not configured.

        Raises:
            ConfigurationError: ``provider`` is not a known provider name.
        """
        p = parse_provider(provider)
        with self._config_lock:
            return self._configs.get(p)

    def update_config(self, config: ProviderConfig) -> None:
        """Replace (or add) the record for ``config.api_provider``."""
        with self._config_lock:
            self._configs[config.api_provider] = config

    @property
    def rate_limiter(self) -> RequestRateLimiter:
        """The admission limiter consulted before every exchange."""
        return self._limiter

    # Resolution --------------------------------------------------------
    def resolve_provider(self, model: str, provider: Union[str, ApiProvider, None] = None) -> ApiProvider:
        """Pick the provider for ``model``.

        Raises:
            ConfigurationError: No provider given and ``model`` is not in the
                catalog.
        """
        if provider is not None:
            return parse_provider(provider)
        found = default_provider(model)
        if found is None:
            raise ConfigurationError(f"no provider given and model '{model}' is not in the catalog", model=model)
        return found

    def prepare(
        self,
        model: str,
        conversation: Conversation,
        *,
        provider: Union[str, ApiProvider, None] = None,
        options: OptionsLike = None,
        stream: bool = False,
        capability: Union[str, Capability] = Capability.CHAT,
    ) -> PreparedRequest:
        """Resolve the provider, build the request and resolve its URL."""
        if isinstance(conversation, ChatSession):
            provider = provider or conversation.provider
            messages = conversation.messages()
        else:
            messages = conversation
        p = self.resolve_provider(model, provider)
        cfg = self.get_config(p)
        return prepare_request(
            p,
            model,
            messages,
            options,
            capability=capability,
            stream=True if stream else None,
            base_url=cfg.api_base_url if cfg else None,
        )

    def _api_key(self, prepared: PreparedRequest) -> str:
        """Usable API key for the request's provider; placeholders do not count."""
        cfg = self.get_config(prepared.provider)
        key = cfg.usable_key() if cfg is not None else None
        if key is None:
            raise ConfigurationError(
                f"{MISSING_API_KEY_ERROR}: no API key configured for provider '{prepared.provider}'",
                provider=prepared.provider,
                model=prepared.model,
            )
        return key

    def _admit(self, prepared: PreparedRequest) -> None:
        """Pass the admission check or raise ``RateLimited`` (logged as a warning)."""
        if self._closed:
            raise RuntimeError("client is closed")
        try:
            self._limiter.check_and_record(prepared.provider, prepared.model)
        except RateLimited as err:
            log_event(
                self._logger,
                "rate_limit.rejected",
                LogContext(provider=prepared.provider, model=prepared.model),
                level=logging.WARNING,
                retry_after_seconds=round(err.retry_after_seconds, 3),
            )
            raise

    @staticmethod
    def _enrich(err: ProviderError, prepared: PreparedRequest) -> ProviderError:
        """Fill in provider and model on errors raised without them."""
        if err.provider is None:
            err.provider = prepared.provider
        if err.model is None:
            err.model = prepared.model
        return err

    # Exchanges ---------------------------------------------------------
    def send_request(self, prepared: PreparedRequest) -> ChatCompletion:
        """Send a prepared non-streaming request.

        Raises:
            ConfigurationError: No usable API key.
            RateLimited: Admission rejected.
            TransportError: Connection or timeout failure.
            ApiError: Non-success HTTP status.
            DecodeError: The response body is not a completion document.
        """
        if prepared.stream:
            prepared = _with_stream(prepared, False)
        ctx = LogContext(provider=prepared.provider, model=prepared.model, capability=prepared.capability)
        try:
            key = self._api_key(prepared)
            self._admit(prepared)
            normalized_log_event(self._logger, "chat.start", ctx, phase="start", emitted=None, tokens=None)
            doc = self._transport.send_once(prepared.url, build_headers(key), prepared.body())
            try:
                completion = ChatCompletion.model_validate(doc)
            except ValidationError as exc:
                raise DecodeError("response body is not a chat completion", payload=str(doc), raw=exc) from exc
        except ProviderError as err:
            self._enrich(err, prepared)
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                error_code=err.code.value,
                emitted=False,
                tokens=None,
                level=logging.ERROR,
                error=err.message,
            )
            raise
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=completion.text() is not None or bool(completion.tool_calls()),
            tokens=completion.usage.as_tokens() if completion.usage else None,
            finish_reason=completion.finish_reason(),
            response_id=completion.id,
        )
        return completion

    def send_stream_request(
        self, prepared: PreparedRequest, *, token: Optional[CancellationToken] = None
    ) -> DeltaStream:
        """Open a prepared streaming request and return its open ``DeltaStream``.

        The streaming flag is forced on. The caller owns the returned stream
        and must exhaust it, close it, or use it in a ``with`` block.
        """
        if not prepared.stream:
            prepared = _with_stream(prepared, True)
        try:
            key = self._api_key(prepared)
            self._admit(prepared)
        except ProviderError as err:
            self._enrich(err, prepared)
            raise
        headers = build_headers(key, stream=True)
        body = prepared.body()
        stream = DeltaStream(
            lambda: self._transport.send_streaming(prepared.url, headers, body),
            provider=prepared.provider,
            model=prepared.model,
            token=token,
        )
        return stream.open()

    def chat(
        self,
        model: str,
        conversation: Conversation,
        *,
        provider: Union[str, ApiProvider, None] = None,
        options: OptionsLike = None,
    ) -> ChatCompletion:
        """Send ``conversation`` to ``model`` and return the complete response."""
        return self.send_request(self.prepare(model, conversation, provider=provider, options=options))

    def chat_stream(
        self,
        model: str,
        conversation: Conversation,
        *,
        provider: Union[str, ApiProvider, None] = None,
        options: OptionsLike = None,
        token: Optional[CancellationToken] = None,
    ) -> DeltaStream:
        """Send ``conversation`` to ``model`` and return the open delta stream."""
        prepared = self.prepare(model, conversation, provider=provider, options=options, stream=True)
        return self.send_stream_request(prepared, token=token)

    # Sessions ----------------------------------------------------------
    def create_chat_session(
        self,
        model: str,
        provider: Union[str, ApiProvider, None] = None,
        *,
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> ChatSession:
        """Create an empty session bound to ``model`` and its provider."""
        p = self.resolve_provider(model, provider)
        return ChatSession(model, p.value, max_history=max_history)

    # Lifecycle ---------------------------------------------------------
    def close(self) -> None:
        """Tear down the client-owned admission limiter. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._owns_limiter:
            self._limiter.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _with_stream(prepared: PreparedRequest, stream: bool) -> PreparedRequest:
    """Copy of ``prepared`` with the ``stream`` option set (``False`` omits it)."""
    options: RequestOptions = prepared.request.options.with_options(stream=stream or None)
    return replace(prepared, request=replace(prepared.request, options=options))


__all__ = ["LLMClient", "Conversation"]
