"""Request builder: provider-agnostic inputs → request document + URL.

``build_request`` validates in a fixed order and stops at the first
violation:

1. the provider supports the capability (``CapabilityUnsupported``),
2. the model identifier is non-empty (``RequestValidationError``),
3. the message list is non-empty (``RequestValidationError``).

Construction is pure: nothing is sent, nothing is logged, and the caller's
message sequence (often a session's history) is copied rather than referenced.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from .dto.request_options import RequestOptions
from .errors import RequestValidationError
from .models_parts.chat_request import ChatRequest, PreparedRequest
from .models_parts.message import Message
from .registry import ApiProvider, Capability, get_descriptor, parse_capability, resolve

MessageLike = Union[Message, Mapping[str, Any]]
OptionsLike = Union[RequestOptions, Mapping[str, Any], None]


def _coerce_message(item: MessageLike) -> Message:
    if isinstance(item, Message):
        return item
    return Message.model_validate(dict(item))


def _coerce_options(options: OptionsLike) -> RequestOptions:
    if options is None:
        return RequestOptions()
    if isinstance(options, RequestOptions):
        return options
    return RequestOptions.model_validate(dict(options))


def build_request(
    provider: Union[str, ApiProvider],
    capability: Union[str, Capability],
    model: str,
    messages: Iterable[MessageLike],
    options: OptionsLike = None,
    stream: Optional[bool] = None,
) -> ChatRequest:
    """Build a :class:`ChatRequest` for ``provider``.

    Parameters:
        provider: Target provider.
        capability: Endpoint kind, normally ``Capability.CHAT``.
        model: Model identifier; must be non-empty.
        messages: Ordered history; copied into the request.
        options: ``RequestOptions`` or a mapping of option names.
        stream: When given, overrides ``options.stream``.

    Raises:
        CapabilityUnsupported: ``provider`` lacks ``capability``.
        RequestValidationError: Empty model or empty message list.
    """
    descriptor = get_descriptor(provider)
    cap = parse_capability(capability)
    # resolve() raises CapabilityUnsupported before anything else is inspected
    resolve(descriptor.provider, cap)
    pname = descriptor.provider.value
    if not model or not str(model).strip():
        raise RequestValidationError("model identifier must not be empty", provider=pname)
    owned = tuple(_coerce_message(m) for m in messages)
    if not owned:
        raise RequestValidationError("message list must not be empty", provider=pname, model=model)
    opts = _coerce_options(options)
    if stream is not None and opts.stream != stream:
        opts = opts.with_options(stream=stream)
    return ChatRequest(model=model, messages=owned, options=opts)


def prepare_request(
    provider: Union[str, ApiProvider],
    model: str,
    messages: Iterable[MessageLike],
    options: OptionsLike = None,
    *,
    capability: Union[str, Capability] = Capability.CHAT,
    stream: Optional[bool] = None,
    base_url: Optional[str] = None,
) -> PreparedRequest:
    """Build the request and resolve its URL in one step.

    ``base_url`` replaces the registry's default base URL (configuration
    override) while keeping the capability path.
    """
    request = build_request(provider, capability, model, messages, options, stream)
    descriptor = get_descriptor(provider)
    cap = parse_capability(capability)
    return PreparedRequest(
        url=resolve(descriptor.provider, cap, base_url),
        provider=descriptor.provider.value,
        capability=cap.value,
        request=request,
    )


build_request_url = prepare_request


__all__ = ["build_request", "prepare_request", "build_request_url"]
