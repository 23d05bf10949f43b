"""Provider registry: static provider descriptors and URL resolution.

Each provider is one member of the closed :class:`ApiProvider` set and owns a
:class:`ProviderDescriptor` (base URL, supported capabilities, per-capability
path overrides). Every provider-specific URL decision goes through
:func:`resolve`; no other module branches on the provider identity.

The table is built once at import and exposed read-only. Lookups are pure:
no I/O, no mutable state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Union

from .errors import CapabilityUnsupported, ConfigurationError


class ApiProvider(str, Enum):
    """Closed set of supported HTTP providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    SILICONFLOW = "siliconflow"
    DEEPSEEK = "deepseek"
    QIANFAN = "qianfan"
    ZHIPUAI = "zhipuai"
    ALIBAILIAN = "alibailian"
    XAI = "xai"
    VOLCENGINE = "volcengine"
    TENCENT = "tencent"
    GOOGLE = "google"

    def __str__(self) -> str:
        return self.value


class Capability(str, Enum):
    """Kinds of API operations a provider may expose."""

    CHAT = "chat"
    IMAGE_GENERATION = "image_generation"
    IMAGE_EDIT = "image_edit"
    EMBEDDING = "embedding"
    AUDIO_SPEECH = "audio_speech"
    AUDIO_TRANSCRIPTION = "audio_transcription"
    AUDIO_TRANSLATION = "audio_translation"
    LIST_MODELS = "list_models"

    def __str__(self) -> str:
        return self.value

    @property
    def default_path(self) -> str:
        return _DEFAULT_PATHS[self]


_DEFAULT_PATHS: Mapping[Capability, str] = MappingProxyType(
    {
        Capability.CHAT: "/chat/completions",
        Capability.IMAGE_GENERATION: "/images/generations",
        Capability.IMAGE_EDIT: "/images/edits",
        Capability.EMBEDDING: "/embeddings",
        Capability.AUDIO_SPEECH: "/audio/speech",
        Capability.AUDIO_TRANSCRIPTION: "/audio/transcriptions",
        Capability.AUDIO_TRANSLATION: "/audio/translations",
        Capability.LIST_MODELS: "/models",
    }
)


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of one provider's HTTP surface.

    Attributes:
        provider: The provider identifier.
        base_url: Base URL without a trailing slash.
        capabilities: Capabilities the provider exposes.
        path_overrides: Capability → path, replacing the default path.
    """

    provider: ApiProvider
    base_url: str
    capabilities: FrozenSet[Capability]
    path_overrides: Mapping[Capability, str] = field(default_factory=dict)

    def supports(self, capability: Capability) -> bool:
        """True if this provider serves ``capability``."""
        return capability in self.capabilities

    def path_for(self, capability: Capability) -> str:
        """Endpoint path for ``capability``, honouring overrides."""
        return self.path_overrides.get(capability, capability.default_path)


def _descriptor(
    provider: ApiProvider,
    base_url: str,
    capabilities: FrozenSet[Capability] = frozenset({Capability.CHAT}),
    path_overrides: Optional[Mapping[Capability, str]] = None,
) -> ProviderDescriptor:
    return ProviderDescriptor(
        provider=provider,
        base_url=base_url.rstrip("/"),
        capabilities=capabilities,
        path_overrides=MappingProxyType(dict(path_overrides or {})),
    )


REGISTRY: Mapping[ApiProvider, ProviderDescriptor] = MappingProxyType(
    {
        ApiProvider.OPENAI: _descriptor(
            ApiProvider.OPENAI, "https://api.openai.com/v1/", frozenset(Capability)
        ),
        ApiProvider.ANTHROPIC: _descriptor(
            ApiProvider.ANTHROPIC,
            "https://api.anthropic.com/v1/",
            path_overrides={Capability.CHAT: "/messages"},
        ),
        ApiProvider.SILICONFLOW: _descriptor(
            ApiProvider.SILICONFLOW,
            "https://api.siliconflow.cn/v1/",
            frozenset(
                {
                    Capability.CHAT,
                    Capability.IMAGE_GENERATION,
                    Capability.EMBEDDING,
                    Capability.AUDIO_SPEECH,
                    Capability.AUDIO_TRANSCRIPTION,
                }
            ),
        ),
        ApiProvider.DEEPSEEK: _descriptor(ApiProvider.DEEPSEEK, "https://api.deepseek.com"),
        ApiProvider.QIANFAN: _descriptor(ApiProvider.QIANFAN, "https://qianfan.baidubce.com/v2/"),
        ApiProvider.ZHIPUAI: _descriptor(ApiProvider.ZHIPUAI, "https://open.bigmodel.cn/api/paas/v4/"),
        ApiProvider.ALIBAILIAN: _descriptor(
            ApiProvider.ALIBAILIAN, "https://dashscope.aliyuncs.com/compatible-mode/v1/"
        ),
        ApiProvider.XAI: _descriptor(ApiProvider.XAI, "https://api.x.ai/v1/"),
        ApiProvider.VOLCENGINE: _descriptor(ApiProvider.VOLCENGINE, "https://ark.cn-beijing.volces.com/api/v3/"),
        ApiProvider.TENCENT: _descriptor(ApiProvider.TENCENT, "https://api.lkeap.cloud.tencent.com/v1/"),
        ApiProvider.GOOGLE: _descriptor(
            ApiProvider.GOOGLE, "https://generativelanguage.googleapis.com/v1beta/openai/"
        ),
    }
)


def parse_provider(value: Union[str, ApiProvider]) -> ApiProvider:
    """Coerce a provider name (case-insensitive) into :class:`ApiProvider`.

    Raises:
        ConfigurationError: If the name is not a known provider.
    """
    if isinstance(value, ApiProvider):
        return value
    try:
        return ApiProvider(str(value).strip().lower())
    except ValueError:
        known = ", ".join(p.value for p in ApiProvider)
        raise ConfigurationError(f"unknown provider '{value}' (known: {known})") from None


def parse_capability(value: Union[str, Capability]) -> Capability:
    """Coerce a capability name into :class:`Capability`.

    Unknown names raise :class:`CapabilityUnsupported` against no provider,
    since no provider can serve them.
    """
    if isinstance(value, Capability):
        return value
    try:
        return Capability(str(value).strip().lower())
    except ValueError:
        raise CapabilityUnsupported("-", str(value)) from None


def get_descriptor(provider: Union[str, ApiProvider]) -> ProviderDescriptor:
    """Return the registry entry for ``provider``.

    Raises:
        ConfigurationError: If ``provider`` is not a known provider name.
    """
    return REGISTRY[parse_provider(provider)]


def supports(provider: Union[str, ApiProvider], capability: Union[str, Capability]) -> bool:
    """Whether ``provider`` exposes ``capability``.

    Unknown capability names are reported as unsupported rather than raised;
    unknown providers still raise ``ConfigurationError``.
    """
    try:
        return get_descriptor(provider).supports(parse_capability(capability))
    except CapabilityUnsupported:
        return False


def resolve(
    provider: Union[str, ApiProvider],
    capability: Union[str, Capability],
    base_url: Optional[str] = None,
) -> str:
    """Return the concrete URL for ``capability`` on ``provider``.

    Parameters:
        provider: Provider identifier.
        capability: Requested capability.
        base_url: Optional configured base URL replacing the registry default.

    Raises:
        CapabilityUnsupported: The provider does not expose ``capability``.
    """
    descriptor = get_descriptor(provider)
    cap = parse_capability(capability)
    if not descriptor.supports(cap):
        raise CapabilityUnsupported(descriptor.provider.value, cap.value)
    root = (base_url or descriptor.base_url).rstrip("/")
    return f"{root}{descriptor.path_for(cap)}"


__all__ = [
    "ApiProvider",
    "Capability",
    "ProviderDescriptor",
    "REGISTRY",
    "parse_provider",
    "parse_capability",
    "get_descriptor",
    "supports",
    "resolve",
]
