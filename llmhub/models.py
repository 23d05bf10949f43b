"""Static model catalog.

Maps well-known model identifiers to the providers that serve them, so a
caller may name only a model and let the client pick the provider. Some
identifiers (``deepseek-r1``, ``deepseek-v3``) are hosted by several
providers; the first entry is the default.

The table is data only. Any model identifier may still be used with an
explicit provider.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .base.registry import ApiProvider

_P = ApiProvider

_CATALOG: Dict[str, Tuple[ApiProvider, ...]] = {
    # OpenAI
    "gpt-4o": (_P.OPENAI,),
    "gpt-4o-mini": (_P.OPENAI,),
    "o1-mini": (_P.OPENAI,),
    "o1-preview": (_P.OPENAI,),
    # Anthropic
    "claude-3-5-haiku-20241022": (_P.ANTHROPIC,),
    "claude-3-5-sonnet-20241022": (_P.ANTHROPIC,),
    "claude-3-7-sonnet-20250219": (_P.ANTHROPIC,),
    "claude-3-opus-20240229": (_P.ANTHROPIC,),
    # DeepSeek, first-party and hosted
    "deepseek-chat": (_P.DEEPSEEK,),
    "deepseek-reasoner": (_P.DEEPSEEK,),
    "deepseek-ai/DeepSeek-R1": (_P.SILICONFLOW,),
    "deepseek-ai/DeepSeek-V3": (_P.SILICONFLOW,),
    "deepseek-r1": (_P.TENCENT, _P.QIANFAN, _P.ALIBAILIAN),
    "deepseek-v3": (_P.TENCENT, _P.QIANFAN, _P.ALIBAILIAN),
    "deepseek-r1-250120": (_P.VOLCENGINE,),
    "deepseek-v3-241226": (_P.VOLCENGINE,),
    # ZhipuAI
    "glm-4-plus": (_P.ZHIPUAI,),
    "glm-4-air": (_P.ZHIPUAI,),
    "glm-4-long": (_P.ZHIPUAI,),
    "glm-4-airx": (_P.ZHIPUAI,),
    "glm-4-flashx": (_P.ZHIPUAI,),
    "glm-4-flash": (_P.ZHIPUAI,),
    "glm-4-alltools": (_P.ZHIPUAI,),
    "glm-4v-plus": (_P.ZHIPUAI,),
    "glm-4v": (_P.ZHIPUAI,),
    "glm-4v-flash": (_P.ZHIPUAI,),
    "glm-zero-preview": (_P.ZHIPUAI,),
    "codegeex-4": (_P.ZHIPUAI,),
    # xAI
    "grok-2-latest": (_P.XAI,),
    # Qwen on AliBailian
    "qwen2.5-72b-instruct": (_P.ALIBAILIAN,),
    "qwen2.5-14b-instruct-1m": (_P.ALIBAILIAN,),
    "qwen-coder-plus-latest": (_P.ALIBAILIAN,),
    # Volcengine
    "doubao-1-5-pro-32k-250115": (_P.VOLCENGINE,),
    # Google (OpenAI-compatible endpoint)
    "gemini-2.0-flash": (_P.GOOGLE,),
    "gemini-1.5-pro": (_P.GOOGLE,),
}

MODEL_CATALOG: Mapping[str, Tuple[ApiProvider, ...]] = MappingProxyType(_CATALOG)


def providers_for(model: str) -> Tuple[ApiProvider, ...]:
    return MODEL_CATALOG.get(model, ())


def default_provider(model: str) -> Optional[ApiProvider]:
    """Return the default provider for ``model`` or ``None`` if unknown."""
    hosts = providers_for(model)
    return hosts[0] if hosts else None


def models_for(provider: ApiProvider) -> Tuple[str, ...]:
    """Catalog model identifiers served by ``provider``, in table order."""
    return tuple(m for m, hosts in MODEL_CATALOG.items() if provider in hosts)


__all__ = ["MODEL_CATALOG", "providers_for", "default_provider", "models_for"]
