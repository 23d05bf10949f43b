"""Environment variables carrying provider credentials and base URLs.

Each provider reads ``<PREFIX>_API_KEY`` and, optionally, ``<PREFIX>_API_BASE``.
A few providers also accept an alternate key variable (``ENV_ALIASES``); the
canonical name is tried first. Template values such as
``your_openai_key_here`` or ``changeme`` are treated as unset.

Lookups return ``None`` for unknown providers or unset variables.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Iterator, Optional, Tuple

ENV_PREFIXES: Dict[str, str] = {
    "openai": "OPENAI",
    "anthropic": "ANTHROPIC",
    "deepseek": "DEEPSEEK",
    "siliconflow": "SILICONFLOW",
    "qianfan": "QIANFAN",
    "zhipuai": "ZHIPUAI",
    "volcengine": "VOLCENGINE",
    "xai": "XAI",
    "tencent": "TENCENT",
    "alibailian": "ALIBAILIAN",
    "google": "GOOGLE",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "google": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
}

_PLACEHOLDER = re.compile(r"placeholder|changeme|example|^your_.*_here$")


def is_placeholder(val: Optional[str]) -> bool:
    """True for template values that should never be sent as a key."""
    return val is not None and _PLACEHOLDER.search(val.strip().lower()) is not None


def get_env_prefix(provider: str) -> Optional[str]:
    """Variable prefix for ``provider`` (``"openai"`` gives ``"OPENAI"``); ``None`` if unknown."""
    return ENV_PREFIXES.get(provider.lower()) if provider else None


def get_key_var_candidates(provider: str) -> Iterator[str]:
    """Key variable names for ``provider``, canonical first, without repeats."""
    prefix = get_env_prefix(provider)
    seen = [f"{prefix}_API_KEY"] if prefix else []
    seen.extend(a for a in ENV_ALIASES.get((provider or "").lower(), ()) if a not in seen)
    yield from seen


def _read(name: str) -> Optional[str]:
    """Stripped value of ``name``; unset and blank both read as ``None``."""
    value = (os.environ.get(name) or "").strip()
    return value or None


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """``(value, variable name)`` of the first real key set, else ``(None, None)``."""
    for name in get_key_var_candidates(provider):
        value = _read(name)
        if value is not None and not is_placeholder(value):
            return value, name
    return None, None


def resolve_provider_base_url(provider: str) -> Optional[str]:
    """Value of ``<PREFIX>_API_BASE`` for ``provider``, if set and non-blank."""
    prefix = get_env_prefix(provider)
    return _read(f"{prefix}_API_BASE") if prefix else None


__all__ = [
    "ENV_PREFIXES",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_prefix",
    "get_key_var_candidates",
    "resolve_provider_key",
    "resolve_provider_base_url",
]
