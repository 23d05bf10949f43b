"""Configuration layer for llmhub.

Goals
-----
* Centralize defaults (config path, CLI choices).
* Merge sources in a predictable order:
    1. Optional JSON config file (``~/.llmhub/config.json`` or ``LLMHUB_CONFIG_FILE``)
    2. Environment variables (``<PREFIX>_API_KEY``, ``<PREFIX>_API_BASE``)
* Never write configuration to disk.

Public API
----------
* load_provider_configs(path: str | None = None) -> list[ProviderConfig]
* get_provider_config(configs, provider) -> ProviderConfig | None
"""
from __future__ import annotations

from .env import is_placeholder, resolve_provider_base_url, resolve_provider_key
from .provider_config import (
    ProviderConfig,
    get_provider_config,
    load_env_configs,
    load_provider_configs,
    merge_configs,
)

__all__ = [
    "ProviderConfig",
    "load_provider_configs",
    "load_env_configs",
    "merge_configs",
    "get_provider_config",
    "is_placeholder",
    "resolve_provider_key",
    "resolve_provider_base_url",
]
