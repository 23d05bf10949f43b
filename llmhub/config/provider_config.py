"""Provider configuration records and loading.

A configuration record names a provider, an optional base URL override and
an API key. Records come from two sources, merged in this order:

1. an optional JSON file (a list of ``{"api_provider", "api_base_url",
   "api_key"}`` objects; default ``~/.llmhub/config.json``, or the path in
   ``LLMHUB_CONFIG_FILE``),
2. the process environment (``<PREFIX>_API_KEY`` / ``<PREFIX>_API_BASE``),
   which wins over the file for the same provider.

Loading never writes: a missing file simply contributes nothing.
"""
from __future__ import annotations

import json
import os
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..base.errors import ConfigurationError
from ..base.registry import ApiProvider, parse_provider
from .defaults import CONFIG_FILE_ENV, default_config_path
from .env import is_placeholder, resolve_provider_base_url, resolve_provider_key


class ProviderConfig(BaseModel):
    """Credentials and endpoint override for one provider."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    api_provider: ApiProvider
    api_base_url: Optional[str] = None
    api_key: Optional[str] = None

    @field_validator("api_provider", mode="before")
    @classmethod
    def _parse_provider(cls, v: Any) -> ApiProvider:
        return parse_provider(v)

    @field_validator("api_base_url", "api_key", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def from_env(cls, provider: Union[str, ApiProvider]) -> Optional["ProviderConfig"]:
        """Build a record from the environment; ``None`` without a real key."""
        p = parse_provider(provider)
        key, _ = resolve_provider_key(p.value)
        if key is None:
            return None
        return cls(api_provider=p, api_base_url=resolve_provider_base_url(p.value), api_key=key)

    def usable_key(self) -> Optional[str]:
        """The API key unless it is absent or a template placeholder."""
        if not self.api_key or is_placeholder(self.api_key):
            return None
        return self.api_key

    def redacted(self) -> dict:
        """Dict form safe for logs and CLI output."""
        data = self.model_dump(mode="json")
        if data.get("api_key"):
            data["api_key"] = "***"
        return data


def _read_config_file(path: str) -> List[ProviderConfig]:
    """Parse the JSON list at ``path``; a missing file yields no records.

    Raises:
        ConfigurationError: The file is unreadable, not a JSON list, or holds
            an invalid record.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except FileNotFoundError:
        return []
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"config file {path} is not valid JSON: {exc.msg}") from exc
    except OSError as exc:
        raise ConfigurationError(f"config file {path} could not be read: {exc}") from exc
    if not isinstance(raw, list):
        raise ConfigurationError(f"config file {path} must contain a JSON list of provider records")
    try:
        return [ProviderConfig.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise ConfigurationError(f"config file {path} has an invalid record: {exc.errors()[0]['msg']}") from exc


def merge_configs(base: Iterable[ProviderConfig], overrides: Iterable[ProviderConfig]) -> List[ProviderConfig]:
    """Merge ``overrides`` over ``base`` per provider, keeping ``base`` order.

    An override replaces the key; it replaces the base URL only when it
    carries one.
    """
    merged: List[ProviderConfig] = list(base)
    for override in overrides:
        for i, existing in enumerate(merged):
            if existing.api_provider is override.api_provider:
                merged[i] = existing.model_copy(
                    update={
                        "api_key": override.api_key,
                        "api_base_url": override.api_base_url or existing.api_base_url,
                    }
                )
                break
        else:
            merged.append(override)
    return merged


def load_env_configs() -> List[ProviderConfig]:
    """One record per provider that has a real key in the environment."""
    return [cfg for p in ApiProvider if (cfg := ProviderConfig.from_env(p)) is not None]


def load_provider_configs(path: Optional[str] = None) -> List[ProviderConfig]:
    """Load file records and merge environment records over them.

    Raises:
        ConfigurationError: The file exists but is unreadable or malformed.
    """
    target = path or os.environ.get(CONFIG_FILE_ENV) or default_config_path()
    return merge_configs(_read_config_file(os.path.expanduser(target)), load_env_configs())


def get_provider_config(
    configs: Iterable[ProviderConfig], provider: Union[str, ApiProvider]
) -> Optional[ProviderConfig]:
    """Return the record for ``provider``, if any."""
    p = parse_provider(provider)
    return next((c for c in configs if c.api_provider is p), None)


__all__ = [
    "ProviderConfig",
    "load_provider_configs",
    "load_env_configs",
    "merge_configs",
    "get_provider_config",
]
