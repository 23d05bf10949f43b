"""Provider configuration: file records, environment records and merging."""
from __future__ import annotations

import json

import pytest

from llmhub.base.errors import ConfigurationError
from llmhub.base.registry import ApiProvider
from llmhub.config import ProviderConfig, get_provider_config, load_provider_configs, merge_configs
from llmhub.config.env import get_key_var_candidates, is_placeholder, resolve_provider_key


def _write(tmp_path, records) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return str(path)


def test_missing_file_yields_nothing(tmp_path):
    assert load_provider_configs(str(tmp_path / "absent.json")) == []  # nosec B101


def test_file_records_are_parsed(tmp_path):
    path = _write(
        tmp_path,
        [
            {"api_provider": "DeepSeek", "api_key": "sk-file", "api_base_url": ""},
            {"api_provider": "openai", "api_key": "sk-oai", "api_base_url": "https://proxy/v1"},
        ],
    )
    configs = load_provider_configs(path)
    ds = get_provider_config(configs, "deepseek")
    assert ds is not None and ds.api_key == "sk-file" and ds.api_base_url is None  # nosec B101
    assert get_provider_config(configs, ApiProvider.OPENAI).api_base_url == "https://proxy/v1"  # nosec B101


def test_env_wins_over_file(tmp_path, monkeypatch):
    path = _write(tmp_path, [{"api_provider": "deepseek", "api_key": "sk-file", "api_base_url": "https://file"}])
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-env")
    configs = load_provider_configs(path)
    ds = get_provider_config(configs, "deepseek")
    assert ds.api_key == "sk-env"  # nosec B101
    # no DEEPSEEK_API_BASE, so the file's base URL survives
    assert ds.api_base_url == "https://file"  # nosec B101
    monkeypatch.setenv("DEEPSEEK_API_BASE", "https://env")
    assert get_provider_config(load_provider_configs(path), "deepseek").api_base_url == "https://env"  # nosec B101


def test_config_file_env_var_is_honoured(tmp_path, monkeypatch):
    path = _write(tmp_path, [{"api_provider": "xai", "api_key": "sk-x"}])
    monkeypatch.setenv("LLMHUB_CONFIG_FILE", path)
    assert [c.api_provider for c in load_provider_configs()] == [ApiProvider.XAI]  # nosec B101


def test_gemini_alias_and_placeholders(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    assert resolve_provider_key("google") == ("g-key", "GEMINI_API_KEY")  # nosec B101
    monkeypatch.setenv("GOOGLE_API_KEY", "your_google_key_here")
    assert resolve_provider_key("google") == ("g-key", "GEMINI_API_KEY")  # nosec B101
    assert list(get_key_var_candidates("google")) == ["GOOGLE_API_KEY", "GEMINI_API_KEY"]  # nosec B101


@pytest.mark.parametrize(
    "value,expected",
    [("your_openai_key_here", True), ("CHANGEME", True), ("sk-example-123", True), ("sk-live-abc", False), (None, False)],
)
def test_is_placeholder(value, expected):
    assert is_placeholder(value) is expected  # nosec B101


def test_placeholder_key_in_file_is_not_usable(tmp_path):
    path = _write(tmp_path, [{"api_provider": "openai", "api_key": "placeholder"}])
    cfg = load_provider_configs(path)[0]
    assert cfg.usable_key() is None  # nosec B101


@pytest.mark.parametrize(
    "content",
    ["{not json", json.dumps({"api_provider": "openai"}), json.dumps([{"api_provider": "mistral", "api_key": "k"}])],
)
def test_malformed_file_raises_configuration_error(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_provider_configs(str(path))


def test_merge_keeps_base_order_and_appends_new():
    base = [ProviderConfig(api_provider="openai", api_key="a"), ProviderConfig(api_provider="xai", api_key="b")]
    merged = merge_configs(base, [ProviderConfig(api_provider="deepseek", api_key="c"), ProviderConfig(api_provider="xai", api_key="d")])
    assert [(c.api_provider.value, c.api_key) for c in merged] == [  # nosec B101
        ("openai", "a"),
        ("xai", "d"),
        ("deepseek", "c"),
    ]


def test_redacted_hides_key():
    cfg = ProviderConfig(api_provider="openai", api_key="sk-secret")
    assert cfg.redacted()["api_key"] == "***"  # nosec B101
    assert "sk-secret" not in json.dumps(cfg.redacted())  # nosec B101
