"""Pytest configuration for the llmhub test suite.

Keeps tests hermetic: provider credentials and llmhub settings in the
developer's environment are removed, the config file location points at a
temporary path, and pooled HTTP clients are closed after each test.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from llmhub.base.http import close_all_clients
from llmhub.base.logging import get_logger
from llmhub.config import ProviderConfig
from llmhub.config.env import ENV_ALIASES, ENV_PREFIXES
from llmhub.tests.helpers import FakeTransport


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Strip provider env vars and point the config file at ``tmp_path``."""
    for prefix in ENV_PREFIXES.values():
        monkeypatch.delenv(f"{prefix}_API_KEY", raising=False)
        monkeypatch.delenv(f"{prefix}_API_BASE", raising=False)
    for aliases in ENV_ALIASES.values():
        for name in aliases:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("LLMHUB_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LLMHUB_CONFIG_FILE", str(tmp_path / "missing-config.json"))
    base = get_logger()
    level = base.level
    yield
    close_all_clients()
    # undo any level pinned by configure_logger (e.g. the CLI --log-level flag)
    vars(base).pop("_llmhub_level_pinned", None)
    base.setLevel(level)


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def deepseek_config() -> ProviderConfig:
    return ProviderConfig(api_provider="deepseek", api_key="sk-test-deepseek")


@pytest.fixture()
def openai_config() -> ProviderConfig:
    return ProviderConfig(api_provider="openai", api_key="sk-test-openai")


@pytest.fixture()
def log_records() -> Iterator[List[logging.LogRecord]]:
    """Capture records emitted under the ``llmhub`` logger hierarchy."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda record: records.append(record)  # type: ignore[method-assign]
    base = get_logger()
    previous = base.level
    base.setLevel(logging.DEBUG)
    base.addHandler(handler)
    try:
        yield records
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)
