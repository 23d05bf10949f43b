"""CLI parsing and handlers with an injected client factory."""
from __future__ import annotations

import io
import json

import pytest

from llmhub.base.errors import ApiError, ConfigurationError
from llmhub.base.rate_limit import RequestRateLimiter
from llmhub.cli import main
from llmhub.cli.cli_actions import handle_chat, plan_chat
from llmhub.cli.cli_parser import build_parser
from llmhub.client import LLMClient
from llmhub.config import ProviderConfig
from llmhub.tests.helpers import FakeTransport, completion_payload, delta_payload, sse


def _factory(transport: FakeTransport):
    def make(_config_path):
        configs = [
            ProviderConfig(api_provider="deepseek", api_key="sk-d"),
            ProviderConfig(api_provider="zhipuai", api_key="sk-z"),
        ]
        return LLMClient(configs, transport=transport, rate_limiter=RequestRateLimiter(0))

    return make


def _args(*argv):
    return build_parser().parse_args(["chat", *argv])


def test_plan_defaults():
    plan = plan_chat(_args("hi", "there"), stdin=io.StringIO(""))
    assert plan["provider"] == "deepseek" and plan["model"] == "deepseek-chat"  # nosec B101
    assert [m.role for m in plan["messages"]] == ["system", "user"]  # nosec B101
    assert plan["messages"][1].content == "hi there"  # nosec B101
    assert plan["options"] == {}  # nosec B101


def test_plan_provider_only_uses_first_catalog_model():
    plan = plan_chat(_args("--provider", "zhipuai", "q"), stdin=io.StringIO(""))
    assert plan["model"] == "glm-4-plus"  # nosec B101


def test_plan_reads_prompt_from_stdin_and_options():
    plan = plan_chat(
        _args("--system", "", "--temperature", "0.5", "--max-tokens", "10"), stdin=io.StringIO("from stdin\n")
    )
    assert [m.content for m in plan["messages"]] == ["from stdin"]  # nosec B101
    assert plan["options"] == {"temperature": 0.5, "max_tokens": 10}  # nosec B101


def test_plan_unknown_provider():
    with pytest.raises(ConfigurationError):
        plan_chat(_args("--provider", "anthropic_x", "q"))


def test_handle_chat_prints_content():
    transport = FakeTransport(document=completion_payload("the answer", reasoning="why"))
    out, err = io.StringIO(), io.StringIO()
    code = handle_chat(
        _args("--show-reasoning", "question"), client_factory=_factory(transport), stdin=io.StringIO(), out=out, err_out=err
    )
    assert code == 0  # nosec B101
    assert out.getvalue() == "the answer\n"  # nosec B101
    assert err.getvalue() == "why\n"  # nosec B101


def test_handle_chat_streams_deltas():
    transport = FakeTransport(chunks=[sse(delta_payload("str"), delta_payload("eamed"))])
    out = io.StringIO()
    code = handle_chat(_args("q", "--stream"), client_factory=_factory(transport), out=out, err_out=io.StringIO())
    assert code == 0  # nosec B101
    assert out.getvalue() == "streamed\n"  # nosec B101
    assert transport.open_streams == 0  # nosec B101


def test_handle_chat_stream_json_collects():
    transport = FakeTransport(chunks=[sse(delta_payload("a"), delta_payload("b", finish_reason="stop"))])
    out = io.StringIO()
    handle_chat(_args("--stream", "--json", "q"), client_factory=_factory(transport), out=out, err_out=io.StringIO())
    doc = json.loads(out.getvalue())
    assert doc["choices"][0]["message"]["content"] == "ab"  # nosec B101


def test_handle_chat_renders_library_errors():
    transport = FakeTransport(error=ApiError(402, "insufficient_quota"))
    out, err = io.StringIO(), io.StringIO()
    code = handle_chat(_args("q"), client_factory=_factory(transport), out=out, err_out=err)
    assert code == 1  # nosec B101
    assert err.getvalue().strip() == "Error: API quota exhausted. Please check your account balance"  # nosec B101

    out = io.StringIO()
    handle_chat(_args("--json", "q"), client_factory=_factory(transport), out=out, err_out=io.StringIO())
    assert json.loads(out.getvalue())["error"]["code"] == "quota"  # nosec B101


def test_main_defaults_to_chat_subcommand(capsys):
    transport = FakeTransport()
    code = main(["--log-level", "WARNING", "hello"], client_factory=_factory(transport))
    assert code == 0  # nosec B101
    assert capsys.readouterr().out == "hello\n"  # nosec B101
    assert transport.calls[0].body["messages"][-1] == {"role": "user", "content": "hello"}  # nosec B101


def test_main_missing_key_exits_nonzero(capsys):
    code = main(["--model", "gpt-4o", "hi"])
    assert code == 1  # nosec B101
    assert "missing_api_key" in capsys.readouterr().err  # nosec B101


def test_providers_listing(capsys):
    assert main(["providers", "--json"]) == 0  # nosec B101
    rows = json.loads(capsys.readouterr().out)
    assert {r["provider"] for r in rows} >= {"openai", "deepseek", "google"}  # nosec B101
    assert main(["providers"]) == 0  # nosec B101
    assert "https://api.deepseek.com" in capsys.readouterr().out  # nosec B101


def test_stream_flag_parsing():
    assert _args("--stream").stream is True  # nosec B101
    assert _args("--stream", "false").stream is False  # nosec B101
    assert _args("--no-stream").stream is False  # nosec B101
    assert _args().stream is False  # nosec B101
