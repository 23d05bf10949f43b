"""LLMClient end-to-end behaviour over a fake transport.

Exercises check ordering (nothing is sent before configuration and admission
pass), session seeding, error enrichment, streaming hand-off and lifecycle.
"""
from __future__ import annotations

import gc
import json

import pytest

from llmhub import LLMClient
from llmhub.base.errors import (
    ApiError,
    CapabilityUnsupported,
    ConfigurationError,
    DecodeError,
    RateLimited,
    RequestValidationError,
)
from llmhub.base.models import Message
from llmhub.base.rate_limit import RequestRateLimiter
from llmhub.base.registry import REGISTRY, Capability
from llmhub.config import ProviderConfig
from llmhub.tests.helpers import FakeTransport, ManualClock, delta_payload, sse

HELLO = [Message.user("hello")]


def _client(transport, *configs, limiter=None):
    return LLMClient(configs, transport=transport, rate_limiter=limiter or RequestRateLimiter(0))


def test_chat_sends_expected_request(fake_transport, deepseek_config):
    client = _client(fake_transport, deepseek_config)
    reply = client.chat("deepseek-chat", HELLO, options={"temperature": 3})
    assert reply.content() == "hello"  # nosec B101
    call = fake_transport.calls[0]
    assert call.kind == "once"  # nosec B101
    assert call.url == "https://api.deepseek.com/chat/completions"  # nosec B101
    assert call.headers["Authorization"] == "Bearer sk-test-deepseek"  # nosec B101
    assert call.body == {  # nosec B101
        "model": "deepseek-chat",
        "messages": [{"role": "user", "content": "hello"}],
        "temperature": 2.0,
    }


def test_provider_inferred_from_catalog(fake_transport, openai_config):
    client = _client(fake_transport, openai_config)
    client.chat("gpt-4o", HELLO)
    assert fake_transport.calls[0].url.startswith("https://api.openai.com/v1/")  # nosec B101


def test_unknown_model_without_provider(fake_transport):
    with pytest.raises(ConfigurationError):
        _client(fake_transport).chat("mystery-model", HELLO)
    assert fake_transport.calls == []  # nosec B101


def test_explicit_provider_accepts_any_model(fake_transport, deepseek_config):
    _client(fake_transport, deepseek_config).chat("custom-finetune", HELLO, provider="DeepSeek")
    assert fake_transport.calls[0].body["model"] == "custom-finetune"  # nosec B101


def test_config_base_url_override(fake_transport):
    cfg = ProviderConfig(api_provider="openai", api_key="k", api_base_url="http://gateway/v1/")
    _client(fake_transport, cfg).chat("gpt-4o", HELLO)
    assert fake_transport.calls[0].url == "http://gateway/v1/chat/completions"  # nosec B101


def test_missing_key_raises_before_network(fake_transport):
    with pytest.raises(ConfigurationError) as ei:
        _client(fake_transport).chat("deepseek-chat", HELLO)
    assert "missing_api_key" in ei.value.message  # nosec B101
    assert ei.value.provider == "deepseek" and ei.value.model == "deepseek-chat"  # nosec B101
    assert fake_transport.calls == []  # nosec B101


def test_placeholder_key_counts_as_missing(fake_transport):
    cfg = ProviderConfig(api_provider="deepseek", api_key="your_deepseek_key_here")
    with pytest.raises(ConfigurationError):
        _client(fake_transport, cfg).chat("deepseek-chat", HELLO)


def test_validation_errors_precede_configuration(fake_transport):
    client = _client(fake_transport)
    with pytest.raises(RequestValidationError):
        client.chat("deepseek-chat", [])
    with pytest.raises(CapabilityUnsupported):
        client.prepare("deepseek-chat", HELLO, capability="embedding")


def test_rate_limited_second_call_sends_nothing(fake_transport, deepseek_config, openai_config, log_records):
    clock = ManualClock()
    client = _client(fake_transport, deepseek_config, openai_config, limiter=RequestRateLimiter(1.0, clock=clock))
    client.chat("deepseek-chat", HELLO)
    clock.advance(0.4)
    with pytest.raises(RateLimited) as ei:
        client.chat("deepseek-chat", HELLO)
    assert ei.value.retry_after_seconds == pytest.approx(0.6)  # nosec B101
    assert len(fake_transport.calls) == 1  # nosec B101
    assert any('"rate_limit.rejected"' in r.getMessage() for r in log_records)  # nosec B101
    # a different provider is admitted in the same window
    client.chat("gpt-4o", HELLO)
    assert len(fake_transport.calls) == 2  # nosec B101


def test_default_limiter_spaces_requests(fake_transport, deepseek_config):
    client = LLMClient([deepseek_config], transport=fake_transport)
    client.chat("deepseek-chat", HELLO)
    with pytest.raises(RateLimited):
        client.chat("deepseek-chat", HELLO)


def test_api_error_is_enriched_and_logged(fake_transport, deepseek_config, log_records):
    fake_transport.error = ApiError(401, '{"error": "invalid_api_key"}')
    with pytest.raises(ApiError) as ei:
        _client(fake_transport, deepseek_config).chat("deepseek-chat", HELLO)
    assert ei.value.provider == "deepseek" and ei.value.model == "deepseek-chat"  # nosec B101
    events = [json.loads(r.getMessage()) for r in log_records]
    error = next(e for e in events if e["event"] == "chat.error")
    assert error["error_code"] == "auth"  # nosec B101
    assert "sk-test-deepseek" not in json.dumps(events)  # nosec B101


def test_non_completion_document_is_decode_error(deepseek_config):
    transport = FakeTransport(document={"choices": "not-a-list"})
    with pytest.raises(DecodeError):
        _client(transport, deepseek_config).chat("deepseek-chat", HELLO)


def test_chat_end_logged_with_usage(fake_transport, deepseek_config, log_records):
    _client(fake_transport, deepseek_config).chat("deepseek-chat", HELLO)
    end = [json.loads(r.getMessage()) for r in log_records][-1]
    assert end["event"] == "chat.end"  # nosec B101
    assert end["tokens"] == {"prompt": 5, "completion": 2, "total": 7}  # nosec B101
    assert end["finish_reason"] == "stop" and end["provider"] == "deepseek"  # nosec B101


def test_session_seeds_request_and_is_not_mutated(fake_transport, deepseek_config):
    client = _client(fake_transport, deepseek_config)
    session = client.create_chat_session("deepseek-chat", max_history=4)
    assert session.provider == "deepseek"  # nosec B101
    session.add_message(Message.system("sys"))
    session.add_message(Message.user("q1"))
    reply = client.chat(session.model, session)
    assert len(session) == 2  # nosec B101
    session.add_message(reply.to_message())
    session.add_message(Message.user("q2"))
    client.chat(session.model, session)
    sent = fake_transport.calls[1].body["messages"]
    assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]  # nosec B101


def test_stream_request_forces_stream_flag(deepseek_config):
    transport = FakeTransport(chunks=[sse(delta_payload("Hel"), delta_payload("lo", finish_reason="stop"))])
    client = _client(transport, deepseek_config)
    with client.chat_stream("deepseek-chat", HELLO) as stream:
        text = "".join(stream.text_deltas())
    assert text == "Hello"  # nosec B101
    call = transport.calls[0]
    assert call.kind == "stream" and call.body["stream"] is True  # nosec B101
    assert call.headers["Accept"] == "text/event-stream"  # nosec B101
    assert transport.open_streams == 0  # nosec B101


def test_send_request_turns_streaming_off(fake_transport, deepseek_config):
    client = _client(fake_transport, deepseek_config)
    prepared = client.prepare("deepseek-chat", HELLO, stream=True)
    client.send_request(prepared)
    assert "stream" not in fake_transport.calls[0].body  # nosec B101


def test_stream_open_failure_raises_from_chat_stream(deepseek_config):
    transport = FakeTransport(error=ApiError(500, "boom"))
    with pytest.raises(ApiError) as ei:
        _client(transport, deepseek_config).chat_stream("deepseek-chat", HELLO)
    assert ei.value.model == "deepseek-chat"  # nosec B101


def test_stream_missing_key_sends_nothing():
    transport = FakeTransport()
    with pytest.raises(ConfigurationError):
        _client(transport).chat_stream("deepseek-chat", HELLO)
    assert transport.calls == []  # nosec B101


def test_stream_collect_builds_completion(deepseek_config):
    transport = FakeTransport(chunks=[sse(delta_payload("a", usage={"prompt_tokens": 1, "completion_tokens": 1}))])
    completion = _client(transport, deepseek_config).chat_stream("deepseek-chat", HELLO).collect()
    assert completion.content() == "a"  # nosec B101
    assert completion.usage.total() == 2  # nosec B101
    assert transport.open_streams == 0  # nosec B101


def test_update_config_and_close(fake_transport):
    client = LLMClient(transport=fake_transport)
    client.update_config(ProviderConfig(api_provider="xai", api_key="x-key"))
    assert client.get_config("xai").api_key == "x-key"  # nosec B101
    with client:
        client.chat("grok-2-latest", HELLO)
    assert client.closed and client.rate_limiter.closed  # nosec B101
    with pytest.raises(RuntimeError):
        client.chat("grok-2-latest", HELLO)
    client.close()


def test_shared_limiter_is_not_closed_by_client(fake_transport):
    limiter = RequestRateLimiter(0)
    LLMClient(transport=fake_transport, rate_limiter=limiter).close()
    assert not limiter.closed  # nosec B101


def test_from_config_reads_environment(monkeypatch, fake_transport):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-env")
    client = LLMClient.from_config(transport=fake_transport)
    client.chat("deepseek-chat", HELLO)
    assert fake_transport.calls[0].headers["Authorization"] == "Bearer sk-env"  # nosec B101


_UNSUPPORTED = [(p, c) for p, d in REGISTRY.items() for c in Capability if c not in d.capabilities]


@pytest.mark.parametrize("provider,capability", _UNSUPPORTED, ids=[f"{p.value}-{c.value}" for p, c in _UNSUPPORTED])
def test_unsupported_capability_sends_nothing(fake_transport, provider, capability):
    client = _client(fake_transport, ProviderConfig(api_provider=provider, api_key="sk-configured"))
    with pytest.raises(CapabilityUnsupported):
        client.prepare("any-model", HELLO, provider=provider, capability=capability)
    assert fake_transport.calls == []  # nosec B101


def test_abandoned_chat_stream_releases_connection(deepseek_config):
    transport = FakeTransport(chunks=[sse(delta_payload("a"), done=False), sse(delta_payload("b"))])
    client = _client(transport, deepseek_config)
    gc.disable()
    try:
        for event in client.chat_stream("deepseek-chat", HELLO):
            assert event.unwrap().content() == "a"  # nosec B101
            break
        assert transport.open_streams == 0  # nosec B101
    finally:
        gc.enable()
