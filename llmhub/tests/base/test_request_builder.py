"""Request builder ordering, ownership and serialization."""
from __future__ import annotations

import pytest

from llmhub.base.errors import CapabilityUnsupported, ConfigurationError, RequestValidationError
from llmhub.base.models import Message
from llmhub.base.request_builder import build_request, prepare_request
from llmhub.base.session import ChatSession


def _msgs():
    return [Message.system("sys"), Message.user("hi")]


def test_body_has_model_messages_and_set_options_only():
    req = build_request("deepseek", "chat", "deepseek-chat", _msgs(), {"temperature": 0.3})
    assert req.to_payload() == {  # nosec B101
        "model": "deepseek-chat",
        "messages": [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}],
        "temperature": 0.3,
    }


def test_unset_options_are_absent_not_null():
    body = build_request("openai", "chat", "gpt-4o", _msgs()).to_payload()
    assert set(body) == {"model", "messages"}  # nosec B101


def test_stream_argument_overrides_options():
    req = build_request("deepseek", "chat", "deepseek-chat", _msgs(), {"stream": False}, stream=True)
    assert req.stream is True  # nosec B101
    assert req.to_payload()["stream"] is True  # nosec B101


def test_capability_checked_before_model_and_messages():
    # every input is invalid; the capability failure must win
    with pytest.raises(CapabilityUnsupported):
        build_request("deepseek", "embedding", "", [])


def test_model_checked_before_messages():
    with pytest.raises(RequestValidationError) as ei:
        build_request("deepseek", "chat", "  ", [])
    assert "model" in ei.value.message  # nosec B101
    assert ei.value.provider == "deepseek"  # nosec B101


def test_empty_message_list_rejected():
    with pytest.raises(RequestValidationError) as ei:
        build_request("deepseek", "chat", "deepseek-chat", [])
    assert "message" in ei.value.message  # nosec B101
    assert ei.value.model == "deepseek-chat"  # nosec B101


def test_unknown_provider_rejected():
    with pytest.raises(ConfigurationError):
        build_request("nobody", "chat", "m", _msgs())


def test_request_owns_a_copy_of_the_history():
    session = ChatSession("deepseek-chat", "deepseek")
    session.add_message(Message.user("first"))
    req = build_request("deepseek", "chat", "deepseek-chat", session.messages())
    session.add_message(Message.user("second"))
    assert [m.content for m in req.messages] == ["first"]  # nosec B101

    source = [Message.user("a")]
    req2 = build_request("deepseek", "chat", "deepseek-chat", source)
    source.append(Message.user("b"))
    assert len(req2.messages) == 1  # nosec B101


def test_mapping_messages_are_coerced():
    req = build_request("xai", "chat", "grok-2-latest", [{"role": "user", "content": "yo"}])
    assert req.messages == (Message.user("yo"),)  # nosec B101


def test_prepare_request_resolves_url():
    prepared = prepare_request("deepseek", "deepseek-chat", _msgs(), stream=True)
    assert prepared.url == "https://api.deepseek.com/chat/completions"  # nosec B101
    assert prepared.provider == "deepseek"  # nosec B101
    assert prepared.capability == "chat"  # nosec B101
    assert prepared.model == "deepseek-chat"  # nosec B101
    assert prepared.stream is True  # nosec B101
    assert prepared.body()["stream"] is True  # nosec B101


def test_prepare_request_honours_base_url_override():
    prepared = prepare_request("openai", "gpt-4o", _msgs(), base_url="http://localhost:8080/v1")
    assert prepared.url == "http://localhost:8080/v1/chat/completions"  # nosec B101
