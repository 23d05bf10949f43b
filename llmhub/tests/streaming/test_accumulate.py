"""Folding stream chunks into a complete response."""
from __future__ import annotations

from llmhub.base.models import StreamChunk
from llmhub.base.streaming import accumulate_chunks
from llmhub.tests.helpers import delta_payload


def _chunks(*docs):
    return [StreamChunk.model_validate(d) for d in docs]


def test_text_and_reasoning_concatenate():
    completion = accumulate_chunks(
        _chunks(
            delta_payload(role="assistant", reasoning="think "),
            delta_payload(reasoning="hard"),
            delta_payload("Hel"),
            delta_payload("lo"),
            delta_payload(finish_reason="stop", usage={"prompt_tokens": 1, "completion_tokens": 2}),
        )
    )
    assert completion.content() == "Hello"  # nosec B101
    assert completion.reasoning() == "think hard"  # nosec B101
    assert completion.role() == "assistant"  # nosec B101
    assert completion.finish_reason() == "stop"  # nosec B101
    assert completion.usage.total() == 3  # nosec B101
    assert completion.id == "chatcmpl-1" and completion.object == "chat.completion"  # nosec B101


def test_tool_call_fragments_merge_by_index():
    completion = accumulate_chunks(
        _chunks(
            delta_payload(
                tool_calls=[{"index": 0, "id": "call_1", "type": "function", "function": {"name": "get", "arguments": '{"c'}}]
            ),
            delta_payload(tool_calls=[{"index": 0, "function": {"arguments": 'ity": "Oslo"}'}}]),
            delta_payload(tool_calls=[{"index": 1, "id": "call_2", "function": {"name": "other", "arguments": "{}"}}]),
            delta_payload(finish_reason="tool_calls"),
        )
    )
    calls = completion.tool_calls()
    assert [c.id for c in calls] == ["call_1", "call_2"]  # nosec B101
    assert calls[0].function.name == "get"  # nosec B101
    assert calls[0].function.arguments == '{"city": "Oslo"}'  # nosec B101
    assert calls[1].type == "function"  # nosec B101
    msg = completion.to_message()
    assert msg is not None and len(msg.tool_calls) == 2  # nosec B101


def test_multiple_choices_are_kept_apart():
    completion = accumulate_chunks(
        _chunks(delta_payload("a", index=0), delta_payload("b", index=1), delta_payload("c", index=0))
    )
    assert [c.message.content for c in completion.choices] == ["ac", "b"]  # nosec B101


def test_empty_input_yields_empty_completion():
    completion = accumulate_chunks([])
    assert completion.choices == []  # nosec B101
    assert completion.content() is None  # nosec B101
