"""History collector tests.

Covers:
- pass-through preserves order and identity
- text-only sequence rebuilds exactly one assistant message
- tool rounds alternate assistant and tool-result messages
- callback is invoked once, with the request when given, and never on failure
"""
from __future__ import annotations

import pytest

from crux_stream.base.dto import ToolCall, ToolResult
from crux_stream.base.models import AssistantMessage, FinishReason, TextRequest, ToolResultMessage
from crux_stream.base.streaming.collector import StreamCollector
from crux_stream.base.streaming.events import (
    StreamEndEvent,
    StreamStartEvent,
    TextCompleteEvent,
    TextDeltaEvent,
    TextStartEvent,
    ToolCallEvent,
    ToolResultEvent,
)


def _text_round(message_id, *deltas, finish=FinishReason.STOP):
    return [
        StreamStartEvent(model="m", provider="p"),
        TextStartEvent(message_id=message_id),
        *[TextDeltaEvent(delta=d, message_id=message_id) for d in deltas],
        TextCompleteEvent(message_id=message_id),
        StreamEndEvent(finish_reason=finish),
    ]


def test_pass_through_preserves_identity():
    events = _text_round("m1", "a", "b")
    seen = list(StreamCollector(events))
    assert len(seen) == len(events)
    assert all(a is b for a, b in zip(seen, events))


def test_text_only_reconstructs_one_assistant_message():
    calls = []
    collector = StreamCollector(_text_round("m1", "Hel", "lo"), on_complete=calls.append)
    list(collector)
    assert len(calls) == 1
    history = calls[0]
    assert isinstance(history, tuple)
    assert history == collector.history
    assert len(history) == 1
    assert isinstance(history[0], AssistantMessage) and history[0].content == "Hello"


def test_tool_rounds_alternate_messages():
    call = ToolCall(id="t1", name="weather", raw_arguments='{"city": "Paris"}')
    result = ToolResult(tool_call_id="t1", tool_name="weather", args={"city": "Paris"}, result="sunny")
    events = [
        StreamStartEvent(model="m", provider="p"),
        TextStartEvent(message_id="m1"),
        TextDeltaEvent(delta="Checking", message_id="m1"),
        TextCompleteEvent(message_id="m1"),
        ToolCallEvent(tool_call=call, message_id="m1"),
        StreamEndEvent(finish_reason=FinishReason.TOOL_CALLS),
        ToolResultEvent(tool_result=result, message_id="m1"),
        *_text_round("m2", "It is sunny"),
    ]
    collector = StreamCollector(events)
    list(collector)
    history = collector.history
    assert [type(m) for m in history] == [AssistantMessage, ToolResultMessage, AssistantMessage]
    assert history[0].content == "Checking" and history[0].tool_calls == (call,)
    assert history[1].tool_results == (result,)
    assert history[2].content == "It is sunny"


def test_tool_call_without_text_opens_assistant_message():
    call = ToolCall(id="t1", name="lookup")
    result = ToolResult(tool_call_id="t1", tool_name="lookup", result=1)
    events = [
        ToolCallEvent(tool_call=call, message_id="m1"),
        ToolResultEvent(tool_result=result, message_id="m1"),
        ToolCallEvent(tool_call=call, message_id="m2"),
        ToolResultEvent(tool_result=result, message_id="m2"),
    ]
    collector = StreamCollector(events)
    list(collector)
    roles = [m.role for m in collector.history]
    assert roles == ["assistant", "tool", "assistant", "tool"]


def test_callback_receives_request_when_given():
    request = TextRequest(model="m")
    received = []
    list(StreamCollector(_text_round("m1", "x"), lambda h, r: received.append((h, r)), request))
    assert len(received) == 1 and received[0][1] is request


def test_callback_not_invoked_on_failure():
    def failing():
        yield TextStartEvent(message_id="m1")
        raise RuntimeError("provider went away")

    calls = []
    with pytest.raises(RuntimeError):
        list(StreamCollector(failing(), on_complete=calls.append))
    assert calls == []


def test_callback_not_invoked_when_abandoned():
    calls = []
    iterator = iter(StreamCollector(_text_round("m1", "a", "b"), on_complete=calls.append))
    next(iterator)
    iterator.close()
    assert calls == []
