"""Output adapter tests.

Covers:
- event-stream frames and headers (rendered through FastAPI TestClient)
- data-protocol frames are JSON with a ``type`` and end with the sentinel
- data-protocol encoding is strict
- tool argument deltas are opened with one tool-input-start per call
- broadcast publishes one shared notification per event to every channel
- dispatch tables are checked at class creation
"""
from __future__ import annotations

import json
import math

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from crux_stream.base.dto import ToolCall, ToolResult
from crux_stream.base.errors import AdapterConfigurationError
from crux_stream.base.models import Citation, CitationSourceType, FinishReason, Usage
from crux_stream.base.streaming.adapters import (
    BroadcastAdapter,
    DataProtocolAdapter,
    EventDispatcher,
    EventStreamAdapter,
    InMemoryBroadcaster,
    RedisBroadcaster,
    StreamEventBroadcast,
)
from crux_stream.base.streaming.events import (
    CitationEvent,
    ErrorEvent,
    ProviderToolEvent,
    StreamEndEvent,
    StreamEventType,
    StreamStartEvent,
    TextCompleteEvent,
    TextDeltaEvent,
    TextStartEvent,
    ThinkingCompleteEvent,
    ThinkingDeltaEvent,
    ThinkingStartEvent,
    ToolCallDeltaEvent,
    ToolCallEvent,
    ToolResultEvent,
)


def _all_variants():
    call = ToolCall(id="t1", name="weather", raw_arguments='{"city": "Paris"}')
    result = ToolResult(tool_call_id="t1", tool_name="weather", args={"city": "Paris"}, result={"temp": 21})
    return [
        StreamStartEvent(model="m", provider="p", metadata={"delivery": "push"}),
        ThinkingStartEvent(reasoning_id="r1"),
        ThinkingDeltaEvent(delta="hmm", reasoning_id="r1"),
        ThinkingCompleteEvent(reasoning_id="r1"),
        TextStartEvent(message_id="m1"),
        TextDeltaEvent(delta="Hi", message_id="m1"),
        TextCompleteEvent(message_id="m1"),
        ToolCallDeltaEvent(tool_call_id="t1", tool_name="weather", delta='{"ci', message_id="m1"),
        ToolCallEvent(tool_call=call, message_id="m1"),
        ToolResultEvent(tool_result=result, message_id="m1"),
        CitationEvent(
            citation=Citation(source_type=CitationSourceType.URL, source="https://example.com", source_title="Ex"),
            message_id="m1",
        ),
        CitationEvent(citation=Citation(source_type=CitationSourceType.DOCUMENT, source="0"), message_id="m1"),
        ProviderToolEvent(tool_type="web_search_call", status="completed", item_id="ws_1"),
        ErrorEvent(error_type="overloaded", message="busy", recoverable=True),
        StreamEndEvent(finish_reason=FinishReason.STOP, usage=Usage(prompt_tokens=1, completion_tokens=2)),
    ]


def _app(build_response):
    app = FastAPI()

    @app.get("/stream")
    def stream():
        return build_response(iter(_all_variants()))

    return TestClient(app)


def test_event_stream_frames_and_headers():
    client = _app(EventStreamAdapter())
    response = client.get("/stream")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["x-accel-buffering"] == "no"

    frames = [f for f in response.text.split("\n\n") if f]
    assert len(frames) == len(_all_variants())
    first_event, first_data = frames[0].split("\n")
    assert first_event == "event: stream_start"
    payload = json.loads(first_data[len("data: "):])
    assert payload["provider"] == "p" and payload["metadata"]["delivery"] == "push"
    assert frames[-1].startswith("event: stream_end")


def test_data_protocol_frames_are_typed_json_and_end_with_sentinel():
    client = _app(DataProtocolAdapter())
    response = client.get("/stream")
    assert response.status_code == 200
    assert response.headers["content-type"] == "text/plain; charset=utf-8"
    assert response.headers["cache-control"] == "no-cache, no-transform"
    assert response.headers["x-vercel-ai-ui-message-stream"] == "v1"

    frames = [f for f in response.text.split("\n\n") if f]
    assert frames[-1] == "data: [DONE]"
    parts = [json.loads(f[len("data: "):]) for f in frames[:-1]]
    assert all("type" in p for p in parts), "every frame must carry a type"
    assert [p["type"] for p in parts] == [
        "start",
        "reasoning-start",
        "reasoning-delta",
        "reasoning-end",
        "text-start",
        "text-delta",
        "text-end",
        "tool-input-start",
        "tool-input-delta",
        "tool-input-available",
        "tool-output-available",
        "source-url",
        "source-document",
        "data-provider_tool_event",
        "error",
        "finish",
    ]
    assert parts[7] == {"type": "tool-input-start", "toolCallId": "t1", "toolName": "weather"}
    assert parts[9]["input"] == {"city": "Paris"}
    assert parts[10]["output"] == {"temp": 21}
    assert parts[14]["errorText"] == "busy"
    assert parts[15]["messageMetadata"] == {
        "finishReason": "stop",
        "usage": {"promptTokens": 1, "completionTokens": 2},
    }


def test_data_protocol_opens_each_tool_input_once():
    events = [
        ToolCallDeltaEvent(tool_call_id="t1", tool_name="weather", delta='{"ci', message_id="m1"),
        ToolCallDeltaEvent(tool_call_id="t1", tool_name="weather", delta='ty": 1}', message_id="m1"),
        ToolCallDeltaEvent(tool_call_id="t2", tool_name="clock", delta="{}", message_id="m1"),
    ]
    frames = list(DataProtocolAdapter().iter_frames(events))
    parts = [json.loads(f[len("data: "):]) for f in frames[:-1]]
    assert [(p["type"], p["toolCallId"]) for p in parts] == [
        ("tool-input-start", "t1"),
        ("tool-input-delta", "t1"),
        ("tool-input-delta", "t1"),
        ("tool-input-start", "t2"),
        ("tool-input-delta", "t2"),
    ]
    assert parts[3]["toolName"] == "clock"


def test_data_protocol_empty_sequence_still_terminates():
    assert list(DataProtocolAdapter().iter_frames([])) == ["data: [DONE]\n\n"]


def test_data_protocol_encoding_failure_aborts_body():
    bad = ToolResult(tool_call_id="t1", tool_name="calc", result=math.nan)
    events = [TextStartEvent(message_id="m1"), ToolResultEvent(tool_result=bad, message_id="m1")]
    frames = DataProtocolAdapter().iter_frames(events)
    assert next(frames).startswith('data: {"type": "text-start"')
    with pytest.raises(ValueError):
        next(frames)


def test_broadcast_shares_one_notification_across_channels():
    broadcaster = InMemoryBroadcaster()
    received = []
    broadcaster.subscribe("b", lambda channel, n: received.append((channel, n)))
    count = BroadcastAdapter(["a", "b"], broadcaster)(_all_variants())

    assert count == len(_all_variants())
    on_a = broadcaster.notifications("a")
    on_b = broadcaster.notifications("b")
    assert len(on_a) == len(on_b) == count
    assert all(x is y for x, y in zip(on_a, on_b)), "channels must receive the identical instance"
    assert [n for _, n in received] == on_b
    assert on_a[0].broadcast_on() == ["a", "b"]
    assert on_a[0].broadcast_as() == "stream_start"
    assert on_a[12].broadcast_as() == "provider_tool_event.web_search_call.completed"
    assert on_a[5].broadcast_with()["delta"] == "Hi"


def test_redis_broadcaster_publishes_json_per_channel():
    class FakeRedis:
        def __init__(self):
            self.published = []

        def publish(self, channel, message):
            self.published.append((channel, message))
            return 1

    client = FakeRedis()
    notification = StreamEventBroadcast(TextDeltaEvent(delta="x", message_id="m1"), ["c1", "c2"])
    RedisBroadcaster(client).publish(notification)
    assert [c for c, _ in client.published] == ["c1", "c2"]
    message = json.loads(client.published[0][1])
    assert message["event"] == "text_delta" and message["data"]["delta"] == "x"


def test_missing_variant_fails_at_class_creation():
    with pytest.raises(AdapterConfigurationError) as info:

        class Partial(EventDispatcher):
            handlers = {StreamEventType.TEXT_DELTA: "render"}

            def render(self, event):
                return event

    assert "stream_start" in info.value.message


def test_unbound_handler_name_fails_at_class_creation():
    with pytest.raises(AdapterConfigurationError):

        class Typo(EventDispatcher):
            handlers = {t: "missing_method" for t in StreamEventType}
