"""OpenAI Responses producer tests against a mocked event stream."""
from __future__ import annotations

import json

import httpx
import pytest

from crux_stream.base.dto import ToolCall
from crux_stream.base.errors import MidStreamError
from crux_stream.base.models import AssistantMessage, CitationSourceType, FinishReason, TextRequest, UserMessage
from crux_stream.base.orchestration import MultiStepOrchestrator
from crux_stream.base.streaming.events import ErrorEvent, StreamEventType
from crux_stream.base.streaming.stream_state import StreamState
from crux_stream.base.tools import Tool
from crux_stream.openai import OpenAIStreamProducer
from crux_stream.openai.payload import map_input_items

CONFIG = {"base_url": "https://api.openai.test/v1", "api_key": "sk-test"}

ROUND = [
    {"type": "response.created", "response": {"id": "resp_1", "model": "gpt-x"}},
    {"type": "response.output_item.added", "item": {"type": "reasoning", "id": "rs_1"}},
    {"type": "response.reasoning_summary_text.delta", "item_id": "rs_1", "delta": "Look it up.", "summary_index": 0},
    {"type": "response.output_item.done", "item": {"type": "reasoning", "id": "rs_1"}},
    {"type": "response.output_text.delta", "delta": "Hi"},
    {"type": "response.output_text.annotation.added", "annotation_index": 0, "annotation": {
        "type": "url_citation", "url": "https://ex.com", "title": "Ex", "start_index": 0, "end_index": 2}},
    {"type": "response.output_item.added", "item": {"type": "function_call", "id": "fc_1", "call_id": "call_1", "name": "weather", "arguments": ""}},
    {"type": "response.function_call_arguments.delta", "item_id": "fc_1", "delta": '{"city":"Paris"}'},
    {"type": "response.function_call_arguments.done", "item_id": "fc_1", "arguments": '{"city":"Paris"}'},
    {"type": "response.output_item.done", "item": {"type": "function_call", "id": "fc_1", "call_id": "call_1", "name": "weather"}},
    {"type": "response.web_search_call.searching", "item_id": "ws_1", "output_index": 2},
    {"type": "response.completed", "response": {"id": "resp_1", "usage": {
        "input_tokens": 5, "output_tokens": 7, "output_tokens_details": {"reasoning_tokens": 3}}}},
]


def _request(**kwargs):
    return TextRequest(model="gpt-x", messages=[UserMessage("hi")], **kwargs)


def _response(sse_body, chunks):
    body = sse_body([(None, c) for c in chunks]) + "data: [DONE]\n\n"
    return httpx.Response(200, headers={"content-type": "text/event-stream", "x-request-id": "req_9"}, text=body)


def test_responses_round_translates_items(mock_client, sse_body):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return _response(sse_body, ROUND)

    producer = OpenAIStreamProducer(client=mock_client(handler), config=CONFIG)
    events = list(producer.stream(_request(schema={"type": "object"}), StreamState()))

    assert seen["url"] == "https://api.openai.test/v1/responses"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["text"]["format"]["type"] == "json_schema"

    assert [e.type() for e in events] == [
        StreamEventType.STREAM_START,
        StreamEventType.THINKING_START,
        StreamEventType.THINKING_DELTA,
        StreamEventType.THINKING_COMPLETE,
        StreamEventType.TEXT_START,
        StreamEventType.TEXT_DELTA,
        StreamEventType.CITATION,
        StreamEventType.TOOL_CALL_DELTA,
        StreamEventType.TOOL_CALL,
        StreamEventType.PROVIDER_TOOL_EVENT,
        StreamEventType.TEXT_COMPLETE,
        StreamEventType.STREAM_END,
    ]
    assert events[0].metadata["request_id"] == "req_9"
    assert events[0].metadata["response_id"] == "resp_1"
    assert events[1].reasoning_id == "rs_1"
    assert events[6].citation.source_type is CitationSourceType.URL
    call = events[8].tool_call
    assert (call.id, call.result_id, call.arguments()) == ("fc_1", "call_1", {"city": "Paris"})
    assert events[9].event_key() == "provider_tool_event.web_search_call.searching"
    end = events[-1]
    assert end.finish_reason is FinishReason.TOOL_CALLS
    assert end.usage.prompt_tokens == 5 and end.usage.thought_tokens == 3
    assert end.additional_content == {"response_id": "resp_1"}


def test_incomplete_maps_to_length(mock_client, sse_body):
    chunks = [
        {"type": "response.created", "response": {"id": "resp_2"}},
        {"type": "response.output_text.delta", "delta": "partial"},
        {"type": "response.incomplete", "response": {"id": "resp_2", "incomplete_details": {"reason": "max_output_tokens"}}},
    ]
    producer = OpenAIStreamProducer(client=mock_client(lambda r: _response(sse_body, chunks)), config=CONFIG)
    events = list(producer.stream(_request(), StreamState()))
    assert events[-1].finish_reason is FinishReason.LENGTH


def test_error_event_then_raise(mock_client, sse_body):
    chunks = [
        {"type": "response.created", "response": {"id": "resp_3"}},
        {"type": "error", "code": "server_error", "message": "boom"},
    ]
    producer = OpenAIStreamProducer(client=mock_client(lambda r: _response(sse_body, chunks)), config=CONFIG)
    received = []
    with pytest.raises(MidStreamError) as info:
        for event in producer.stream(_request(), StreamState()):
            received.append(event)
    assert info.value.error_type == "server_error"
    assert isinstance(received[-1], ErrorEvent) and received[-1].message == "boom"


def test_done_sentinel_without_completion_still_ends_round(mock_client, sse_body):
    chunks = [
        {"type": "response.created", "response": {"id": "resp_4"}},
        {"type": "response.output_text.delta", "delta": "Hi"},
    ]
    producer = OpenAIStreamProducer(client=mock_client(lambda r: _response(sse_body, chunks)), config=CONFIG)
    events = list(producer.stream(_request(), StreamState()))
    assert [e.type() for e in events] == [
        StreamEventType.STREAM_START,
        StreamEventType.TEXT_START,
        StreamEventType.TEXT_DELTA,
        StreamEventType.TEXT_COMPLETE,
        StreamEventType.STREAM_END,
    ]
    assert events[2].delta == "Hi"
    assert events[-1].finish_reason is FinishReason.STOP


def test_eof_after_function_call_ends_with_tool_calls(mock_client, sse_body):
    chunks = [
        {"type": "response.created", "response": {"id": "resp_5"}},
        {"type": "response.output_item.added", "item": {"type": "function_call", "id": "fc_2", "call_id": "call_2", "name": "weather"}},
        {"type": "response.function_call_arguments.done", "item_id": "fc_2", "arguments": "{}"},
    ]
    body = sse_body([(None, c) for c in chunks])
    handler = lambda r: httpx.Response(200, headers={"content-type": "text/event-stream"}, text=body)
    producer = OpenAIStreamProducer(client=mock_client(handler), config=CONFIG)
    events = list(producer.stream(_request(), StreamState()))
    assert events[-1].type() is StreamEventType.STREAM_END
    assert events[-1].finish_reason is FinishReason.TOOL_CALLS


def test_follow_up_request_replays_reasoning_before_function_call(mock_client, sse_body):
    bodies = []
    follow_up = [
        {"type": "response.created", "response": {"id": "resp_6"}},
        {"type": "response.output_text.delta", "delta": "Sunny."},
        {"type": "response.completed", "response": {"id": "resp_6"}},
    ]

    def handler(request):
        bodies.append(json.loads(request.content))
        return _response(sse_body, ROUND if len(bodies) == 1 else follow_up)

    producer = OpenAIStreamProducer(client=mock_client(handler), config=CONFIG)
    tool = Tool(name="weather", handler=lambda args: "sunny", description="current weather")
    list(MultiStepOrchestrator(producer).run(_request(tools=[tool], max_steps=2)))

    assert len(bodies) == 2
    replayed = [item.get("type") or item.get("role") for item in bodies[1]["input"]]
    assert replayed == ["user", "reasoning", "assistant", "function_call", "function_call_output"]
    assert bodies[1]["input"][1] == {"type": "reasoning", "id": "rs_1", "summary": []}


def test_reasoning_items_without_a_matching_call_are_not_replayed():
    message = AssistantMessage(
        content="",
        tool_calls=(ToolCall(id="fc_1", name="weather", raw_arguments="{}", result_id="call_1", reasoning_id="rs_2"),),
        additional_content={"reasoning_items": [
            {"type": "reasoning", "id": "rs_1", "summary": [{"type": "summary_text", "text": "old"}]},
            {"type": "reasoning", "id": "rs_2", "summary": [], "encrypted_content": "enc", "status": "completed"},
        ]},
    )
    items = map_input_items(message)
    assert items[0] == {"type": "reasoning", "id": "rs_2", "summary": [], "encrypted_content": "enc"}
    assert [i["type"] for i in items] == ["reasoning", "function_call"]
