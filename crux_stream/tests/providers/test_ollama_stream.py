"""Ollama producer tests against mocked NDJSON chunks."""
from __future__ import annotations

import json

import httpx
import pytest

from crux_stream.base.errors import ErrorCode, MidStreamError, ProviderRequestError
from crux_stream.base.models import FinishReason, TextRequest, UserMessage
from crux_stream.base.streaming.events import StreamEventType
from crux_stream.base.streaming.stream_state import StreamState
from crux_stream.ollama import OllamaStreamProducer

CONFIG = {"base_url": "http://ollama.test:11434"}


def _ndjson(*chunks):
    return httpx.Response(200, headers={"content-type": "application/x-ndjson"}, text="\n".join(json.dumps(c) for c in chunks) + "\n")


def _request(**kwargs):
    return TextRequest(model="llama-x", messages=[UserMessage("hi")], **kwargs)


def test_thinking_text_and_tool_calls(mock_client):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return _ndjson(
            {"message": {"role": "assistant", "thinking": "hmm"}, "done": False},
            {"message": {"role": "assistant", "content": "Hel"}, "done": False},
            {"message": {"role": "assistant", "content": "lo"}, "done": False},
            {"message": {"role": "assistant", "content": "", "tool_calls": [
                {"function": {"name": "weather", "arguments": {"city": "Paris"}}}]}, "done": False},
            {"message": {"role": "assistant", "content": ""}, "done": True, "done_reason": "stop",
             "prompt_eval_count": 12, "eval_count": 8},
        )

    producer = OllamaStreamProducer(client=mock_client(handler), config=CONFIG)
    events = list(producer.stream(_request(temperature=0.2), StreamState()))

    assert seen["url"] == "http://ollama.test:11434/api/chat"
    assert seen["body"]["options"] == {"temperature": 0.2}
    assert [e.type() for e in events] == [
        StreamEventType.STREAM_START,
        StreamEventType.THINKING_START,
        StreamEventType.THINKING_DELTA,
        StreamEventType.THINKING_COMPLETE,
        StreamEventType.TEXT_START,
        StreamEventType.TEXT_DELTA,
        StreamEventType.TEXT_DELTA,
        StreamEventType.TOOL_CALL,
        StreamEventType.TEXT_COMPLETE,
        StreamEventType.STREAM_END,
    ]
    assert events[7].tool_call.arguments() == {"city": "Paris"}
    end = events[-1]
    assert end.finish_reason is FinishReason.TOOL_CALLS
    assert (end.usage.prompt_tokens, end.usage.completion_tokens) == (12, 8)


def test_length_done_reason(mock_client):
    handler = lambda r: _ndjson(
        {"message": {"content": "cut"}, "done": False},
        {"message": {"content": ""}, "done": True, "done_reason": "length"},
    )
    producer = OllamaStreamProducer(client=mock_client(handler), config=CONFIG)
    events = list(producer.stream(_request(), StreamState()))
    assert events[-1].finish_reason is FinishReason.LENGTH


def test_error_chunk_raises(mock_client):
    handler = lambda r: _ndjson({"message": {"content": "a"}, "done": False}, {"error": "model crashed"})
    producer = OllamaStreamProducer(client=mock_client(handler), config=CONFIG)
    received = []
    with pytest.raises(MidStreamError):
        for event in producer.stream(_request(), StreamState()):
            received.append(event)
    assert received[-1].type() is StreamEventType.ERROR
    assert received[-1].message == "model crashed"


def test_stream_without_done_chunk_still_ends(mock_client):
    handler = lambda r: _ndjson(
        {"message": {"content": "Hel"}, "done": False},
        {"message": {"content": "lo"}, "done": False, "eval_count": 2},
    )
    producer = OllamaStreamProducer(client=mock_client(handler), config=CONFIG)
    events = list(producer.stream(_request(), StreamState()))
    assert [e.type() for e in events] == [
        StreamEventType.STREAM_START,
        StreamEventType.TEXT_START,
        StreamEventType.TEXT_DELTA,
        StreamEventType.TEXT_DELTA,
        StreamEventType.TEXT_COMPLETE,
        StreamEventType.STREAM_END,
    ]
    assert events[-1].finish_reason is FinishReason.STOP
    assert events[-1].usage.completion_tokens == 2


@pytest.mark.parametrize(
    "failure, code",
    [
        (httpx.ConnectError("connection refused"), ErrorCode.TRANSIENT),
        (httpx.ReadTimeout("read timed out"), ErrorCode.TIMEOUT),
    ],
)
def test_transport_failure_is_classified(mock_client, log_records, failure, code):
    def handler(request):
        raise failure

    producer = OllamaStreamProducer(client=mock_client(handler), config=CONFIG)
    with pytest.raises(ProviderRequestError) as info:
        list(producer.stream(_request(), StreamState()))
    assert info.value.code is code
    assert info.value.retryable is True
    assert info.value.raw is failure
    assert info.value.provider == "ollama" and info.value.model == "llama-x"
    error = next(r for r in log_records if r.get("event") == "stream.error")
    assert error["error_code"] == code.value and error["emitted"] is False
