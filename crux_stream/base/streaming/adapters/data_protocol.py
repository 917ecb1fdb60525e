"""Chunked data-protocol renderer (UI message stream, protocol ``v1``).

Every event maps to a ``type``-discriminated JSON object written as
``data: <json>\\n\\n``; the body always ends with ``data: [DONE]\\n\\n``.
The first argument fragment of a tool call is preceded by a
``tool-input-start`` part naming the call and its tool.

Encoding is strict: ``NaN``/``Infinity`` and values JSON cannot represent
raise while the body is being pulled, which aborts the response instead of
sending a degraded frame.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Iterator, Set

from fastapi.responses import StreamingResponse

from ...constants import DATA_PROTOCOL_DONE
from ...models_parts.citation import CitationSourceType
from ..events import (
    CitationEvent,
    ErrorEvent,
    ProviderToolEvent,
    StreamEndEvent,
    StreamEvent,
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
from .dispatch import EventDispatcher

DATA_PROTOCOL_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}


def encode_strict(data: Dict[str, Any]) -> str:
    return json.dumps(data, allow_nan=False, ensure_ascii=False)


class DataProtocolAdapter(EventDispatcher):
    """Render events as UI message stream parts."""

    handlers = {
        StreamEventType.STREAM_START: "stream_start",
        StreamEventType.TEXT_START: "text_start",
        StreamEventType.TEXT_DELTA: "text_delta",
        StreamEventType.TEXT_COMPLETE: "text_complete",
        StreamEventType.THINKING_START: "thinking_start",
        StreamEventType.THINKING_DELTA: "thinking_delta",
        StreamEventType.THINKING_COMPLETE: "thinking_complete",
        StreamEventType.TOOL_CALL: "tool_call",
        StreamEventType.TOOL_CALL_DELTA: "tool_call_delta",
        StreamEventType.TOOL_RESULT: "tool_result",
        StreamEventType.CITATION: "citation",
        StreamEventType.PROVIDER_TOOL_EVENT: "provider_tool_event",
        StreamEventType.ERROR: "error",
        StreamEventType.STREAM_END: "stream_end",
    }

    def stream_start(self, event: StreamStartEvent) -> Dict[str, Any]:
        return {"type": "start", "messageId": event.id}

    def text_start(self, event: TextStartEvent) -> Dict[str, Any]:
        return {"type": "text-start", "id": event.message_id}

    def text_delta(self, event: TextDeltaEvent) -> Dict[str, Any]:
        return {"type": "text-delta", "id": event.message_id, "delta": event.delta}

    def text_complete(self, event: TextCompleteEvent) -> Dict[str, Any]:
        return {"type": "text-end", "id": event.message_id}

    def thinking_start(self, event: ThinkingStartEvent) -> Dict[str, Any]:
        return {"type": "reasoning-start", "id": event.reasoning_id}

    def thinking_delta(self, event: ThinkingDeltaEvent) -> Dict[str, Any]:
        return {"type": "reasoning-delta", "id": event.reasoning_id, "delta": event.delta}

    def thinking_complete(self, event: ThinkingCompleteEvent) -> Dict[str, Any]:
        return {"type": "reasoning-end", "id": event.reasoning_id}

    def tool_call(self, event: ToolCallEvent) -> Dict[str, Any]:
        return {
            "type": "tool-input-available",
            "toolCallId": event.tool_call.id,
            "toolName": event.tool_call.name,
            "input": event.tool_call.arguments(),
        }

    def tool_input_start(self, event: ToolCallDeltaEvent) -> Dict[str, Any]:
        return {"type": "tool-input-start", "toolCallId": event.tool_call_id, "toolName": event.tool_name}

    def tool_call_delta(self, event: ToolCallDeltaEvent) -> Dict[str, Any]:
        return {
            "type": "tool-input-delta",
            "toolCallId": event.tool_call_id,
            "inputTextDelta": event.delta,
        }

    def tool_result(self, event: ToolResultEvent) -> Dict[str, Any]:
        return {
            "type": "tool-output-available",
            "toolCallId": event.tool_result.tool_call_id,
            "output": event.tool_result.result,
        }

    def citation(self, event: CitationEvent) -> Dict[str, Any]:
        citation = event.citation
        if citation.source_type is CitationSourceType.URL:
            return {
                "type": "source-url",
                "sourceId": event.id,
                "url": citation.source,
                "title": citation.source_title,
            }
        return {
            "type": "source-document",
            "sourceId": event.id,
            "mediaType": "text/plain",
            "title": citation.source_title or citation.source,
        }

    def provider_tool_event(self, event: ProviderToolEvent) -> Dict[str, Any]:
        return {"type": f"data-{event.type().value}", "data": event.to_dict()}

    def error(self, event: ErrorEvent) -> Dict[str, Any]:
        return {"type": "error", "errorText": event.message}

    def stream_end(self, event: StreamEndEvent) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"finishReason": event.finish_reason.value}
        if event.usage is not None:
            metadata["usage"] = {
                "promptTokens": event.usage.prompt_tokens,
                "completionTokens": event.usage.completion_tokens,
            }
        return {"type": "finish", "messageMetadata": metadata}

    def iter_frames(self, events: Iterable[StreamEvent]) -> Iterator[str]:
        """Yield encoded frames, then the terminator; raises on the first unencodable event."""
        started: Set[str] = set()
        for event in events:
            if isinstance(event, ToolCallDeltaEvent) and event.tool_call_id not in started:
                started.add(event.tool_call_id)
                yield f"data: {encode_strict(self.tool_input_start(event))}\n\n"
            yield f"data: {encode_strict(self.dispatch(event))}\n\n"
        yield f"data: {DATA_PROTOCOL_DONE}\n\n"

    def __call__(self, events: Iterable[StreamEvent]) -> StreamingResponse:
        return StreamingResponse(
            self.iter_frames(events),
            media_type="text/plain; charset=utf-8",
            headers=DATA_PROTOCOL_HEADERS,
        )


__all__ = ["DataProtocolAdapter", "DATA_PROTOCOL_HEADERS", "encode_strict"]
