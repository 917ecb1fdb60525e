"""Anthropic Messages API stream producer.

Purpose:
    Translate Anthropic's server-sent events into canonical events while the
    connection is open (true incremental strategy).

External dependencies:
    - ``httpx`` streaming request mode (``client.stream``) for the open
      connection; the response is closed when the generator is closed.

Wire protocol:
    Frames carry an ``event:`` field naming the sub-event and a JSON
    ``data:`` field. Handled sub-events are ``message_start``,
    ``content_block_start``/``_delta``/``_stop``, ``message_delta``,
    ``message_stop`` and ``error``; ``ping`` and unknown events are ignored.
    A connection that closes before ``message_stop`` still ends the round:
    open blocks are closed and ``StreamEnd`` carries the last known stop
    reason (``stop`` when none arrived).

Error handling:
    An ``error`` frame yields an :class:`ErrorEvent` and then raises
    immediately: ``overloaded_error`` as :class:`ProviderOverloadedError`,
    anything else as :class:`MidStreamError`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from ..base.constants import CAPABILITY_STRUCTURED, DELIVERY_PUSH
from ..base.dto import ToolCall
from ..base.errors import MidStreamError, ProviderOverloadedError
from ..base.http import parse_rate_limits, raise_for_provider_status
from ..base.models import (
    Citation,
    CitationSourcePositionType,
    CitationSourceType,
    FinishReason,
    MessagePartWithCitations,
    TextRequest,
    Usage,
)
from ..base.streaming import emit
from ..base.streaming.events import (
    CitationEvent,
    ErrorEvent,
    ProviderToolEvent,
    StreamEvent,
    ToolCallDeltaEvent,
)
from ..base.streaming.producer import StreamProducer
from ..base.streaming.sse import SSEFrame, decode_json_object, iter_sse_frames
from ..base.streaming.stream_state import StreamState
from .payload import build_headers, build_payload

_STOP_REASONS = {
    "end_turn": FinishReason.STOP,
    "stop_sequence": FinishReason.STOP,
    "max_tokens": FinishReason.LENGTH,
    "tool_use": FinishReason.TOOL_CALLS,
    "refusal": FinishReason.CONTENT_FILTER,
    "pause_turn": FinishReason.OTHER,
}

# Content blocks produced by tools Anthropic runs itself
_SERVER_TOOL_BLOCKS = {"server_tool_use", "web_search_tool_result", "web_fetch_tool_result", "code_execution_tool_result"}


def map_finish_reason(stop_reason: Optional[str]) -> FinishReason:
    if stop_reason is None:
        return FinishReason.UNKNOWN
    return _STOP_REASONS.get(stop_reason, FinishReason.UNKNOWN)


def map_citation(raw: Dict[str, Any]) -> Citation:
    """Map an Anthropic citation object onto :class:`Citation`."""
    kind = raw.get("type")
    if kind == "web_search_result_location":
        return Citation(
            source_type=CitationSourceType.URL,
            source=str(raw.get("url", "")),
            source_text=raw.get("cited_text"),
            source_title=raw.get("title"),
            additional_content={"encrypted_index": raw.get("encrypted_index")},
        )
    if kind == "page_location":
        position, start, end = CitationSourcePositionType.PAGE, raw.get("start_page_number"), raw.get("end_page_number")
    elif kind == "content_block_location":
        position, start, end = CitationSourcePositionType.CHUNK, raw.get("start_block_index"), raw.get("end_block_index")
    else:
        position, start, end = CitationSourcePositionType.CHARACTER, raw.get("start_char_index"), raw.get("end_char_index")
    return Citation(
        source_type=CitationSourceType.DOCUMENT,
        source=str(raw.get("document_index", "")),
        source_text=raw.get("cited_text"),
        source_title=raw.get("document_title"),
        source_position_type=position,
        source_start_index=start,
        source_end_index=end,
    )


class _Block:
    """Bookkeeping for one open content block, keyed by its index."""

    def __init__(self, kind: str, data: Dict[str, Any]) -> None:
        self.kind = kind
        self.data = data
        self.text = ""
        self.input_json = ""
        self.signature = ""
        self.citations: List[Citation] = []


class AnthropicStreamProducer(StreamProducer):
    """Stream producer for ``POST /v1/messages`` with ``stream: true``."""

    provider_name = "anthropic"

    def validate(self, request: TextRequest) -> None:
        if request.schema is not None:
            self.reject(CAPABILITY_STRUCTURED, request)

    def _produce(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        url = f"{str(self.config['base_url']).rstrip('/')}/messages"
        payload = build_payload(request, self.config)
        with self.client.stream("POST", url, json=payload, headers=build_headers(self.config)) as response:
            raise_for_provider_status(response, provider=self.provider_name, model=request.model)
            state.metadata["request_id"] = response.headers.get("request-id")
            state.metadata["rate_limits"] = [rl.to_dict() for rl in parse_rate_limits(response.headers)]
            blocks: Dict[int, _Block] = {}
            for frame in iter_sse_frames(response.iter_lines()):
                yield from self._handle_frame(frame, request, state, blocks)
                if state.metadata.get("finish_reason") is not None:
                    return
            # EOF before message_stop: finish with what was received
            yield from emit.stream_start(state, model=request.model, provider=self.provider_name, delivery=DELIVERY_PUSH)
            yield from emit.stream_end(state, self._truncated_finish_reason(state))

    def _handle_frame(
        self,
        frame: SSEFrame,
        request: TextRequest,
        state: StreamState,
        blocks: Dict[int, _Block],
    ) -> Iterator[StreamEvent]:
        if frame.event in (None, "ping") or not frame.data:
            return
        chunk = frame.json(provider=self.provider_name, model=request.model)
        kind = frame.event
        if kind == "message_start":
            yield from self._message_start(chunk, request, state)
        elif kind == "content_block_start":
            yield from self._block_start(chunk, state, blocks)
        elif kind == "content_block_delta":
            yield from self._block_delta(chunk, state, blocks)
        elif kind == "content_block_stop":
            yield from self._block_stop(chunk, state, blocks)
        elif kind == "message_delta":
            self._message_delta(chunk, state)
        elif kind == "message_stop":
            yield from emit.stream_end(
                state,
                map_finish_reason(state.metadata.get("stop_reason")),
                {"response_id": state.metadata.get("response_id")} if state.metadata.get("response_id") else None,
            )
        elif kind == "error":
            yield from self._error(chunk, request)

    def _message_start(self, chunk: Dict[str, Any], request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        message = chunk.get("message") or {}
        state.metadata["response_id"] = message.get("id")
        usage = message.get("usage") or {}
        state.usage = Usage(
            prompt_tokens=int(usage.get("input_tokens") or 0),
            completion_tokens=int(usage.get("output_tokens") or 0),
            cache_write_input_tokens=usage.get("cache_creation_input_tokens"),
            cache_read_input_tokens=usage.get("cache_read_input_tokens"),
        )
        yield from emit.stream_start(
            state,
            model=message.get("model") or request.model,
            provider=self.provider_name,
            delivery=DELIVERY_PUSH,
            request_id=state.metadata.get("request_id"),
            rate_limits=state.metadata.get("rate_limits") or None,
        )

    def _block_start(self, chunk: Dict[str, Any], state: StreamState, blocks: Dict[int, _Block]) -> Iterator[StreamEvent]:
        index = int(chunk.get("index", 0))
        content = chunk.get("content_block") or {}
        block = _Block(str(content.get("type", "")), content)
        blocks[index] = block
        if block.kind == "thinking":
            yield from emit.thinking_start(state)
        elif block.kind in _SERVER_TOOL_BLOCKS:
            yield ProviderToolEvent(
                tool_type=block.kind,
                status="started",
                item_id=str(content.get("id") or content.get("tool_use_id") or index),
                data=content,
            )

    def _block_delta(self, chunk: Dict[str, Any], state: StreamState, blocks: Dict[int, _Block]) -> Iterator[StreamEvent]:
        index = int(chunk.get("index", 0))
        block = blocks.setdefault(index, _Block("text", {}))
        delta = chunk.get("delta") or {}
        delta_type = delta.get("type")
        if delta_type == "text_delta":
            text = str(delta.get("text", ""))
            block.text += text
            yield from emit.text_delta(state, text)
        elif delta_type == "thinking_delta":
            yield from emit.thinking_delta(state, str(delta.get("thinking", "")), state.reasoning_id)
        elif delta_type == "signature_delta":
            block.signature += str(delta.get("signature", ""))
        elif delta_type == "input_json_delta":
            partial = str(delta.get("partial_json", ""))
            block.input_json += partial
            if partial and block.kind == "tool_use":
                yield ToolCallDeltaEvent(
                    tool_call_id=str(block.data.get("id", "")),
                    tool_name=str(block.data.get("name", "")),
                    delta=partial,
                    message_id=state.message_id,
                )
        elif delta_type == "citations_delta" and delta.get("citation"):
            citation = map_citation(delta["citation"])
            block.citations.append(citation)
            yield CitationEvent(citation=citation, message_id=state.message_id, block_index=index)

    def _block_stop(self, chunk: Dict[str, Any], state: StreamState, blocks: Dict[int, _Block]) -> Iterator[StreamEvent]:
        index = int(chunk.get("index", 0))
        block = blocks.pop(index, None)
        if block is None:
            return
        if block.kind == "thinking":
            state.metadata["thinking_signature"] = state.metadata.get("thinking_signature", "") + block.signature
            yield from emit.thinking_complete(state, {"signature": block.signature} if block.signature else None)
        elif block.kind == "tool_use":
            yield from emit.tool_call(
                state,
                ToolCall(
                    id=str(block.data.get("id", "")),
                    name=str(block.data.get("name", "")),
                    raw_arguments=block.input_json or block.data.get("input") or "",
                ),
            )
        elif block.kind == "text" and block.citations:
            state.add_citations(MessagePartWithCitations(output_text=block.text, citations=tuple(block.citations)))
        elif block.kind in _SERVER_TOOL_BLOCKS:
            data = dict(block.data)
            if block.input_json:
                data["input"] = decode_json_object(block.input_json, provider=self.provider_name)
            yield ProviderToolEvent(
                tool_type=block.kind,
                status="completed",
                item_id=str(block.data.get("id") or block.data.get("tool_use_id") or index),
                data=data,
            )

    @staticmethod
    def _truncated_finish_reason(state: StreamState) -> FinishReason:
        stop_reason = state.metadata.get("stop_reason")
        if stop_reason is not None:
            return map_finish_reason(stop_reason)
        return FinishReason.TOOL_CALLS if state.has_tool_calls else FinishReason.STOP

    @staticmethod
    def _message_delta(chunk: Dict[str, Any], state: StreamState) -> None:
        delta = chunk.get("delta") or {}
        if delta.get("stop_reason"):
            state.metadata["stop_reason"] = delta["stop_reason"]
        usage = chunk.get("usage") or {}
        if usage and state.usage is not None:
            state.usage = Usage(
                prompt_tokens=int(usage.get("input_tokens") or state.usage.prompt_tokens),
                completion_tokens=int(usage.get("output_tokens") or state.usage.completion_tokens),
                cache_write_input_tokens=state.usage.cache_write_input_tokens,
                cache_read_input_tokens=state.usage.cache_read_input_tokens,
            )
        elif usage:
            state.usage = Usage(
                prompt_tokens=int(usage.get("input_tokens") or 0),
                completion_tokens=int(usage.get("output_tokens") or 0),
            )

    def _error(self, chunk: Dict[str, Any], request: TextRequest) -> Iterator[StreamEvent]:
        error = chunk.get("error") or {}
        error_type = str(error.get("type", "unknown"))
        message = str(error.get("message", "Unknown error occurred"))
        overloaded = error_type == "overloaded_error"
        yield ErrorEvent(
            error_type="provider_overloaded" if overloaded else error_type,
            message=message,
            recoverable=overloaded,
            metadata={"provider": self.provider_name},
        )
        if overloaded:
            raise ProviderOverloadedError(message, provider=self.provider_name, model=request.model)
        raise MidStreamError(message, provider=self.provider_name, model=request.model, error_type=error_type)


__all__ = ["AnthropicStreamProducer", "map_finish_reason", "map_citation"]
