"""OpenAI Responses API stream producer.

Purpose:
    Translate Responses API server-sent events into canonical events while
    the connection is open (true incremental strategy).

Wire protocol:
    Data-only SSE frames; each ``data:`` is a JSON object whose ``type``
    names the sub-event (``response.output_text.delta``,
    ``response.function_call_arguments.delta``, ...). A literal ``[DONE]``
    data line ends the stream. When it (or EOF) arrives before
    ``response.completed`` the round still ends with ``StreamEnd``.

Tool calls:
    ``response.output_item.added`` announces a function call (item id,
    ``call_id`` and name); argument fragments arrive as
    ``response.function_call_arguments.delta`` and the complete call is
    emitted on ``response.function_call_arguments.done``. The resulting
    :class:`ToolCall` keeps ``call_id`` as ``result_id``.

Provider-run tools:
    Items such as ``web_search_call`` or ``code_interpreter_call`` and their
    ``response.<item type>.<status>`` progress events become
    :class:`ProviderToolEvent` instances.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from ..base.constants import DELIVERY_PUSH
from ..base.dto import ToolCall
from ..base.errors import MidStreamError
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
from ..base.streaming.sse import iter_sse_frames
from ..base.streaming.stream_state import StreamState
from .payload import build_headers, build_payload

_DONE = "[DONE]"

_INCOMPLETE_REASONS = {
    "max_output_tokens": FinishReason.LENGTH,
    "content_filter": FinishReason.CONTENT_FILTER,
}


def map_usage(raw: Optional[Dict[str, Any]]) -> Optional[Usage]:
    if not raw:
        return None
    return Usage(
        prompt_tokens=int(raw.get("input_tokens") or 0),
        completion_tokens=int(raw.get("output_tokens") or 0),
        cache_read_input_tokens=(raw.get("input_tokens_details") or {}).get("cached_tokens"),
        thought_tokens=(raw.get("output_tokens_details") or {}).get("reasoning_tokens"),
    )


def _is_provider_tool(item_type: str) -> bool:
    return item_type.endswith("_call") and item_type != "function_call"


class OpenAIStreamProducer(StreamProducer):
    """Stream producer for ``POST /v1/responses`` with ``stream: true``."""

    provider_name = "openai"

    def _produce(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        url = f"{str(self.config['base_url']).rstrip('/')}/responses"
        payload = build_payload(request)
        with self.client.stream("POST", url, json=payload, headers=build_headers(self.config)) as response:
            raise_for_provider_status(response, provider=self.provider_name, model=request.model)
            state.metadata["request_id"] = response.headers.get("x-request-id")
            state.metadata["rate_limits"] = [rl.to_dict() for rl in parse_rate_limits(response.headers)]
            # item id -> pending function call fields
            pending: Dict[str, Dict[str, Any]] = {}
            for frame in iter_sse_frames(response.iter_lines()):
                if not frame.data:
                    continue
                if frame.data.strip() == _DONE:
                    break
                chunk = frame.json(provider=self.provider_name, model=request.model)
                yield from self._handle_chunk(chunk, request, state, pending)
                if state.metadata.get("finish_reason") is not None:
                    return
            # [DONE] or EOF without response.completed: finish as a plain completion
            yield from emit.stream_start(state, model=request.model, provider=self.provider_name, delivery=DELIVERY_PUSH)
            yield from emit.stream_end(state, self._finish_reason("response.completed", {}, state))

    def _handle_chunk(
        self,
        chunk: Dict[str, Any],
        request: TextRequest,
        state: StreamState,
        pending: Dict[str, Dict[str, Any]],
    ) -> Iterator[StreamEvent]:
        kind = str(chunk.get("type", ""))
        if kind == "response.created":
            response = chunk.get("response") or {}
            state.metadata["response_id"] = response.get("id")
            yield from emit.stream_start(
                state,
                model=response.get("model") or request.model,
                provider=self.provider_name,
                delivery=DELIVERY_PUSH,
                request_id=state.metadata.get("request_id"),
                response_id=response.get("id"),
                rate_limits=state.metadata.get("rate_limits") or None,
            )
        elif kind == "response.output_text.delta":
            yield from emit.stream_start(state, model=request.model, provider=self.provider_name, delivery=DELIVERY_PUSH)
            yield from emit.text_delta(state, str(chunk.get("delta", "")))
        elif kind == "response.output_text.annotation.added":
            yield from self._annotation(chunk, state)
        elif kind in ("response.reasoning_summary_text.delta", "response.reasoning_text.delta"):
            yield from emit.thinking_delta(
                state,
                str(chunk.get("delta", "")),
                chunk.get("item_id"),
                {"summary_index": chunk.get("summary_index")} if "summary_index" in chunk else None,
            )
        elif kind == "response.output_item.added":
            yield from self._item_added(chunk.get("item") or {}, pending)
        elif kind == "response.function_call_arguments.delta":
            entry = pending.get(str(chunk.get("item_id")))
            if entry is not None:
                delta = str(chunk.get("delta", ""))
                entry["arguments"] += delta
                yield ToolCallDeltaEvent(
                    tool_call_id=entry["id"],
                    tool_name=entry["name"],
                    delta=delta,
                    message_id=state.message_id,
                )
        elif kind == "response.function_call_arguments.done":
            entry = pending.pop(str(chunk.get("item_id")), None)
            if entry is not None:
                yield from self._emit_tool_call(entry, chunk.get("arguments"), state)
        elif kind == "response.output_item.done":
            yield from self._item_done(chunk.get("item") or {}, state, pending)
        elif kind in ("response.completed", "response.incomplete"):
            response = chunk.get("response") or {}
            state.usage = map_usage(response.get("usage")) or state.usage
            yield from emit.stream_end(
                state,
                self._finish_reason(kind, response, state),
                {"response_id": response.get("id")} if response.get("id") else None,
            )
        elif kind in ("error", "response.failed"):
            yield from self._error(chunk, request)
        elif kind.startswith("response.") and kind.count(".") == 2:
            # response.web_search_call.searching and friends
            _, item_type, status = kind.split(".")
            if _is_provider_tool(item_type):
                yield ProviderToolEvent(
                    tool_type=item_type,
                    status=status,
                    item_id=str(chunk.get("item_id", "")),
                    data={k: v for k, v in chunk.items() if k not in ("type", "item_id")},
                )

    def _item_added(self, item: Dict[str, Any], pending: Dict[str, Dict[str, Any]]) -> Iterator[StreamEvent]:
        item_type = str(item.get("type", ""))
        if item_type == "function_call":
            pending[str(item.get("id"))] = {
                "id": str(item.get("id")),
                "call_id": item.get("call_id"),
                "name": str(item.get("name", "")),
                "arguments": str(item.get("arguments") or ""),
            }
        elif _is_provider_tool(item_type):
            yield ProviderToolEvent(
                tool_type=item_type,
                status=str(item.get("status") or "in_progress"),
                item_id=str(item.get("id", "")),
                data=item,
            )

    def _item_done(
        self,
        item: Dict[str, Any],
        state: StreamState,
        pending: Dict[str, Dict[str, Any]],
    ) -> Iterator[StreamEvent]:
        item_type = str(item.get("type", ""))
        if item_type == "function_call":
            entry = pending.pop(str(item.get("id")), None)
            if entry is not None:
                yield from self._emit_tool_call(entry, item.get("arguments"), state)
        elif item_type == "reasoning":
            state.metadata.setdefault("reasoning_items", []).append(item)
            yield from emit.thinking_complete(state, {"item_id": item.get("id")})
        elif _is_provider_tool(item_type):
            yield ProviderToolEvent(
                tool_type=item_type,
                status=str(item.get("status") or "completed"),
                item_id=str(item.get("id", "")),
                data=item,
            )

    def _emit_tool_call(self, entry: Dict[str, Any], arguments: Any, state: StreamState) -> Iterator[StreamEvent]:
        yield from emit.tool_call(
            state,
            ToolCall(
                id=entry["id"],
                name=entry["name"],
                raw_arguments=arguments if isinstance(arguments, (str, dict)) else entry["arguments"],
                result_id=entry.get("call_id"),
                reasoning_id=state.reasoning_id,
            ),
        )

    def _annotation(self, chunk: Dict[str, Any], state: StreamState) -> Iterator[StreamEvent]:
        annotation = chunk.get("annotation") or {}
        if annotation.get("type") != "url_citation":
            return
        citation = Citation(
            source_type=CitationSourceType.URL,
            source=str(annotation.get("url", "")),
            source_title=annotation.get("title"),
            source_position_type=CitationSourcePositionType.CHARACTER,
            source_start_index=annotation.get("start_index"),
            source_end_index=annotation.get("end_index"),
        )
        state.add_citations(MessagePartWithCitations(output_text=state.text, citations=(citation,)))
        yield CitationEvent(
            citation=citation,
            message_id=state.message_id,
            block_index=chunk.get("annotation_index"),
        )

    @staticmethod
    def _finish_reason(kind: str, response: Dict[str, Any], state: StreamState) -> FinishReason:
        if kind == "response.incomplete":
            reason = (response.get("incomplete_details") or {}).get("reason")
            return _INCOMPLETE_REASONS.get(str(reason), FinishReason.OTHER)
        if state.has_tool_calls:
            return FinishReason.TOOL_CALLS
        return FinishReason.STOP

    def _error(self, chunk: Dict[str, Any], request: TextRequest) -> Iterator[StreamEvent]:
        error = chunk.get("error") or (chunk.get("response") or {}).get("error") or chunk
        error_type = str(error.get("code") or error.get("type") or "error")
        message = str(error.get("message") or "Unknown error occurred")
        yield ErrorEvent(
            error_type=error_type,
            message=message,
            recoverable=False,
            metadata={"provider": self.provider_name},
        )
        raise MidStreamError(message, provider=self.provider_name, model=request.model, error_type=error_type)


__all__ = ["OpenAIStreamProducer", "map_usage"]
