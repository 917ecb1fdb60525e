"""Ollama ``/api/chat`` stream producer.

Purpose:
    Translate Ollama's newline-delimited JSON chunks into canonical events
    (true incremental strategy).

Wire protocol:
    One JSON object per line. ``message.thinking`` and ``message.content``
    carry deltas, ``message.tool_calls`` carries complete calls, and the
    final object has ``done: true`` with ``prompt_eval_count`` /
    ``eval_count`` token counts and a ``done_reason``. An ``error`` field
    reports a failure after streaming began.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator

from ..base.constants import DELIVERY_PUSH
from ..base.dto import ToolCall
from ..base.errors import MidStreamError
from ..base.http import raise_for_provider_status
from ..base.models import FinishReason, TextRequest, Usage
from ..base.streaming import emit
from ..base.streaming.events import ErrorEvent, StreamEvent, new_event_id
from ..base.streaming.producer import StreamProducer
from ..base.streaming.sse import iter_json_lines
from ..base.streaming.stream_state import StreamState
from .payload import build_payload

_DONE_REASONS = {
    "stop": FinishReason.STOP,
    "length": FinishReason.LENGTH,
}


class OllamaStreamProducer(StreamProducer):
    """Stream producer for ``POST /api/chat`` with ``stream: true``."""

    provider_name = "ollama"

    def _produce(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        url = f"{str(self.config['base_url']).rstrip('/')}/api/chat"
        with self.client.stream("POST", url, json=build_payload(request)) as response:
            raise_for_provider_status(response, provider=self.provider_name, model=request.model)
            yield from emit.stream_start(
                state,
                model=request.model,
                provider=self.provider_name,
                delivery=DELIVERY_PUSH,
            )
            prompt_tokens = 0
            completion_tokens = 0
            for chunk in iter_json_lines(response.iter_lines(), provider=self.provider_name, model=request.model):
                if chunk.get("error"):
                    yield from self._error(chunk, request)
                message = chunk.get("message") or {}
                thinking = str(message.get("thinking") or "")
                if thinking:
                    yield from emit.thinking_delta(state, thinking)
                elif state.thinking_started:
                    yield from emit.thinking_complete(state)
                yield from emit.text_delta(state, str(message.get("content") or ""))
                for raw in message.get("tool_calls") or []:
                    self._buffer_tool_call(raw, state)
                prompt_tokens += int(chunk.get("prompt_eval_count") or 0)
                completion_tokens += int(chunk.get("eval_count") or 0)
                if chunk.get("done"):
                    yield from self._finish(chunk, state, prompt_tokens, completion_tokens)
                    return
            # connection closed without a done chunk
            yield from self._finish({}, state, prompt_tokens, completion_tokens)

    def _finish(
        self, chunk: Dict[str, Any], state: StreamState, prompt_tokens: int, completion_tokens: int
    ) -> Iterator[StreamEvent]:
        state.usage = Usage(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
        for call in state.metadata.pop("pending_tool_calls", []):
            yield from emit.tool_call(state, call)
        yield from emit.stream_end(state, self._finish_reason(chunk, state))

    @staticmethod
    def _buffer_tool_call(raw: Dict[str, Any], state: StreamState) -> None:
        function = raw.get("function") or {}
        call = ToolCall(
            id=str(raw.get("id") or new_event_id()),
            name=str(function.get("name", "")),
            raw_arguments=function.get("arguments") or {},
        )
        state.metadata.setdefault("pending_tool_calls", []).append(call)

    @staticmethod
    def _finish_reason(chunk: Dict[str, Any], state: StreamState) -> FinishReason:
        if state.has_tool_calls:
            return FinishReason.TOOL_CALLS
        return _DONE_REASONS.get(str(chunk.get("done_reason") or "stop"), FinishReason.UNKNOWN)

    def _error(self, chunk: Dict[str, Any], request: TextRequest) -> Iterator[StreamEvent]:
        message = str(chunk.get("error"))
        yield ErrorEvent(
            error_type="error",
            message=message,
            recoverable=False,
            metadata={"provider": self.provider_name},
        )
        raise MidStreamError(message, provider=self.provider_name, model=request.model)


__all__ = ["OllamaStreamProducer"]
