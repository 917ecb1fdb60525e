"""Event emission helpers shared by the producers.

Each helper updates the round's :class:`StreamState` and yields the events
needed to keep the ordering guarantees: one ``TextStart`` before the first
delta of the round's message, exactly one ``TextComplete``, a
``ThinkingStart``/``ThinkingComplete`` pair around each reasoning block, and
open blocks closed before ``StreamEnd``.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from ..dto.tool_call import ToolCall
from ..models_parts.finish_reason import FinishReason
from .events import (
    StreamEndEvent,
    StreamEvent,
    StreamStartEvent,
    TextCompleteEvent,
    TextDeltaEvent,
    TextStartEvent,
    ThinkingCompleteEvent,
    ThinkingDeltaEvent,
    ThinkingStartEvent,
    ToolCallEvent,
    new_event_id,
)
from .stream_state import StreamState


def stream_start(state: StreamState, *, model: str, provider: str, delivery: str, **metadata: Any) -> Iterator[StreamEvent]:
    """Yield ``StreamStart`` unless this round already started."""
    if state.stream_started:
        return
    state.stream_started = True
    state.metadata["delivery"] = delivery
    meta: Dict[str, Any] = {"delivery": delivery}
    meta.update({k: v for k, v in metadata.items() if v is not None})
    yield StreamStartEvent(model=model, provider=provider, metadata=meta)


def text_delta(state: StreamState, delta: str) -> Iterator[StreamEvent]:
    if not delta:
        return
    if not state.text_started:
        state.text_started = True
        yield TextStartEvent(message_id=state.message_id)
    state.append_text(delta)
    yield TextDeltaEvent(delta=delta, message_id=state.message_id)


def text_complete(state: StreamState) -> Iterator[StreamEvent]:
    if state.text_started and not state.text_completed:
        state.text_completed = True
        yield TextCompleteEvent(message_id=state.message_id)


def thinking_start(state: StreamState, reasoning_id: Optional[str] = None) -> Iterator[StreamEvent]:
    """Open a reasoning block, closing a different one that is still open."""
    reasoning_id = reasoning_id or new_event_id()
    if state.thinking_started and state.reasoning_id == reasoning_id:
        return
    yield from thinking_complete(state)
    state.thinking_started = True
    state.reasoning_id = reasoning_id
    yield ThinkingStartEvent(reasoning_id=reasoning_id)


def thinking_delta(
    state: StreamState,
    delta: str,
    reasoning_id: Optional[str] = None,
    summary: Optional[Dict[str, Any]] = None,
) -> Iterator[StreamEvent]:
    if not state.thinking_started or (reasoning_id is not None and reasoning_id != state.reasoning_id):
        yield from thinking_start(state, reasoning_id)
    state.append_thinking(delta)
    yield ThinkingDeltaEvent(delta=delta, reasoning_id=state.reasoning_id or "", summary=summary)


def thinking_complete(state: StreamState, summary: Optional[Dict[str, Any]] = None) -> Iterator[StreamEvent]:
    if not state.thinking_started:
        return
    state.thinking_started = False
    yield ThinkingCompleteEvent(reasoning_id=state.reasoning_id or "", summary=summary)


def tool_call(state: StreamState, call: ToolCall) -> Iterator[StreamEvent]:
    state.add_tool_call(call)
    yield ToolCallEvent(tool_call=call, message_id=state.message_id)


def stream_end(
    state: StreamState,
    finish_reason: FinishReason,
    additional_content: Optional[Dict[str, Any]] = None,
) -> Iterator[StreamEvent]:
    """Close open blocks and yield the round's single ``StreamEnd``."""
    yield from thinking_complete(state)
    yield from text_complete(state)
    state.metadata["finish_reason"] = finish_reason
    yield StreamEndEvent(
        finish_reason=finish_reason,
        usage=state.usage,
        citations=tuple(state.citations) if state.citations else None,
        additional_content=dict(additional_content or {}),
    )


__all__ = [
    "stream_start",
    "text_delta",
    "text_complete",
    "thinking_start",
    "thinking_delta",
    "thinking_complete",
    "tool_call",
    "stream_end",
]
