"""Per-round-trip accumulator owned by one producer.

A fresh ``StreamState`` is handed to the producer for each round-trip; it is
never shared across concurrent requests. Besides the message id and the
accumulated text it tracks which blocks are open so producers can honor the
start/delta/complete ordering.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..dto.tool_call import ToolCall
from ..models_parts.citation import MessagePartWithCitations
from ..models_parts.usage import Usage
from .events import new_event_id


class StreamState:
    """Mutable state for one provider round-trip.

    Attributes:
        message_id: Id shared by the round's text events; regenerated by
            :meth:`reset`.
        text: Text accumulated from ``TextDelta`` events.
        thinking: Reasoning text accumulated from ``ThinkingDelta`` events.
        tool_calls: Complete tool calls observed in this round.
        citations: Citation groups collected for ``StreamEnd``.
        usage: Latest usage reported by the provider.
        metadata: Provider extras gathered while parsing (request id,
            signatures, pending tool-call fragments, ...).
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> "StreamState":
        """Clear all accumulated content and issue a new message id."""
        self.message_id = new_event_id()
        self.text = ""
        self.thinking = ""
        self.reasoning_id: Optional[str] = None
        self.text_started = False
        self.text_completed = False
        self.thinking_started = False
        self.stream_started = False
        self.tool_calls: List[ToolCall] = []
        self.citations: List[MessagePartWithCitations] = []
        self.usage: Optional[Usage] = None
        self.metadata: Dict[str, Any] = {}
        return self

    def append_text(self, delta: str) -> None:
        self.text += delta

    def append_thinking(self, delta: str) -> None:
        self.thinking += delta

    def add_tool_call(self, tool_call: ToolCall) -> None:
        self.tool_calls.append(tool_call)

    def add_citations(self, part: MessagePartWithCitations) -> None:
        self.citations.append(part)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


__all__ = ["StreamState"]
