"""Reasoning ("thinking") events, keyed by a reasoning id."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from .base import StreamEvent
from .event_type import StreamEventType


@dataclass(frozen=True, kw_only=True)
class ThinkingStartEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.THINKING_START

    reasoning_id: str

    def payload(self) -> Dict[str, Any]:
        return {"reasoning_id": self.reasoning_id}


@dataclass(frozen=True, kw_only=True)
class ThinkingDeltaEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.THINKING_DELTA

    delta: str
    reasoning_id: str
    summary: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        return {"delta": self.delta, "reasoning_id": self.reasoning_id, "summary": self.summary}


@dataclass(frozen=True, kw_only=True)
class ThinkingCompleteEvent(StreamEvent):
    """End of a reasoning block; ``summary`` may carry a signature."""

    event_type: ClassVar[StreamEventType] = StreamEventType.THINKING_COMPLETE

    reasoning_id: str
    summary: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        return {"reasoning_id": self.reasoning_id, "summary": self.summary}


__all__ = ["ThinkingStartEvent", "ThinkingDeltaEvent", "ThinkingCompleteEvent"]
