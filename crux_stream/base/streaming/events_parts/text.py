"""Assistant text events, keyed by the round's message id."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict

from .base import StreamEvent
from .event_type import StreamEventType


@dataclass(frozen=True, kw_only=True)
class TextStartEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.TEXT_START

    message_id: str

    def payload(self) -> Dict[str, Any]:
        return {"message_id": self.message_id}


@dataclass(frozen=True, kw_only=True)
class TextDeltaEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.TEXT_DELTA

    delta: str
    message_id: str

    def payload(self) -> Dict[str, Any]:
        return {"delta": self.delta, "message_id": self.message_id}


@dataclass(frozen=True, kw_only=True)
class TextCompleteEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.TEXT_COMPLETE

    message_id: str

    def payload(self) -> Dict[str, Any]:
        return {"message_id": self.message_id}


__all__ = ["TextStartEvent", "TextDeltaEvent", "TextCompleteEvent"]
