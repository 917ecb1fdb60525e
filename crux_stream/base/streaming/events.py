"""Canonical, provider-independent stream events (public API facade).

Every producer translates its wire format into these variants and every
output adapter renders them. ``EVENT_CLASSES`` maps each discriminant to its
class; adapters check their dispatch tables against it.
"""

from __future__ import annotations

from typing import Dict, Type

from .events_parts.annotations import CitationEvent, ProviderToolEvent
from .events_parts.base import StreamEvent, new_event_id, unix_now
from .events_parts.event_type import StreamEventType
from .events_parts.lifecycle import ErrorEvent, StreamEndEvent, StreamStartEvent
from .events_parts.text import TextCompleteEvent, TextDeltaEvent, TextStartEvent
from .events_parts.thinking import ThinkingCompleteEvent, ThinkingDeltaEvent, ThinkingStartEvent
from .events_parts.tools import ToolCallDeltaEvent, ToolCallEvent, ToolResultEvent

EVENT_CLASSES: Dict[StreamEventType, Type[StreamEvent]] = {
    cls.event_type: cls
    for cls in (
        StreamStartEvent,
        TextStartEvent,
        TextDeltaEvent,
        TextCompleteEvent,
        ThinkingStartEvent,
        ThinkingDeltaEvent,
        ThinkingCompleteEvent,
        ToolCallEvent,
        ToolCallDeltaEvent,
        ToolResultEvent,
        CitationEvent,
        ProviderToolEvent,
        ErrorEvent,
        StreamEndEvent,
    )
}

__all__ = [
    "EVENT_CLASSES",
    "StreamEvent",
    "StreamEventType",
    "new_event_id",
    "unix_now",
    "StreamStartEvent",
    "TextStartEvent",
    "TextDeltaEvent",
    "TextCompleteEvent",
    "ThinkingStartEvent",
    "ThinkingDeltaEvent",
    "ThinkingCompleteEvent",
    "ToolCallEvent",
    "ToolCallDeltaEvent",
    "ToolResultEvent",
    "CitationEvent",
    "ProviderToolEvent",
    "ErrorEvent",
    "StreamEndEvent",
]
