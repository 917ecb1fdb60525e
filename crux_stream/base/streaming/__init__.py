"""Streaming core: canonical events, per-round state, frame readers,
producers, the history collector and the output adapters."""

from .events import EVENT_CLASSES, StreamEvent, StreamEventType
from .stream_state import StreamState

__all__ = ["EVENT_CLASSES", "StreamEvent", "StreamEventType", "StreamState"]
