"""Server-sent events renderer.

Each canonical event becomes one frame::

    event: <event type>
    data: <JSON projection>

followed by a blank line. Frames are written as the source sequence is
pulled, so the response holds the connection open until the last event.
"""
from __future__ import annotations

import json
from typing import Dict, Iterable, Iterator

from fastapi.responses import StreamingResponse

from ..events import StreamEvent, StreamEventType
from .dispatch import EventDispatcher

EVENT_STREAM_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


class EventStreamAdapter(EventDispatcher):
    """Render events as ``text/event-stream`` frames."""

    # every variant is framed the same way; the label is its type
    handlers = {event_type: "render_frame" for event_type in StreamEventType}

    def render_frame(self, event: StreamEvent) -> str:
        data = json.dumps(event.to_dict(), default=str)
        return f"event: {event.type().value}\ndata: {data}\n\n"

    def iter_frames(self, events: Iterable[StreamEvent]) -> Iterator[str]:
        for event in events:
            yield self.dispatch(event)

    def __call__(self, events: Iterable[StreamEvent]) -> StreamingResponse:
        return StreamingResponse(
            self.iter_frames(events),
            media_type="text/event-stream",
            headers=EVENT_STREAM_HEADERS,
        )


__all__ = ["EventStreamAdapter", "EVENT_STREAM_HEADERS"]
