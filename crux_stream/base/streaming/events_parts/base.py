"""Base class shared by every canonical stream event.

Events are frozen dataclasses: construction is the only way to create one,
and the structural projection returned by :meth:`StreamEvent.to_dict` is the
wire contract the output adapters render.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict

from .event_type import StreamEventType


def new_event_id() -> str:
    return uuid.uuid4().hex


def unix_now() -> int:
    return int(time.time())


@dataclass(frozen=True, kw_only=True)
class StreamEvent:
    """Common identity of an event: a unique ``id`` and a Unix ``timestamp``."""

    event_type: ClassVar[StreamEventType]

    id: str = field(default_factory=new_event_id)
    timestamp: int = field(default_factory=unix_now)

    def type(self) -> StreamEventType:
        return self.event_type

    def event_key(self) -> str:
        """Name used when the event is published as a notification."""
        return self.event_type.value

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "timestamp": self.timestamp, **self.payload()}


__all__ = ["StreamEvent", "new_event_id", "unix_now"]
