"""Round-trip boundary events and provider error reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple

from ...models_parts.citation import MessagePartWithCitations
from ...models_parts.finish_reason import FinishReason
from ...models_parts.usage import Usage
from .base import StreamEvent
from .event_type import StreamEventType

_CANONICAL_KEYS = frozenset({"id", "timestamp", "type", "finish_reason", "usage", "citations"})


@dataclass(frozen=True, kw_only=True)
class StreamStartEvent(StreamEvent):
    """First event of a round-trip.

    ``metadata`` always carries ``delivery`` and, when the provider reports
    them, ``request_id`` and ``rate_limits``.
    """

    event_type: ClassVar[StreamEventType] = StreamEventType.STREAM_START

    model: str
    provider: str
    metadata: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        return {"model": self.model, "provider": self.provider, "metadata": self.metadata}


@dataclass(frozen=True, kw_only=True)
class StreamEndEvent(StreamEvent):
    """Last event of a round-trip.

    ``additional_content`` holds provider extras (e.g. the response id) and is
    spread into the projection; keys that name a canonical field are skipped.
    """

    event_type: ClassVar[StreamEventType] = StreamEventType.STREAM_END

    finish_reason: FinishReason
    usage: Optional[Usage] = None
    citations: Optional[Tuple[MessagePartWithCitations, ...]] = None
    additional_content: Dict[str, Any] = field(default_factory=dict)

    def payload(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "finish_reason": self.finish_reason.value,
            "usage": self.usage.to_dict() if self.usage else None,
            "citations": [c.to_dict() for c in self.citations] if self.citations is not None else None,
        }
        data.update({k: v for k, v in self.additional_content.items() if k not in _CANONICAL_KEYS})
        return data


@dataclass(frozen=True, kw_only=True)
class ErrorEvent(StreamEvent):
    """Error frame reported by the provider.

    Producers emit it right before raising, so renderers that are mid-response
    can forward the failure to their client.
    """

    event_type: ClassVar[StreamEventType] = StreamEventType.ERROR

    error_type: str
    message: str
    recoverable: bool = False
    metadata: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "recoverable": self.recoverable,
            "metadata": self.metadata,
        }


__all__ = ["StreamStartEvent", "StreamEndEvent", "ErrorEvent"]
