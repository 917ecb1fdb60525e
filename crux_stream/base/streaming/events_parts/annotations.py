"""Citations and provider-native tool activity."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from ...models_parts.citation import Citation
from .base import StreamEvent
from .event_type import StreamEventType


@dataclass(frozen=True, kw_only=True)
class CitationEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.CITATION

    citation: Citation
    message_id: str
    block_index: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "citation": self.citation.to_dict(),
            "message_id": self.message_id,
            "block_index": self.block_index,
            "metadata": self.metadata,
        }


@dataclass(frozen=True, kw_only=True)
class ProviderToolEvent(StreamEvent):
    """Activity of a tool the provider runs itself (web search, code interpreter, ...).

    The event key combines tool type and status, e.g.
    ``provider_tool_event.web_search_call.completed``.
    """

    event_type: ClassVar[StreamEventType] = StreamEventType.PROVIDER_TOOL_EVENT

    tool_type: str
    status: str
    item_id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def event_key(self) -> str:
        return f"{self.event_type.value}.{self.tool_type}.{self.status}"

    def payload(self) -> Dict[str, Any]:
        return {
            "type": self.event_type.value,
            "tool_type": self.tool_type,
            "status": self.status,
            "item_id": self.item_id,
            "data": dict(self.data),
        }


__all__ = ["CitationEvent", "ProviderToolEvent"]
