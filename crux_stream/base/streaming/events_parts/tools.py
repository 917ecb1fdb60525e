"""Tool call and tool result events."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from ...dto.tool_call import ToolCall
from ...dto.tool_result import ToolResult
from .base import StreamEvent
from .event_type import StreamEventType


@dataclass(frozen=True, kw_only=True)
class ToolCallEvent(StreamEvent):
    """A complete tool call, arguments fully assembled."""

    event_type: ClassVar[StreamEventType] = StreamEventType.TOOL_CALL

    tool_call: ToolCall
    message_id: str

    def payload(self) -> Dict[str, Any]:
        return {
            "tool_id": self.tool_call.id,
            "tool_name": self.tool_call.name,
            "arguments": self.tool_call.arguments(),
            "message_id": self.message_id,
            "reasoning_id": self.tool_call.reasoning_id,
        }


@dataclass(frozen=True, kw_only=True)
class ToolCallDeltaEvent(StreamEvent):
    """A fragment of tool-call argument JSON as it streams in."""

    event_type: ClassVar[StreamEventType] = StreamEventType.TOOL_CALL_DELTA

    tool_call_id: str
    tool_name: str
    delta: str
    message_id: str

    def payload(self) -> Dict[str, Any]:
        return {
            "tool_id": self.tool_call_id,
            "tool_name": self.tool_name,
            "delta": self.delta,
            "message_id": self.message_id,
        }


@dataclass(frozen=True, kw_only=True)
class ToolResultEvent(StreamEvent):
    event_type: ClassVar[StreamEventType] = StreamEventType.TOOL_RESULT

    tool_result: ToolResult
    message_id: str
    success: bool = True
    error: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "tool_id": self.tool_result.tool_call_id,
            "result": self.tool_result.result,
            "message_id": self.message_id,
            "success": self.success,
            "error": self.error,
        }


__all__ = ["ToolCallEvent", "ToolCallDeltaEvent", "ToolResultEvent"]
