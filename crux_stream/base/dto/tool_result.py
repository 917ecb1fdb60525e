"""DTO describing the outcome of one executed tool call."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolResult(BaseModel):
    """Result envelope fed back to the model on the next round.

    Attributes:
        tool_call_id: Id of the :class:`ToolCall` this result answers.
        tool_name: Tool that was invoked.
        args: Decoded arguments the tool was invoked with.
        result: Opaque payload returned by the tool (or the swallowed error
            text when the tool failed and swallows its errors).
        tool_call_result_id: Provider result id, copied from
            ``ToolCall.result_id``.
    """

    model_config = ConfigDict(frozen=True)

    tool_call_id: str
    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    tool_call_result_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool_call_id": self.tool_call_id,
            "tool_name": self.tool_name,
            "args": dict(self.args),
            "result": self.result,
            "tool_call_result_id": self.tool_call_result_id,
        }


__all__ = ["ToolResult"]
