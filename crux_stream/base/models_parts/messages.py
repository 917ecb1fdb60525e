"""Conversation messages exchanged with providers.

The orchestrator appends one ``AssistantMessage`` and one
``ToolResultMessage`` per tool-calling round; the collector rebuilds the same
shapes from the event sequence.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Tuple, Union

from ..dto.tool_call import ToolCall
from ..dto.tool_result import ToolResult

Role = Literal["system", "user", "assistant", "tool"]


@dataclass(frozen=True)
class SystemMessage:
    content: str

    @property
    def role(self) -> Role:
        return "system"

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class UserMessage:
    content: str
    additional_content: Dict[str, Any] = field(default_factory=dict)

    @property
    def role(self) -> Role:
        return "user"

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class AssistantMessage:
    """Text and tool calls produced by the model in one round.

    ``additional_content`` carries provider extras needed to replay the turn
    (e.g. thinking text and signature for Anthropic, citations).
    """

    content: str = ""
    tool_calls: Tuple[ToolCall, ...] = ()
    additional_content: Dict[str, Any] = field(default_factory=dict)

    @property
    def role(self) -> Role:
        return "assistant"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "tool_calls": [tc.to_dict() for tc in self.tool_calls],
        }


@dataclass(frozen=True)
class ToolResultMessage:
    tool_results: Tuple[ToolResult, ...] = ()

    @property
    def role(self) -> Role:
        return "tool"

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "tool_results": [tr.to_dict() for tr in self.tool_results]}


Message = Union[SystemMessage, UserMessage, AssistantMessage, ToolResultMessage]

__all__ = [
    "Role",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolResultMessage",
    "Message",
]
