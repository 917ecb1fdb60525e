"""Pydantic DTOs exchanged between producers, the tool registry and adapters."""

from .tool_call import ToolCall
from .tool_result import ToolResult

__all__ = ["ToolCall", "ToolResult"]
