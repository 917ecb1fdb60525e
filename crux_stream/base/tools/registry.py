"""In-process tool registry used by the multi-step orchestrator.

Maps tool names to :class:`Tool` definitions and executes tool calls by name.
Unlike a best-effort router, a missing tool or an unswallowed handler failure
raises: the orchestrator treats both as fatal to the stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..dto.tool_call import ToolCall
from ..dto.tool_result import ToolResult
from ..errors_parts.tool_errors import ToolExecutionError, ToolNotFoundError
from ..logging import get_logger, log_event
from .tool import Tool

_logger = get_logger("crux_stream.tools")


@dataclass(frozen=True)
class ToolOutcome:
    """Result of one tool execution; ``error`` is set when a failure was swallowed."""

    result: ToolResult
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


class ToolRegistry:
    """Registry of tools available to the model.

    Contract:
        - Register tools with ``register(tool)``; a later registration under
          the same name replaces the earlier one.
        - ``get(name)`` raises :class:`ToolNotFoundError` for unknown names.
        - ``execute(tool_call)`` decodes arguments, runs the handler and wraps
          the value in a :class:`ToolResult`.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def has(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def execute(self, tool_call: ToolCall) -> ToolOutcome:
        """Run ``tool_call`` against its registered tool.

        Raises:
            ToolNotFoundError: no tool is registered under ``tool_call.name``.
            ToolArgumentsError: the call's arguments are not a JSON object.
            ToolExecutionError: the handler raised and the tool does not
                swallow its errors.
        """
        tool = self.get(tool_call.name)
        args = tool_call.arguments()
        log_event(_logger, "tool.execute", tool=tool.name, tool_call_id=tool_call.id)
        error: Optional[str] = None
        try:
            value = tool.handler(args)
        except Exception as exc:
            log_event(
                _logger,
                "tool.error",
                tool=tool.name,
                tool_call_id=tool_call.id,
                swallowed=tool.swallows_errors,
                error=str(exc),
            )
            if tool.failed_handler is None:
                raise ToolExecutionError(tool.name, exc) from exc
            value = tool.failed_handler(exc, args)
            error = str(exc)
        result = ToolResult(
            tool_call_id=tool_call.id,
            tool_name=tool.name,
            args=args,
            result=value,
            tool_call_result_id=tool_call.result_id,
        )
        return ToolOutcome(result=result, error=error)


__all__ = ["ToolRegistry", "ToolOutcome"]
