"""Errors raised while resolving or executing tool calls."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError

TOOL_PROVIDER = "tools"


class ToolNotFoundError(ProviderError):
    """The model named a tool that is not registered."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"tool '{tool_name}' not registered",
            provider=TOOL_PROVIDER,
        )
        self.tool_name = tool_name


class ToolExecutionError(ProviderError):
    """A tool handler raised and the tool does not swallow its errors."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(
            code=ErrorCode.TOOL_ERROR,
            message=f"tool '{tool_name}' failed: {cause}",
            provider=TOOL_PROVIDER,
            raw=cause,
        )
        self.tool_name = tool_name


class ToolArgumentsError(ProviderError):
    """Tool-call arguments were not a valid JSON object."""

    def __init__(self, tool_name: str, detail: str, raw: Optional[BaseException] = None) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=f"invalid arguments for tool '{tool_name}': {detail}",
            provider=TOOL_PROVIDER,
            raw=raw,
        )
        self.tool_name = tool_name


__all__ = ["ToolNotFoundError", "ToolExecutionError", "ToolArgumentsError", "TOOL_PROVIDER"]
