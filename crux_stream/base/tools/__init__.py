"""Tool definitions and the registry the orchestrator executes them through."""

from .tool import FailedHandler, Tool, ToolHandler, default_failed_handler
from .registry import ToolOutcome, ToolRegistry

__all__ = [
    "Tool",
    "ToolHandler",
    "FailedHandler",
    "default_failed_handler",
    "ToolRegistry",
    "ToolOutcome",
]
