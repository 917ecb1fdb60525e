"""Tool definition offered to the model and executed by the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Tuple

ToolHandler = Callable[[Dict[str, Any]], Any]
FailedHandler = Callable[[Exception, Dict[str, Any]], Any]


def default_failed_handler(exc: Exception, arguments: Dict[str, Any]) -> str:
    """Turn a handler failure into a result the model can read."""
    return f"Tool execution error: {exc}"


@dataclass(frozen=True)
class Tool:
    """A named callable exposed to the model.

    Contract:
        - ``handler`` receives the decoded argument mapping and returns any
          JSON-friendly value.
        - When ``failed_handler`` is set the tool swallows its own errors: the
          handler's exception is passed to ``failed_handler`` and its return
          value becomes the tool result. Without one, a failure is fatal to
          the stream.
    """

    name: str
    handler: ToolHandler
    description: str = ""
    parameters: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    failed_handler: Optional[FailedHandler] = None

    @property
    def swallows_errors(self) -> bool:
        return self.failed_handler is not None

    def with_error_handling(self, handler: Optional[FailedHandler] = None) -> "Tool":
        return replace(self, failed_handler=handler or default_failed_handler)

    def without_error_handling(self) -> "Tool":
        return replace(self, failed_handler=None)

    def json_schema(self) -> Dict[str, Any]:
        """JSON schema of the argument object, as sent in provider payloads."""
        return {
            "type": "object",
            "properties": {k: dict(v) for k, v in self.parameters.items()},
            "required": list(self.required),
        }


__all__ = ["Tool", "ToolHandler", "FailedHandler", "default_failed_handler"]
