"""DTO describing a tool invocation requested by the model.

Providers deliver tool arguments either as JSON text (streamed piecewise and
assembled by the producer) or as an already-decoded mapping. ``ToolCall``
keeps whatever the provider sent in ``raw_arguments`` and decodes on demand
through :meth:`ToolCall.arguments`.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..errors_parts.tool_errors import ToolArgumentsError


class ToolCall(BaseModel):
    """A single tool call emitted by the model.

    Parameters
    ----------
    id:
        Provider identifier of the call (the ``tool_use`` / function item id).
    name:
        Tool name the model wants to run.
    raw_arguments:
        JSON text or mapping as delivered by the provider.
    result_id:
        Identifier the provider expects on the matching result, when it
        differs from ``id`` (OpenAI Responses ``call_id``).
    reasoning_id / reasoning_summary:
        Reasoning item the call was produced under, when the provider links
        them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    raw_arguments: Union[str, Dict[str, Any]] = ""
    result_id: Optional[str] = None
    reasoning_id: Optional[str] = None
    reasoning_summary: Optional[Dict[str, Any]] = None

    def arguments(self) -> Dict[str, Any]:
        """Return the decoded arguments mapping.

        Empty text decodes to ``{}``. Malformed JSON or a non-object payload
        raises :class:`ToolArgumentsError`.
        """
        if isinstance(self.raw_arguments, dict):
            return dict(self.raw_arguments)
        text = self.raw_arguments.strip()
        if not text:
            return {}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ToolArgumentsError(self.name, exc.msg, raw=exc) from exc
        if not isinstance(parsed, dict):
            raise ToolArgumentsError(self.name, f"expected a JSON object, got {type(parsed).__name__}")
        return parsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "arguments": self.arguments(),
            "result_id": self.result_id,
            "reasoning_id": self.reasoning_id,
            "reasoning_summary": self.reasoning_summary,
        }


__all__ = ["ToolCall"]
