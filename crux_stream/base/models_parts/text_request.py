"""Text generation request shared by every producer."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..constants import DEFAULT_MAX_STEPS
from ..tools.tool import Tool
from .messages import Message, SystemMessage


@dataclass
class TextRequest:
    """Input of one streamed generation.

    Attributes:
        model: Provider model name.
        messages: Conversation so far; the orchestrator appends assistant and
            tool-result messages between rounds.
        system_prompts: System instructions, kept apart from ``messages``
            because providers place them differently.
        tools: Tools offered to the model.
        max_steps: Upper bound on provider round-trips.
        schema: JSON schema for structured output, when requested.
        provider_options: Provider-specific request fields merged into the
            payload as-is.
    """

    model: str
    messages: List[Message] = field(default_factory=list)
    system_prompts: List[SystemMessage] = field(default_factory=list)
    tools: List[Tool] = field(default_factory=list)
    max_steps: int = DEFAULT_MAX_STEPS
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    schema: Optional[Dict[str, Any]] = None
    provider_options: Dict[str, Any] = field(default_factory=dict)

    def with_messages(self, messages: List[Message]) -> "TextRequest":
        return replace(self, messages=list(messages))


__all__ = ["TextRequest"]
