"""Token usage reported at the end of a round-trip."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Usage:
    """Token counts for one round-trip.

    Provider-specific counters (prompt caching, reasoning tokens) are optional
    and stay ``None`` when the provider does not report them.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    cache_write_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None
    thought_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "cache_write_input_tokens": self.cache_write_input_tokens,
            "cache_read_input_tokens": self.cache_read_input_tokens,
            "thought_tokens": self.thought_tokens,
        }


__all__ = ["Usage"]
