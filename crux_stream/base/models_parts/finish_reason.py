"""Normalized finish reasons reported on ``StreamEnd``."""
from __future__ import annotations

from enum import Enum


class FinishReason(str, Enum):
    """Why a round-trip stopped generating.

    ``TOOL_CALLS`` is the only reason that makes the orchestrator start
    another round.
    """

    STOP = "stop"
    LENGTH = "length"
    CONTENT_FILTER = "content_filter"
    TOOL_CALLS = "tool_calls"
    ERROR = "error"
    OTHER = "other"
    UNKNOWN = "unknown"


__all__ = ["FinishReason"]
