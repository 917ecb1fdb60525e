"""Discriminants of the canonical stream events."""
from __future__ import annotations

from enum import Enum


class StreamEventType(str, Enum):
    """Closed set of event kinds; every output adapter maps each member."""

    STREAM_START = "stream_start"
    TEXT_START = "text_start"
    TEXT_DELTA = "text_delta"
    TEXT_COMPLETE = "text_complete"
    THINKING_START = "thinking_start"
    THINKING_DELTA = "thinking_delta"
    THINKING_COMPLETE = "thinking_complete"
    TOOL_CALL = "tool_call"
    TOOL_CALL_DELTA = "tool_call_delta"
    TOOL_RESULT = "tool_result"
    CITATION = "citation"
    PROVIDER_TOOL_EVENT = "provider_tool_event"
    ERROR = "error"
    STREAM_END = "stream_end"


__all__ = ["StreamEventType"]
