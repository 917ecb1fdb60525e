"""Structured logging context carried by stream lifecycle events."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Common fields for one provider round-trip.

    ``step`` is the orchestrator step the round belongs to; ``delivery`` names
    how the stream was produced (``push``, ``job_stream`` or ``simulated``).
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    step: Optional[int] = None
    delivery: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
