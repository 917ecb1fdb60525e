"""Rate-limit metadata parsed from provider response headers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ProviderRateLimit:
    """One named limit (e.g. ``requests``, ``input-tokens``).

    ``resets_at`` is kept as the raw header value (an ISO timestamp or a
    duration, depending on the provider).
    """

    name: str
    limit: Optional[int] = None
    remaining: Optional[int] = None
    resets_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "limit": self.limit,
            "remaining": self.remaining,
            "resets_at": self.resets_at,
        }


__all__ = ["ProviderRateLimit"]
