"""crux_stream.config.env
======================

Mapping from provider identifiers to the environment variables holding their
credentials. Replicate's own tooling uses ``REPLICATE_API_TOKEN``, so it is
accepted alongside the ``<PROVIDER>_API_KEY`` convention.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

# Provider -> ordered env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "anthropic": ("ANTHROPIC_API_KEY",),
    "openai": ("OPENAI_API_KEY",),
    "replicate": ("REPLICATE_API_KEY", "REPLICATE_API_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True for empty or obviously fake values (``changeme``, ``<...>``)."""
    if val is None:
        return True
    v = val.strip().lower()
    if not v:
        return True
    return "placeholder" in v or "changeme" in v or (v.startswith("<") and v.endswith(">"))


def get_env_api_key(provider: str) -> Optional[str]:
    """Return the first non-placeholder API key found for ``provider``."""
    for name in ENV_ALIASES.get(provider.lower(), ()):
        val = os.getenv(name)
        if not is_placeholder(val):
            return val
    return None


__all__ = ["ENV_ALIASES", "is_placeholder", "get_env_api_key"]
