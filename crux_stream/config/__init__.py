"""Unified configuration layer for providers.

Merge order (later wins):
    1. Built-in defaults (:mod:`crux_stream.config.defaults`)
    2. Optional external config file (JSON or YAML) named by
       ``CRUX_STREAM_CONFIG_FILE``
    3. Environment variables
    4. In-code overrides passed to :func:`get_provider_config`

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_API_KEY, <PROVIDER>_BASE_URL,
<PROVIDER>_POLL_INTERVAL_MS, <PROVIDER>_MAX_WAIT_SECONDS,
e.g. ``REPLICATE_POLL_INTERVAL_MS=250``.

External Config File
--------------------
JSON is tried first, then YAML. Structure example::

    anthropic:
      model: claude-sonnet-4-20250514
    replicate:
      poll_interval_ms: 500
      max_wait_seconds: 120
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_MODEL,
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    REPLICATE_DEFAULT_BASE_URL,
    REPLICATE_DEFAULT_MODEL,
    REPLICATE_MAX_WAIT_SECONDS,
    REPLICATE_POLL_INTERVAL_MS,
)
from .env import get_env_api_key

CONFIG_FILE_ENV = "CRUX_STREAM_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_version": ANTHROPIC_API_VERSION,
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
    },
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "base_url": OLLAMA_DEFAULT_HOST},
    "replicate": {
        "model": REPLICATE_DEFAULT_MODEL,
        "base_url": REPLICATE_DEFAULT_BASE_URL,
        "poll_interval_ms": REPLICATE_POLL_INTERVAL_MS,
        "max_wait_seconds": REPLICATE_MAX_WAIT_SECONDS,
    },
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name
    "base_url": "BASE_URL",
    "api_version": "API_VERSION",
    "poll_interval_ms": "POLL_INTERVAL_MS",
    "max_wait_seconds": "MAX_WAIT_SECONDS",
}

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def _load_external_config() -> Dict[str, Any]:
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE[path] = data
    return data


def reset_config_cache() -> None:
    """Forget parsed config files (tests change ``CRUX_STREAM_CONFIG_FILE``)."""
    _FILE_CACHE.clear()


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``api_key`` additionally falls back to provider-specific env aliases.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if not cfg.get("api_key"):
        if key := get_env_api_key(name):
            cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
    "ENV_FIELD_MAP",
    "CONFIG_FILE_ENV",
]
