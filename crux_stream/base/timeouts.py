"""Timeout configuration for the shared HTTP client pool.

``TimeoutConfig`` holds the connect and read budgets applied to every pooled
``httpx.Client``. The read budget bounds the wait for the next chunk on an
open streaming connection; the poll/simulate strategy has its own wall-clock
budget (``max_wait_seconds`` in provider configuration).

Supported environment variables (all optional, positive floats):
    CRUX_STREAM_TIMEOUT_CONNECT_SECONDS
    CRUX_STREAM_TIMEOUT_READ_SECONDS
    CRUX_STREAM_TIMEOUT_WRITE_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds."""

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 120.0
    write_timeout_seconds: float = 30.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.connect_timeout_seconds,
        )


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return a ``TimeoutConfig`` built from defaults and environment overrides."""
    defaults = TimeoutConfig()
    return TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(
            "CRUX_STREAM_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds
        ),
        read_timeout_seconds=_parse_env_float("CRUX_STREAM_TIMEOUT_READ_SECONDS", defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float("CRUX_STREAM_TIMEOUT_WRITE_SECONDS", defaults.write_timeout_seconds),
    )


__all__ = ["TimeoutConfig", "get_timeout_config"]
