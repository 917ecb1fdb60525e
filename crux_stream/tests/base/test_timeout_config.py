from __future__ import annotations

import pytest

from crux_stream.base.timeouts import TimeoutConfig, get_timeout_config


def test_defaults():
    assert get_timeout_config() == TimeoutConfig()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CRUX_STREAM_TIMEOUT_READ_SECONDS", "5.5")
    cfg = get_timeout_config()
    assert cfg.read_timeout_seconds == 5.5
    assert cfg.to_httpx().read == 5.5


@pytest.mark.parametrize("raw", ["abc", "-1", "0"])
def test_invalid_values_fall_back(monkeypatch, raw):
    monkeypatch.setenv("CRUX_STREAM_TIMEOUT_CONNECT_SECONDS", raw)
    assert get_timeout_config().connect_timeout_seconds == TimeoutConfig().connect_timeout_seconds
