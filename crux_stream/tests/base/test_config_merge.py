"""Provider configuration merge order: defaults, file, env, overrides."""
from __future__ import annotations

import json

import pytest

from crux_stream.config import CONFIG_FILE_ENV, DEFAULTS, get_model, get_provider_config
from crux_stream.config.env import get_env_api_key, is_placeholder


def test_defaults_only():
    cfg = get_provider_config("replicate")
    assert cfg["poll_interval_ms"] == DEFAULTS["replicate"]["poll_interval_ms"]
    assert "api_key" not in cfg
    assert get_model("ollama") == DEFAULTS["ollama"]["model"]


def test_unknown_provider_is_empty():
    assert get_provider_config("nope") == {}


@pytest.mark.parametrize("suffix", ["json", "yaml"])
def test_external_file_overrides_defaults(tmp_path, monkeypatch, suffix):
    data = {"replicate": {"poll_interval_ms": 200, "model": "acme/llm"}}
    path = tmp_path / f"crux.{suffix}"
    if suffix == "json":
        path.write_text(json.dumps(data), encoding="utf-8")
    else:
        path.write_text("replicate:\n  poll_interval_ms: 200\n  model: acme/llm\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))

    cfg = get_provider_config("replicate")
    assert cfg["poll_interval_ms"] == 200
    assert cfg["model"] == "acme/llm"
    assert cfg["base_url"] == DEFAULTS["replicate"]["base_url"]


def test_missing_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.yaml"))
    assert get_provider_config("openai")["base_url"] == DEFAULTS["openai"]["base_url"]


def test_env_beats_file_and_overrides_beat_env(tmp_path, monkeypatch):
    path = tmp_path / "crux.json"
    path.write_text(json.dumps({"openai": {"model": "from-file"}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    monkeypatch.setenv("OPENAI_MODEL", "from-env")
    assert get_provider_config("openai")["model"] == "from-env"
    assert get_provider_config("openai", {"model": "explicit"})["model"] == "explicit"
    assert get_provider_config("openai", {"model": None})["model"] == "from-env"


def test_replicate_token_alias(monkeypatch):
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_abc")
    assert get_env_api_key("replicate") == "r8_abc"
    assert get_provider_config("replicate")["api_key"] == "r8_abc"


@pytest.mark.parametrize("value", [None, "", "  ", "changeme", "<your key>", "PLACEHOLDER"])
def test_placeholder_values(value):
    assert is_placeholder(value)


def test_real_value_is_not_placeholder():
    assert not is_placeholder("sk-live-123")
