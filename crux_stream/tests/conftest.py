"""Pytest configuration for the crux_stream test suite.

Every test starts from built-in provider defaults: provider environment
variables and the external config file are cleared, the parsed-config cache
is reset, and pooled HTTP clients are closed afterwards.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import httpx
import pytest

from crux_stream.base.http import close_all_clients
from crux_stream.base.logging import BASE_LOGGER_NAME, get_logger
from crux_stream.base.models import FinishReason
from crux_stream.base.streaming import emit
from crux_stream.base.streaming.producer import StreamProducer
from crux_stream.config import CONFIG_FILE_ENV, ENV_FIELD_MAP, reset_config_cache

_PROVIDERS = ("ANTHROPIC", "OPENAI", "OLLAMA", "REPLICATE")


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for prefix in _PROVIDERS:
        for suffix in ENV_FIELD_MAP.values():
            monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()


@pytest.fixture()
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Return a factory building an ``httpx.Client`` served by a handler function."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


def _sse(frames: Iterable[Tuple[Optional[str], Any]]) -> str:
    parts: List[str] = []
    for event, data in frames:
        text = data if isinstance(data, str) else json.dumps(data)
        head = f"event: {event}\n" if event is not None else ""
        parts.append(f"{head}data: {text}\n\n")
    return "".join(parts)


@pytest.fixture()
def sse_body() -> Callable[[Iterable[Tuple[Optional[str], Any]]], str]:
    """Render ``(event, data)`` pairs as a server-sent events body."""
    return _sse


class _ListHandler(logging.Handler):
    """Capture JSON log lines as decoded dicts."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.records.append(json.loads(record.getMessage()))
        except ValueError:
            self.records.append({"message": record.getMessage()})


@pytest.fixture()
def log_records() -> Iterator[List[Dict[str, Any]]]:
    """Collect structured log payloads emitted under the ``crux_stream`` logger."""
    base = get_logger(BASE_LOGGER_NAME)
    handler = _ListHandler()
    base.addHandler(handler)
    try:
        yield handler.records
    finally:
        base.removeHandler(handler)


class ScriptedProducer(StreamProducer):
    """Producer replaying scripted rounds without any HTTP.

    Each round is a dict with optional ``text`` (list of deltas), ``tools``
    (list of ToolCall) and ``finish`` (FinishReason). The last round repeats
    when more round-trips are requested than scripted.
    """

    provider_name = "scripted"

    def __init__(self, rounds: List[Dict[str, Any]], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.rounds = rounds
        self.requests: List[Any] = []

    def _produce(self, request, state):
        self.requests.append(request)
        script = self.rounds[min(len(self.requests), len(self.rounds)) - 1]
        yield from emit.stream_start(state, model=request.model, provider=self.provider_name, delivery="push")
        for delta in script.get("text", []):
            yield from emit.text_delta(state, delta)
        for call in script.get("tools", []):
            yield from emit.tool_call(state, call)
        default = FinishReason.TOOL_CALLS if script.get("tools") else FinishReason.STOP
        yield from emit.stream_end(state, script.get("finish", default))


@pytest.fixture()
def scripted_producer() -> type:
    return ScriptedProducer
