"""Replicate prediction lifecycle: create, fetch, and wait.

Replicate runs generations as asynchronous predictions. A prediction may
expose its own server-sent events channel in ``urls.stream``; otherwise it
has to be polled until it reaches a terminal status.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import StreamTimeoutError
from ..base.http import raise_for_provider_status
from ..base.logging import LogContext, normalized_log_event

PROVIDER = "replicate"
TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


@dataclass(frozen=True)
class Prediction:
    """Subset of the prediction resource the producer relies on."""

    id: str
    status: str
    output: Any = None
    urls: Dict[str, str] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Prediction":
        return cls(
            id=str(data.get("id", "")),
            status=str(data.get("status", "starting")),
            output=data.get("output"),
            urls=dict(data.get("urls") or {}),
            metrics=dict(data.get("metrics") or {}),
            error=str(data["error"]) if data.get("error") else None,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def stream_url(self) -> Optional[str]:
        return self.urls.get("stream") or None

    def output_tokens(self) -> List[str]:
        """Final output as tokens: list elements as-is, a bare string as one token."""
        if self.output is None:
            return []
        items = self.output if isinstance(self.output, list) else [self.output]
        return [item for item in items if isinstance(item, str) and item]


def create_prediction(
    client: httpx.Client,
    url: str,
    payload: Mapping[str, Any],
    headers: Mapping[str, str],
    *,
    model: Optional[str] = None,
) -> Prediction:
    response = client.post(url, json=dict(payload), headers=dict(headers))
    raise_for_provider_status(response, provider=PROVIDER, model=model)
    return Prediction.from_dict(response.json())


def get_prediction(
    client: httpx.Client,
    url: str,
    headers: Mapping[str, str],
    *,
    model: Optional[str] = None,
) -> Prediction:
    response = client.get(url, headers=dict(headers))
    raise_for_provider_status(response, provider=PROVIDER, model=model)
    return Prediction.from_dict(response.json())


def wait_for_prediction(  # noqa: PLR0913
    client: httpx.Client,
    url: str,
    headers: Mapping[str, str],
    *,
    poll_interval_seconds: float,
    max_wait_seconds: float,
    model: Optional[str] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    cancellation_token: Optional[CancellationToken] = None,
    logger=None,
) -> Prediction:
    """Poll ``url`` until the prediction is terminal.

    The wait budget is checked after every fetch, so a prediction that never
    finishes raises :class:`StreamTimeoutError` no later than
    ``max_wait_seconds + poll_interval_seconds`` after the first fetch.
    A cancelled token aborts between attempts.
    """
    started = clock()
    attempt = 0
    while True:
        attempt += 1
        if cancellation_token is not None:
            cancellation_token.raise_if_cancelled(PROVIDER)
        prediction = get_prediction(client, url, headers, model=model)
        if logger is not None:
            normalized_log_event(
                logger,
                "replicate.poll",
                LogContext(provider=PROVIDER, model=model),
                phase="poll",
                attempt=attempt,
                emitted=False,
                status=prediction.status,
            )
        if prediction.is_terminal:
            return prediction
        elapsed = clock() - started
        if elapsed >= max_wait_seconds:
            raise StreamTimeoutError(
                f"prediction {prediction.id} timed out after {max_wait_seconds:g} seconds",
                provider=PROVIDER,
                model=model,
                waited_seconds=elapsed,
            )
        sleep(poll_interval_seconds)


__all__ = [
    "Prediction",
    "TERMINAL_STATUSES",
    "create_prediction",
    "get_prediction",
    "wait_for_prediction",
]
