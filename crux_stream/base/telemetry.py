"""Telemetry sinks notified by the orchestrator at round boundaries.

A sink is fire-and-forget: :func:`notify` swallows and logs anything a sink
raises so telemetry can never break or block the event pipeline. Span
storage and export are left to the OpenTelemetry SDK the host application
configures.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .logging import get_logger, log_event
from .models_parts.finish_reason import FinishReason
from .models_parts.usage import Usage
from .tracing import get_tracer


@runtime_checkable
class TelemetrySink(Protocol):
    def round_started(self, *, step: int, provider: str, model: str) -> None: ...

    def round_finished(
        self,
        *,
        step: int,
        provider: str,
        model: str,
        finish_reason: FinishReason,
        usage: Optional[Usage],
    ) -> None: ...


class NullTelemetry:
    """Sink that ignores every notification."""

    def round_started(self, *, step: int, provider: str, model: str) -> None:
        return None

    def round_finished(self, *, step, provider, model, finish_reason, usage) -> None:
        return None


class LoggingTelemetry:
    """Sink that writes one structured log line per round boundary."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger("crux_stream.telemetry")

    def round_started(self, *, step: int, provider: str, model: str) -> None:
        log_event(self._logger, "telemetry.round_started", step=step, provider=provider, model=model)

    def round_finished(self, *, step, provider, model, finish_reason, usage) -> None:
        log_event(
            self._logger,
            "telemetry.round_finished",
            step=step,
            provider=provider,
            model=model,
            finish_reason=finish_reason.value,
            usage=usage.to_dict() if usage else None,
        )


class TracingTelemetry:
    """Sink that records each round as an OpenTelemetry span.

    The span opens at ``round_started`` and ends at ``round_finished`` for the
    same step.
    """

    def __init__(self, service_name: str = "crux_stream") -> None:
        self._tracer = get_tracer(service_name)
        self._spans: Dict[int, Any] = {}

    def round_started(self, *, step: int, provider: str, model: str) -> None:
        span = self._tracer.start_span("crux_stream.round")
        span.set_attribute("step", step)
        span.set_attribute("provider", provider)
        span.set_attribute("model", model)
        self._spans[step] = span

    def round_finished(self, *, step, provider, model, finish_reason, usage) -> None:
        span = self._spans.pop(step, None)
        if span is None:
            return
        span.set_attribute("finish_reason", finish_reason.value)
        if usage is not None:
            span.set_attribute("prompt_tokens", usage.prompt_tokens)
            span.set_attribute("completion_tokens", usage.completion_tokens)
        span.end()


_logger = get_logger("crux_stream.telemetry")


def notify(sink: Optional[TelemetrySink], hook: str, **fields: Any) -> None:
    """Call ``sink.<hook>(**fields)``; sink failures are logged, never raised."""
    if sink is None:
        return
    try:
        getattr(sink, hook)(**fields)
    except Exception as exc:  # noqa: BLE001
        log_event(_logger, "telemetry.sink_error", hook=hook, sink=type(sink).__name__, error=str(exc))


__all__ = ["TelemetrySink", "NullTelemetry", "LoggingTelemetry", "TracingTelemetry", "notify"]
