"""Base class for provider stream producers.

A producer turns one provider round-trip into a lazy, single-pass sequence
of canonical events. ``stream()`` runs the precondition check eagerly, so an
unsupported request fails before the caller sees any event, and returns a
generator that:

* opens a tracing span for the round-trip,
* logs ``stream.start`` / ``stream.end`` / ``stream.error`` with normalized keys,
* wraps transport failures (connect, read, timeout) in a classified
  :class:`ProviderRequestError`,
* closes the provider-specific generator (and with it the open HTTP
  response) as soon as the consumer abandons iteration.

Subclasses implement :meth:`StreamProducer._produce` and may override
:meth:`StreamProducer.validate`.
"""
from __future__ import annotations

import abc
from contextlib import closing
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional

import httpx

from ...config import get_provider_config
from ..cancellation import CancellationToken
from ..errors_parts.classification import classify_exception
from ..errors_parts.provider_error import ProviderError
from ..errors_parts.provider_rejections import ProviderRequestError
from ..errors_parts.stream_errors import StreamingUnsupportedError
from ..http.client import get_httpx_client
from ..logging import LogContext, get_logger, normalized_log_event
from ..models_parts.text_request import TextRequest
from ..tracing import start_span
from .events import StreamEvent
from .stream_state import StreamState


class StreamProducer(abc.ABC):
    """Translate one provider's wire protocol into canonical events.

    Parameters:
        client: Optional ``httpx.Client``; defaults to the shared pool entry
            for the provider's base URL.
        config: Overrides merged over :func:`get_provider_config`.
        cancellation_token: Checked by producers that wait between requests.
    """

    provider_name: ClassVar[str]

    def __init__(
        self,
        *,
        client: Optional[httpx.Client] = None,
        config: Optional[Mapping[str, Any]] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        self.config: Dict[str, Any] = get_provider_config(self.provider_name, dict(config or {}))
        self._client = client
        self.cancellation_token = cancellation_token
        self.logger = get_logger(f"crux_stream.{self.provider_name}")

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = get_httpx_client(self.config.get("base_url"), purpose="stream")
        return self._client

    def validate(self, request: TextRequest) -> None:
        """Reject requests this provider cannot stream (default: accept all)."""

    def reject(self, capability: str, request: TextRequest) -> None:
        """Log and raise a precondition failure for ``capability``."""
        normalized_log_event(
            self.logger,
            "stream.precondition_failed",
            LogContext(provider=self.provider_name, model=request.model),
            phase="validate",
            emitted=False,
            capability=capability,
        )
        raise StreamingUnsupportedError(capability, provider=self.provider_name, model=request.model)

    def stream(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        """Validate ``request`` and return the lazy event sequence for one round-trip."""
        self.validate(request)
        return self._run(request, state)

    def _run(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        ctx = LogContext(provider=self.provider_name, model=request.model)
        emitted = 0
        with start_span("crux_stream.producer.stream") as span:
            span.set_attribute("provider", self.provider_name)
            span.set_attribute("model", request.model)
            normalized_log_event(self.logger, "stream.start", ctx, phase="start", emitted=False)
            try:
                with closing(self._produce(request, state)) as events:
                    for event in events:
                        emitted += 1
                        yield event
            except ProviderError as exc:
                self._log_error(span, ctx, exc, emitted)
                raise
            except httpx.TransportError as exc:
                error = ProviderRequestError(
                    str(exc) or type(exc).__name__,
                    code=classify_exception(exc),
                    provider=self.provider_name,
                    model=request.model,
                    raw=exc,
                )
                self._log_error(span, ctx, error, emitted)
                raise error from exc
            span.set_attribute("events", emitted)
            normalized_log_event(
                self.logger,
                "stream.end",
                ctx,
                phase="finalize",
                emitted=emitted > 0,
                tokens=state.usage,
                events=emitted,
                delivery=state.metadata.get("delivery"),
            )

    def _log_error(self, span: Any, ctx: LogContext, exc: ProviderError, emitted: int) -> None:
        span.record_exception(exc)
        normalized_log_event(
            self.logger,
            "stream.error",
            ctx,
            phase="error",
            error_code=exc.code.value,
            emitted=emitted > 0,
            events=emitted,
            message=exc.message,
        )

    @abc.abstractmethod
    def _produce(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        """Provider-specific translation; must be a generator."""


__all__ = ["StreamProducer"]
