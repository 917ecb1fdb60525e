"""Public entry point: stream text from a provider, with tools and renderers.

``TextStream`` assembles the pipeline for one request::

    producer -> MultiStepOrchestrator -> StreamCollector -> adapter

Nothing runs until the caller pulls events (directly via :meth:`events` or
through one of the renderers). Precondition checks run when the pipeline is
built, so an unsupported request raises before a response object exists.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Union

import httpx
from fastapi.responses import StreamingResponse

from .base.cancellation import CancellationToken
from .base.factory import ProducerFactory
from .base.models import TextRequest
from .base.orchestration import MultiStepOrchestrator
from .base.streaming.adapters import (
    BroadcastAdapter,
    Broadcaster,
    DataProtocolAdapter,
    EventStreamAdapter,
)
from .base.streaming.collector import OnComplete, StreamCollector
from .base.streaming.events import StreamEvent
from .base.streaming.producer import StreamProducer
from .base.telemetry import TelemetrySink
from .base.tools import Tool, ToolRegistry


class TextStream:
    """One streamed generation, optionally spanning several tool-calling steps.

    Parameters:
        producer: Provider producer used for every round-trip.
        request: The request; ``tools`` are appended to ``request.tools``.
        tools: Extra tools offered to the model and executed locally.
        telemetry: Sink notified at each round boundary.
        on_complete: Receives ``(history, request)`` once the sequence is
            exhausted.
        cancellation_token: Checked before each round-trip and between polls.
    """

    def __init__(
        self,
        producer: StreamProducer,
        request: TextRequest,
        *,
        tools: Iterable[Tool] = (),
        telemetry: Optional[TelemetrySink] = None,
        on_complete: Optional[OnComplete] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        extra = list(tools)
        self.request = replace(request, tools=[*request.tools, *extra]) if extra else request
        self.producer = producer
        self.telemetry = telemetry
        self.on_complete = on_complete
        self.cancellation_token = cancellation_token
        if cancellation_token is not None and producer.cancellation_token is None:
            producer.cancellation_token = cancellation_token

    def events(self) -> Iterator[StreamEvent]:
        """Build the pipeline and return its lazy event sequence."""
        orchestrator = MultiStepOrchestrator(
            self.producer,
            ToolRegistry(self.request.tools),
            telemetry=self.telemetry,
            cancellation_token=self.cancellation_token,
        )
        return iter(StreamCollector(orchestrator.run(self.request), self.on_complete, self.request))

    def as_event_stream_response(self) -> StreamingResponse:
        return EventStreamAdapter()(self.events())

    def as_data_stream_response(self) -> StreamingResponse:
        return DataProtocolAdapter()(self.events())

    def as_broadcast(
        self,
        channels: Union[str, Sequence[str]],
        broadcaster: Optional[Broadcaster] = None,
    ) -> int:
        """Publish every event to ``channels``; returns the number published."""
        return BroadcastAdapter(channels, broadcaster)(self.events())


def stream_text(
    provider: str,
    request: TextRequest,
    *,
    tools: Iterable[Tool] = (),
    telemetry: Optional[TelemetrySink] = None,
    on_complete: Optional[OnComplete] = None,
    cancellation_token: Optional[CancellationToken] = None,
    client: Optional[httpx.Client] = None,
    config: Optional[Mapping[str, Any]] = None,
    **producer_kwargs: Any,
) -> TextStream:
    """Create a :class:`TextStream` for ``provider``.

    An empty ``request.model`` is filled from the provider configuration.
    """
    producer = ProducerFactory.create(
        provider,
        client=client,
        config=config,
        cancellation_token=cancellation_token,
        **producer_kwargs,
    )
    if not request.model:
        request = replace(request, model=str(producer.config.get("model") or ""))
    return TextStream(
        producer,
        request,
        tools=tools,
        telemetry=telemetry,
        on_complete=on_complete,
        cancellation_token=cancellation_token,
    )


__all__ = ["TextStream", "stream_text"]
