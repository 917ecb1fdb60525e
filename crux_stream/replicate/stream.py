"""Replicate stream producer (poll/simulate strategy).

Purpose:
    Present Replicate's asynchronous predictions as a canonical event stream.

Flow:
    1. Create a prediction with ``stream: true``; ``StreamStart`` follows
       once the prediction exists.
    2. When the prediction exposes ``urls.stream``, read that server-sent
       events channel: ``output`` frames carry plain-text deltas, ``done``
       carries ``{status, metrics}`` and ``error`` fails the stream.
    3. Otherwise poll the prediction every ``poll_interval_ms`` until it is
       terminal or ``max_wait_seconds`` elapses, then replay the final
       output as one ``TextDelta`` per token.

Preconditions:
    Tool calling cannot be combined with streaming on Replicate; such
    requests are rejected before any event.

Timeout:
    Exceeding the wait budget raises :class:`StreamTimeoutError`; it is not
    retried here.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import CAPABILITY_TOOLS, DELIVERY_JOB_STREAM, DELIVERY_SIMULATED
from ..base.errors import MidStreamError
from ..base.http import raise_for_provider_status
from ..base.models import FinishReason, TextRequest, Usage
from ..base.streaming import emit
from ..base.streaming.events import ErrorEvent, StreamEvent
from ..base.streaming.producer import StreamProducer
from ..base.streaming.sse import decode_json_object, iter_sse_frames
from ..base.streaming.stream_state import StreamState
from .payload import build_headers, build_payload, prediction_target
from .predictions import Prediction, create_prediction, wait_for_prediction

_STATUS_FINISH = {
    "succeeded": FinishReason.STOP,
    "canceled": FinishReason.OTHER,
}


def map_finish_reason(status: str) -> FinishReason:
    return _STATUS_FINISH.get(status, FinishReason.UNKNOWN)


def _usage(metrics: Mapping[str, Any]) -> Usage:
    return Usage(
        prompt_tokens=int(metrics.get("input_token_count") or 0),
        completion_tokens=int(metrics.get("output_token_count") or 0),
    )


class ReplicateStreamProducer(StreamProducer):
    """Stream producer for Replicate predictions.

    ``clock`` and ``sleep`` drive the polling loop and can be replaced with
    a simulated clock in tests.
    """

    provider_name = "replicate"

    def __init__(
        self,
        *,
        client: Optional[httpx.Client] = None,
        config: Optional[Mapping[str, Any]] = None,
        cancellation_token: Optional[CancellationToken] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(client=client, config=config, cancellation_token=cancellation_token)
        self._clock = clock
        self._sleep = sleep

    @property
    def poll_interval_seconds(self) -> float:
        return float(self.config["poll_interval_ms"]) / 1000.0

    @property
    def max_wait_seconds(self) -> float:
        return float(self.config["max_wait_seconds"])

    def _url(self, path: str) -> str:
        return f"{str(self.config['base_url']).rstrip('/')}{path}"

    def validate(self, request: TextRequest) -> None:
        if request.tools:
            self.reject(CAPABILITY_TOOLS, request)

    def _produce(self, request: TextRequest, state: StreamState) -> Iterator[StreamEvent]:
        headers = build_headers(self.config)
        path, _ = prediction_target(request)
        prediction = create_prediction(
            self.client, self._url(path), build_payload(request), headers, model=request.model
        )
        stream_url = prediction.stream_url
        yield from emit.stream_start(
            state,
            model=request.model,
            provider=self.provider_name,
            delivery=DELIVERY_JOB_STREAM if stream_url else DELIVERY_SIMULATED,
            prediction_id=prediction.id,
        )
        if stream_url:
            yield from self._job_stream(stream_url, headers, request, state)
        else:
            yield from self._simulated(prediction, headers, request, state)

    def _job_stream(
        self,
        stream_url: str,
        headers: Dict[str, str],
        request: TextRequest,
        state: StreamState,
    ) -> Iterator[StreamEvent]:
        sse_headers = {**headers, "accept": "text/event-stream", "cache-control": "no-store"}
        status = "succeeded"
        metrics: Dict[str, Any] = {}
        with self.client.stream("GET", stream_url, headers=sse_headers) as response:
            raise_for_provider_status(response, provider=self.provider_name, model=request.model)
            for frame in iter_sse_frames(response.iter_lines()):
                if frame.event == "output":
                    yield from emit.text_delta(state, frame.data)
                elif frame.event == "done":
                    done = (
                        decode_json_object(frame.data, provider=self.provider_name, model=request.model)
                        if frame.data.strip()
                        else {}
                    )
                    status = str(done.get("status") or "succeeded")
                    metrics = dict(done.get("metrics") or {})
                    break
                elif frame.event == "error":
                    yield from self._error(self._error_detail(frame.data), request)
        if status == "failed":
            yield from self._error("prediction failed", request)
        state.usage = _usage(metrics)
        yield from emit.stream_end(state, map_finish_reason(status))

    def _simulated(
        self,
        prediction: Prediction,
        headers: Dict[str, str],
        request: TextRequest,
        state: StreamState,
    ) -> Iterator[StreamEvent]:
        if not prediction.is_terminal:
            prediction = wait_for_prediction(
                self.client,
                self._url(f"/predictions/{prediction.id}"),
                headers,
                poll_interval_seconds=self.poll_interval_seconds,
                max_wait_seconds=self.max_wait_seconds,
                model=request.model,
                clock=self._clock,
                sleep=self._sleep,
                cancellation_token=self.cancellation_token,
                logger=self.logger,
            )
        if prediction.status == "failed":
            yield from self._error(prediction.error or "prediction failed", request)
        for token in prediction.output_tokens():
            yield from emit.text_delta(state, token)
        state.usage = _usage(prediction.metrics)
        yield from emit.stream_end(state, map_finish_reason(prediction.status))

    def _error_detail(self, data: str) -> str:
        if data.strip().startswith("{"):
            parsed = decode_json_object(data, provider=self.provider_name)
            return str(parsed.get("detail") or data)
        return data

    def _error(self, message: str, request: TextRequest) -> Iterator[StreamEvent]:
        yield ErrorEvent(
            error_type="prediction_error",
            message=message,
            recoverable=False,
            metadata={"provider": self.provider_name},
        )
        raise MidStreamError(
            f"Replicate streaming error: {message}",
            provider=self.provider_name,
            model=request.model,
            error_type="prediction_error",
        )


__all__ = ["ReplicateStreamProducer", "map_finish_reason"]
