"""Multi-step tool orchestration over a stream producer.

Each step is one provider round-trip. When a round ends with tool calls the
orchestrator executes them, appends the assistant turn and the tool results
to the conversation and starts the next round, until the model finishes for
another reason or ``request.max_steps`` rounds have run.

Events of every round are re-yielded as they arrive; ``ToolResult`` events
for a round follow that round's ``StreamEnd`` and precede the next
``StreamStart``.

Failure semantics:
    - A tool name missing from the registry raises :class:`ToolNotFoundError`
      before any tool of that round runs.
    - A handler failure raises :class:`ToolExecutionError` unless the tool
      swallows its errors, in which case the result carries the error text
      and the event has ``success=False``.
    - Provider errors propagate unchanged; nothing is retried here.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from ..cancellation import CancellationToken
from ..dto.tool_result import ToolResult
from ..logging import LogContext, get_logger, normalized_log_event
from ..models_parts.finish_reason import FinishReason
from ..models_parts.messages import AssistantMessage, Message, ToolResultMessage
from ..models_parts.text_request import TextRequest
from ..streaming.events import StreamEvent, ToolResultEvent
from ..streaming.producer import StreamProducer
from ..streaming.stream_state import StreamState
from ..telemetry import TelemetrySink, notify
from ..tools.registry import ToolRegistry


class MultiStepOrchestrator:
    """Drive a producer through as many rounds as tool calling requires.

    Attributes:
        producer: Producer used for every round-trip.
        registry: Tools available for execution; built from ``request.tools``
            when not supplied.
        telemetry: Optional sink notified at round boundaries.
        cancellation_token: Checked before each round-trip.
    """

    def __init__(
        self,
        producer: StreamProducer,
        registry: Optional[ToolRegistry] = None,
        *,
        telemetry: Optional[TelemetrySink] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        self.producer = producer
        self.registry = registry
        self.telemetry = telemetry
        self.cancellation_token = cancellation_token
        self.logger = get_logger("crux_stream.orchestrator")
        self.round_trips = 0

    def run(self, request: TextRequest) -> Iterator[StreamEvent]:
        """Return the lazy event sequence for ``request`` across all rounds."""
        registry = self.registry or ToolRegistry(request.tools)
        # round 1 validates eagerly, like a bare producer
        state = StreamState()
        first = self.producer.stream(request, state)
        return self._rounds(request.with_messages(request.messages), registry, state, first)

    def _rounds(
        self,
        request: TextRequest,
        registry: ToolRegistry,
        state: StreamState,
        events: Iterator[StreamEvent],
    ) -> Iterator[StreamEvent]:
        provider = self.producer.provider_name
        max_steps = max(1, request.max_steps)
        step = 1
        while True:
            self._check_cancelled(provider)
            ctx = LogContext(provider=provider, model=request.model, step=step)
            normalized_log_event(self.logger, "orchestrator.round_start", ctx, phase="start", attempt=step)
            notify(self.telemetry, "round_started", step=step, provider=provider, model=request.model)
            self.round_trips += 1
            yield from events

            finish_reason = state.metadata.get("finish_reason") or FinishReason.UNKNOWN
            normalized_log_event(
                self.logger,
                "orchestrator.round_end",
                ctx,
                phase="finalize",
                attempt=step,
                emitted=True,
                tokens=state.usage,
                finish_reason=finish_reason.value,
                tool_calls=len(state.tool_calls),
            )
            notify(
                self.telemetry,
                "round_finished",
                step=step,
                provider=provider,
                model=request.model,
                finish_reason=finish_reason,
                usage=state.usage,
            )
            if finish_reason is not FinishReason.TOOL_CALLS or not state.has_tool_calls:
                return
            if step >= max_steps:
                normalized_log_event(
                    self.logger,
                    "orchestrator.budget_exhausted",
                    ctx,
                    phase="finalize",
                    attempt=step,
                    max_steps=max_steps,
                    pending_tool_calls=[call.name for call in state.tool_calls],
                )
                return

            results: List[ToolResult] = []
            yield from self._execute_tools(registry, state, results)
            request = request.with_messages(
                [*request.messages, self._assistant_message(state), ToolResultMessage(tool_results=tuple(results))]
            )
            step += 1
            state = StreamState()
            events = self.producer.stream(request, state)

    def _execute_tools(
        self,
        registry: ToolRegistry,
        state: StreamState,
        results: List[ToolResult],
    ) -> Iterator[StreamEvent]:
        for call in state.tool_calls:
            registry.get(call.name)
        for call in state.tool_calls:
            outcome = registry.execute(call)
            results.append(outcome.result)
            yield ToolResultEvent(
                tool_result=outcome.result,
                message_id=state.message_id,
                success=outcome.success,
                error=outcome.error,
            )

    @staticmethod
    def _assistant_message(state: StreamState) -> Message:
        extra: Dict[str, Any] = {}
        if state.thinking:
            extra["thinking"] = state.thinking
        if state.metadata.get("thinking_signature"):
            extra["thinking_signature"] = state.metadata["thinking_signature"]
        if state.metadata.get("reasoning_items"):
            extra["reasoning_items"] = list(state.metadata["reasoning_items"])
        if state.citations:
            extra["citations"] = list(state.citations)
        return AssistantMessage(content=state.text, tool_calls=tuple(state.tool_calls), additional_content=extra)

    def _check_cancelled(self, provider: str) -> None:
        if self.cancellation_token is not None:
            self.cancellation_token.raise_if_cancelled(provider)


__all__ = ["MultiStepOrchestrator"]
