"""History-collecting pass-through over an event sequence.

``StreamCollector`` re-yields every event unchanged and, alongside, rebuilds
the conversation the events describe: assistant messages (text plus tool
calls) alternating with tool-result messages. When the sequence is exhausted
the history is frozen into a tuple and handed to ``on_complete`` once.
Failure or abandonment before exhaustion skips the callback.
"""
from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from ..dto.tool_call import ToolCall
from ..dto.tool_result import ToolResult
from ..models_parts.messages import AssistantMessage, Message, ToolResultMessage
from ..models_parts.text_request import TextRequest
from .events import StreamEvent, TextDeltaEvent, TextStartEvent, ToolCallEvent, ToolResultEvent

OnComplete = Callable[..., None]


class _PendingAssistant:
    def __init__(self, message_id: Optional[str]) -> None:
        self.message_id = message_id
        self.text = ""
        self.tool_calls: List[ToolCall] = []

    def freeze(self) -> AssistantMessage:
        return AssistantMessage(
            content=self.text,
            tool_calls=tuple(self.tool_calls),
            additional_content={"message_id": self.message_id} if self.message_id else {},
        )


class StreamCollector:
    """Iterate ``events`` while accumulating the message history.

    Parameters:
        events: Event sequence to wrap (consumed once).
        on_complete: Called with ``(history)`` or, when ``request`` is given,
            ``(history, request)`` after the last event.
        request: Originating request forwarded to the callback.
    """

    def __init__(
        self,
        events: Iterable[StreamEvent],
        on_complete: Optional[OnComplete] = None,
        request: Optional[TextRequest] = None,
    ) -> None:
        self._events = events
        self._on_complete = on_complete
        self._request = request
        self._messages: List[Message] = []
        self._assistant: Optional[_PendingAssistant] = None
        self._tool_results: Optional[List[ToolResult]] = None
        self._history: Optional[Tuple[Message, ...]] = None

    @property
    def history(self) -> Optional[Tuple[Message, ...]]:
        """Materialized history, available once the sequence is exhausted."""
        return self._history

    def __iter__(self) -> Iterator[StreamEvent]:
        for event in self._events:
            self._observe(event)
            yield event
        self._history = self._materialize()
        if self._on_complete is not None:
            if self._request is not None:
                self._on_complete(self._history, self._request)
            else:
                self._on_complete(self._history)

    def _observe(self, event: StreamEvent) -> None:
        if isinstance(event, TextStartEvent):
            self._close_tool_results()
            self._close_assistant()
            self._assistant = _PendingAssistant(event.message_id)
        elif isinstance(event, TextDeltaEvent):
            self._open_assistant(event.message_id).text += event.delta
        elif isinstance(event, ToolCallEvent):
            self._close_tool_results()
            self._open_assistant(event.message_id).tool_calls.append(event.tool_call)
        elif isinstance(event, ToolResultEvent):
            self._close_assistant()
            if self._tool_results is None:
                self._tool_results = []
            self._tool_results.append(event.tool_result)

    def _open_assistant(self, message_id: str) -> _PendingAssistant:
        if self._assistant is None:
            self._assistant = _PendingAssistant(message_id)
        return self._assistant

    def _close_assistant(self) -> None:
        if self._assistant is not None:
            self._messages.append(self._assistant.freeze())
            self._assistant = None

    def _close_tool_results(self) -> None:
        if self._tool_results is not None:
            self._messages.append(ToolResultMessage(tool_results=tuple(self._tool_results)))
            self._tool_results = None

    def _materialize(self) -> Tuple[Message, ...]:
        self._close_assistant()
        self._close_tool_results()
        return tuple(self._messages)


__all__ = ["StreamCollector", "OnComplete"]
