"""Dispatch tables shared by the output adapters.

Each adapter declares ``handlers``: a mapping from every
:class:`StreamEventType` to the name of the method rendering it. The table is
checked when the adapter class is created, so a variant added to the event
model without a renderer fails at import time instead of being dropped from
the output.
"""
from __future__ import annotations

from typing import Any, ClassVar, Mapping

from ...errors_parts.stream_errors import AdapterConfigurationError
from ..events import StreamEvent, StreamEventType


def check_dispatch_table(adapter: str, handlers: Mapping[StreamEventType, str], owner: type) -> None:
    """Raise :class:`AdapterConfigurationError` unless ``handlers`` covers every variant."""
    missing = [t.value for t in StreamEventType if t not in handlers]
    if missing:
        raise AdapterConfigurationError(
            f"{adapter} has no handler for event type(s): {', '.join(missing)}",
            adapter=adapter,
        )
    unbound = sorted({name for name in handlers.values() if not callable(getattr(owner, name, None))})
    if unbound:
        raise AdapterConfigurationError(
            f"{adapter} maps events to undefined method(s): {', '.join(unbound)}",
            adapter=adapter,
        )


class EventDispatcher:
    """Base for adapters that render one event at a time by type."""

    handlers: ClassVar[Mapping[StreamEventType, str]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        check_dispatch_table(cls.__name__, getattr(cls, "handlers", {}), cls)

    def dispatch(self, event: StreamEvent) -> Any:
        return getattr(self, self.handlers[event.type()])(event)


__all__ = ["EventDispatcher", "check_dispatch_table"]
