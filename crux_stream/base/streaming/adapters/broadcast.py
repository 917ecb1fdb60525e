"""Broadcast renderer: publish each event as a notification on named channels.

There is no transport framing here. Every event is wrapped once in a
:class:`StreamEventBroadcast` and the same instance is handed to the
broadcaster for all channels. Two broadcasters ship with the package:

* :class:`InMemoryBroadcaster` keeps notifications in memory and fans them out
  to local subscribers (tests, single-process apps).
* :class:`RedisBroadcaster` publishes ``{"event", "data"}`` JSON messages via
  Redis pub/sub on an injected ``redis.Redis`` client.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import redis

from ...logging import get_logger, log_event
from ..events import StreamEvent, StreamEventType
from .dispatch import EventDispatcher

_logger = get_logger("crux_stream.broadcast")


class StreamEventBroadcast:
    """Notification wrapping one event for a set of channels."""

    def __init__(self, event: StreamEvent, channels: Sequence[str]) -> None:
        self.event = event
        self.channels: Tuple[str, ...] = tuple(channels)

    def broadcast_on(self) -> List[str]:
        return list(self.channels)

    def broadcast_as(self) -> str:
        return self.event.event_key()

    def broadcast_with(self) -> Dict[str, Any]:
        return self.event.to_dict()


@runtime_checkable
class Broadcaster(Protocol):
    def publish(self, notification: StreamEventBroadcast) -> None: ...


Subscriber = Callable[[str, StreamEventBroadcast], None]


class InMemoryBroadcaster:
    """Record published notifications and deliver them to subscribers.

    ``published`` keeps ``(channel, notification)`` pairs in publish order.
    """

    def __init__(self) -> None:
        self.published: List[Tuple[str, StreamEventBroadcast]] = []
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, channel: str, callback: Subscriber) -> None:
        self._subscribers.setdefault(channel, []).append(callback)

    def publish(self, notification: StreamEventBroadcast) -> None:
        for channel in notification.broadcast_on():
            self.published.append((channel, notification))
            for callback in self._subscribers.get(channel, []):
                callback(channel, notification)

    def notifications(self, channel: str) -> List[StreamEventBroadcast]:
        return [n for c, n in self.published if c == channel]


class RedisBroadcaster:
    """Publish notifications through Redis pub/sub."""

    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisBroadcaster":
        return cls(redis.Redis.from_url(url))

    def publish(self, notification: StreamEventBroadcast) -> None:
        message = json.dumps(
            {"event": notification.broadcast_as(), "data": notification.broadcast_with()},
            default=str,
        )
        for channel in notification.broadcast_on():
            try:
                self._client.publish(channel, message)
            except Exception as exc:
                log_event(_logger, "broadcast.publish_failed", channel=channel, error=str(exc))
                raise


class BroadcastAdapter(EventDispatcher):
    """Publish every event of a sequence to ``channels``."""

    handlers = {event_type: "notification" for event_type in StreamEventType}

    def __init__(self, channels: Union[str, Sequence[str]], broadcaster: Optional[Broadcaster] = None) -> None:
        self.channels: Tuple[str, ...] = (channels,) if isinstance(channels, str) else tuple(channels)
        self.broadcaster: Broadcaster = broadcaster or InMemoryBroadcaster()

    def notification(self, event: StreamEvent) -> StreamEventBroadcast:
        return StreamEventBroadcast(event, self.channels)

    def __call__(self, events: Iterable[StreamEvent]) -> int:
        """Publish all events; returns how many were published."""
        count = 0
        for event in events:
            self.broadcaster.publish(self.dispatch(event))
            count += 1
        return count


__all__ = [
    "StreamEventBroadcast",
    "Broadcaster",
    "InMemoryBroadcaster",
    "RedisBroadcaster",
    "BroadcastAdapter",
]
