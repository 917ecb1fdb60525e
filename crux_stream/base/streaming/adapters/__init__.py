"""Output adapters turning an event sequence into a transport artifact."""

from .broadcast import BroadcastAdapter, Broadcaster, InMemoryBroadcaster, RedisBroadcaster, StreamEventBroadcast
from .data_protocol import DATA_PROTOCOL_HEADERS, DataProtocolAdapter
from .dispatch import EventDispatcher, check_dispatch_table
from .event_stream import EVENT_STREAM_HEADERS, EventStreamAdapter

__all__ = [
    "BroadcastAdapter",
    "Broadcaster",
    "InMemoryBroadcaster",
    "RedisBroadcaster",
    "StreamEventBroadcast",
    "DATA_PROTOCOL_HEADERS",
    "DataProtocolAdapter",
    "EventDispatcher",
    "check_dispatch_table",
    "EVENT_STREAM_HEADERS",
    "EventStreamAdapter",
]
