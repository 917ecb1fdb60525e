"""Event implementations; import from ``crux_stream.base.streaming.events``."""
