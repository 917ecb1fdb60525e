"""Value objects; import from ``crux_stream.base.models`` for the stable surface."""
