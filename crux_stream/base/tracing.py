"""Thin tracing facade over the OpenTelemetry API.

Without a configured SDK the OpenTelemetry API hands out non-recording spans,
so call sites can always open spans without checking for an exporter.
"""
from __future__ import annotations

from opentelemetry import trace

SERVICE_NAME = "crux_stream"


def get_tracer(service_name: str = SERVICE_NAME) -> trace.Tracer:
    return trace.get_tracer(service_name)


def start_span(name: str, *, service_name: str = SERVICE_NAME):
    """Start and return a span context manager.

    Usage::

        with start_span("crux_stream.round") as span:
            span.set_attribute("provider", "anthropic")
    """
    return get_tracer(service_name).start_as_current_span(name)


__all__ = ["get_tracer", "start_span", "SERVICE_NAME"]
