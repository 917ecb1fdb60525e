"""Shared constants for producers, the orchestrator and the adapters.

Central location to avoid scattering sentinel strings and default numbers.
"""
from __future__ import annotations

# Provider round-trips allowed per request when the caller does not say
DEFAULT_MAX_STEPS = 5

# How a stream was produced; reported as StreamStart.metadata["delivery"]
DELIVERY_PUSH = "push"
DELIVERY_JOB_STREAM = "job_stream"
DELIVERY_SIMULATED = "simulated"

# Capability names used in precondition failures
CAPABILITY_TOOLS = "tool calling"
CAPABILITY_STRUCTURED = "structured output"

# Terminator frame of the chunked data protocol
DATA_PROTOCOL_DONE = "[DONE]"

__all__ = [
    "DEFAULT_MAX_STEPS",
    "DELIVERY_PUSH",
    "DELIVERY_JOB_STREAM",
    "DELIVERY_SIMULATED",
    "CAPABILITY_TOOLS",
    "CAPABILITY_STRUCTURED",
    "DATA_PROTOCOL_DONE",
]
