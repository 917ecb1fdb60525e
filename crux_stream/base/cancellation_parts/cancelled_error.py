"""Cancellation error type.

Raised by the orchestrator and the polling producer when a caller-supplied
:class:`CancellationToken` has been cancelled.
"""

from __future__ import annotations

from ..errors_parts.error_code import ErrorCode
from ..errors_parts.provider_error import ProviderError


class CancelledError(ProviderError):
    """Raised when an operation observes a cooperative cancellation request."""

    def __init__(self, reason: str = "operation cancelled", *, provider: str = "crux_stream") -> None:
        super().__init__(code=ErrorCode.CANCELLED, message=reason, provider=provider)
        self.reason = reason


__all__ = ["CancelledError"]
