"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller stop a multi-step stream between
round-trips or between poll attempts; observing a cancelled token raises
``CancelledError``. Abandoning iteration (closing the generator) needs no
token: it releases the open connection directly.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
