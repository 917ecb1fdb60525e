"""Unified error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``crux_stream.base.errors_parts`` so callers have one stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, classify_status
from .errors_parts.provider_rejections import (
    ProviderOverloadedError,
    ProviderRequestError,
    RateLimitedError,
    RequestTooLargeError,
)
from .errors_parts.stream_errors import (
    AdapterConfigurationError,
    MidStreamError,
    StreamDecodeError,
    StreamingUnsupportedError,
    StreamTimeoutError,
)
from .errors_parts.tool_errors import ToolArgumentsError, ToolExecutionError, ToolNotFoundError
from .cancellation_parts.cancelled_error import CancelledError

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "classify_status",
    "RateLimitedError",
    "ProviderOverloadedError",
    "RequestTooLargeError",
    "ProviderRequestError",
    "StreamingUnsupportedError",
    "StreamDecodeError",
    "MidStreamError",
    "StreamTimeoutError",
    "AdapterConfigurationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolArgumentsError",
    "CancelledError",
]
