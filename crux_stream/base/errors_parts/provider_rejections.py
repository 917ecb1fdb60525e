"""Typed errors for requests the provider refused.

These are produced by :func:`crux_stream.base.http.errors.raise_for_provider_status`
from the transport's error response and keep whatever retry or limit metadata
the provider supplied.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError
from ..models_parts.rate_limit import ProviderRateLimit


class RateLimitedError(ProviderError):
    """HTTP 429 (or equivalent): the provider throttled the request."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: Optional[str] = None,
        rate_limits: Iterable[ProviderRateLimit] = (),
        retry_after: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMIT,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
            raw=raw,
        )
        self.rate_limits: List[ProviderRateLimit] = list(rate_limits)
        self.retry_after = retry_after


class ProviderOverloadedError(ProviderError):
    """The provider is temporarily over capacity."""

    def __init__(self, message: str = "provider overloaded", *, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.OVERLOADED,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
        )


class RequestTooLargeError(ProviderError):
    """The request payload exceeded the provider's size limit."""

    def __init__(self, message: str = "request too large", *, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            message=message,
            provider=provider,
            model=model,
        )


class ProviderRequestError(ProviderError):
    """Any other non-success response; ``status_code`` keeps the HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        provider: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=code in (ErrorCode.TRANSIENT, ErrorCode.UNAVAILABLE, ErrorCode.TIMEOUT),
            raw=raw,
        )
        self.status_code = status_code


__all__ = [
    "RateLimitedError",
    "ProviderOverloadedError",
    "RequestTooLargeError",
    "ProviderRequestError",
]
