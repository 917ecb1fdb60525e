"""Errors raised while a stream is being set up or consumed."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class StreamingUnsupportedError(ProviderError):
    """The request combines streaming with a capability the provider cannot stream.

    Raised by a producer's precondition check, before any event is produced.
    """

    def __init__(self, capability: str, *, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED,
            message=f"{capability} is not supported while streaming with {provider}",
            provider=provider,
            model=model,
        )
        self.capability = capability


class StreamDecodeError(ProviderError):
    """A wire frame could not be decoded."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: Optional[str] = None,
        frame: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=message,
            provider=provider,
            model=model,
            raw=raw,
        )
        self.frame = frame


class MidStreamError(ProviderError):
    """The provider sent an explicit error frame after streaming began."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: Optional[str] = None,
        error_type: str = "error",
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.SERVER_ERROR,
            message=message,
            provider=provider,
            model=model,
        )
        self.error_type = error_type
        self.data = dict(data or {})


class StreamTimeoutError(ProviderError):
    """A polled job did not reach a terminal status within the wait budget."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: Optional[str] = None,
        waited_seconds: Optional[float] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TIMEOUT,
            message=message,
            provider=provider,
            model=model,
        )
        self.waited_seconds = waited_seconds


class AdapterConfigurationError(ProviderError):
    """An output adapter does not cover every event variant."""

    def __init__(self, message: str, *, adapter: str) -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message, provider=adapter)


__all__ = [
    "StreamingUnsupportedError",
    "StreamDecodeError",
    "MidStreamError",
    "StreamTimeoutError",
    "AdapterConfigurationError",
]
