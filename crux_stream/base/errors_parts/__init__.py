"""Errors parts package public surface.

Prefer importing from ``crux_stream.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, classify_status

__all__ = ["ErrorCode", "ProviderError", "classify_exception", "classify_status"]
