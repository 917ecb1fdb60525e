"""Translate non-success provider responses into typed errors.

``raise_for_provider_status`` is called by every producer right after a
request is issued (streaming or not) and before any event is produced. It
reads the error body, extracts the provider's message, and maps the status
to the error taxonomy:

* 429 -> :class:`RateLimitedError` with ``retry-after`` and rate-limit headers
* 413 -> :class:`RequestTooLargeError`
* 529 or an ``overloaded_error`` body -> :class:`ProviderOverloadedError`
* anything else -> :class:`ProviderRequestError` with a classified code
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..errors_parts.classification import classify_status
from ..errors_parts.provider_rejections import (
    ProviderOverloadedError,
    ProviderRequestError,
    RateLimitedError,
    RequestTooLargeError,
)
from ..models_parts.rate_limit import ProviderRateLimit

# anthropic-ratelimit-requests-remaining / anthropic-ratelimit-input-tokens-reset
_PREFIXED = re.compile(r"^[a-z]+-ratelimit-(?P<name>[a-z0-9-]+?)-(?P<field>limit|remaining|reset)$")
# x-ratelimit-remaining-requests / x-ratelimit-reset-tokens
_SUFFIXED = re.compile(r"^x-ratelimit-(?P<field>limit|remaining|reset)-(?P<name>[a-z0-9-]+)$")


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_rate_limits(headers: Mapping[str, str]) -> List[ProviderRateLimit]:
    """Collect ``*ratelimit*`` headers into one :class:`ProviderRateLimit` per limit name."""
    fields: Dict[str, Dict[str, str]] = {}
    for key, value in headers.items():
        lowered = key.lower()
        match = _SUFFIXED.match(lowered) or _PREFIXED.match(lowered)
        if match is None:
            continue
        fields.setdefault(match.group("name"), {})[match.group("field")] = value
    return [
        ProviderRateLimit(
            name=name,
            limit=_to_int(values.get("limit")),
            remaining=_to_int(values.get("remaining")),
            resets_at=values.get("reset"),
        )
        for name, values in fields.items()
    ]


def parse_retry_after(headers: Mapping[str, str]) -> Optional[int]:
    return _to_int(headers.get("retry-after"))


def _error_details(response: httpx.Response) -> tuple[str, Optional[str]]:
    """Return ``(message, error_type)`` from a provider error body."""
    text = response.text
    try:
        body: Any = json.loads(text) if text else {}
    except json.JSONDecodeError:
        return (text.strip() or f"HTTP {response.status_code}", None)
    if not isinstance(body, dict):
        return (text.strip(), None)
    error = body.get("error")
    if isinstance(error, dict):
        return (str(error.get("message") or error.get("type") or text), error.get("type"))
    if isinstance(error, str):
        return (error, None)
    detail = body.get("detail") or body.get("title")
    if detail:
        return (str(detail), None)
    return (text.strip() or f"HTTP {response.status_code}", None)


def raise_for_provider_status(response: httpx.Response, *, provider: str, model: Optional[str] = None) -> None:
    """Raise the typed error matching a non-success ``response``.

    Streaming responses are read fully first so the error body is available.
    Successful responses pass through untouched.
    """
    if response.is_success:
        return
    response.read()
    status = response.status_code
    message, error_type = _error_details(response)
    if status == 429:
        raise RateLimitedError(
            message,
            provider=provider,
            model=model,
            rate_limits=parse_rate_limits(response.headers),
            retry_after=parse_retry_after(response.headers),
        )
    if status == 413:
        raise RequestTooLargeError(message, provider=provider, model=model)
    if status == 529 or error_type == "overloaded_error":
        raise ProviderOverloadedError(message, provider=provider, model=model)
    raise ProviderRequestError(
        message,
        code=classify_status(status),
        provider=provider,
        model=model,
        status_code=status,
    )


__all__ = ["raise_for_provider_status", "parse_rate_limits", "parse_retry_after"]
