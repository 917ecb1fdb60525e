"""Non-success responses map onto the error taxonomy."""
from __future__ import annotations

import httpx
import pytest

from crux_stream.base.errors import (
    ErrorCode,
    ProviderOverloadedError,
    ProviderRequestError,
    RateLimitedError,
    RequestTooLargeError,
    classify_exception,
)
from crux_stream.base.http import get_httpx_client, parse_rate_limits, raise_for_provider_status
from crux_stream.base.http.client import close_all_clients
from crux_stream.base.http.errors import parse_retry_after


def _response(status, body=b"", headers=None):
    return httpx.Response(status, content=body, headers=headers or {}, request=httpx.Request("POST", "https://x.test"))


def test_success_passes_through():
    raise_for_provider_status(_response(200), provider="openai")


def test_rate_limit_headers_both_styles():
    headers = {
        "anthropic-ratelimit-requests-limit": "50",
        "anthropic-ratelimit-requests-remaining": "49",
        "anthropic-ratelimit-input-tokens-reset": "2025-01-01T00:00:00Z",
        "x-ratelimit-remaining-tokens": "900",
        "x-ratelimit-limit-tokens": "1000",
        "content-type": "application/json",
    }
    limits = {rl.name: rl for rl in parse_rate_limits(headers)}
    assert set(limits) == {"requests", "input-tokens", "tokens"}
    assert (limits["requests"].limit, limits["requests"].remaining) == (50, 49)
    assert limits["input-tokens"].resets_at == "2025-01-01T00:00:00Z"
    assert limits["tokens"].remaining == 900


def test_retry_after():
    assert parse_retry_after({"retry-after": "12"}) == 12
    assert parse_retry_after({"retry-after": "soon"}) is None
    assert parse_retry_after({}) is None


def test_429_raises_rate_limited():
    resp = _response(429, b'{"error": {"message": "slow"}}', {"retry-after": "3"})
    with pytest.raises(RateLimitedError) as info:
        raise_for_provider_status(resp, provider="openai", model="m")
    assert info.value.retry_after == 3
    assert info.value.retryable is True


def test_413_and_overloaded_body():
    with pytest.raises(RequestTooLargeError):
        raise_for_provider_status(_response(413, b"too big"), provider="openai")
    body = b'{"type": "error", "error": {"type": "overloaded_error", "message": "busy"}}'
    with pytest.raises(ProviderOverloadedError):
        raise_for_provider_status(_response(500, body), provider="anthropic")


@pytest.mark.parametrize(
    "status,code",
    [(400, ErrorCode.VALIDATION), (404, ErrorCode.NOT_FOUND), (503, ErrorCode.UNAVAILABLE), (599, ErrorCode.SERVER_ERROR), (418, ErrorCode.UNKNOWN)],
)
def test_other_statuses_classified(status, code):
    with pytest.raises(ProviderRequestError) as info:
        raise_for_provider_status(_response(status, b'{"detail": "nope"}'), provider="replicate")
    assert info.value.code is code
    assert info.value.message == "nope"
    assert info.value.status_code == status


def test_classify_exception_fallbacks():
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSIENT
    assert classify_exception(RuntimeError("rate limit hit")) is ErrorCode.RATE_LIMIT
    assert classify_exception(RuntimeError("weird")) is ErrorCode.UNKNOWN


def test_client_pool_reuses_and_closes():
    first = get_httpx_client("https://a.test", purpose="stream")
    assert get_httpx_client("https://a.test", purpose="stream") is first
    assert get_httpx_client("https://a.test", purpose="poll") is not first
    close_all_clients()
    assert first.is_closed
