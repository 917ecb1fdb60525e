"""HTTP helpers shared by producers: pooled clients and error translation."""

from .client import close_all_clients, get_httpx_client
from .errors import parse_rate_limits, parse_retry_after, raise_for_provider_status

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "raise_for_provider_status",
    "parse_rate_limits",
    "parse_retry_after",
]
