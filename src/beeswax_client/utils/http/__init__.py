"""HTTP utilities public API (barrel module).

This package provides:
- HTTP client construction (timeouts, limits, base URL)
- Response body parsing
- The request dispatcher with transparent re-authentication

Recommended import pattern for consumers:
    from beeswax_client.utils.http import RequestDispatcher, create_http_client
"""

from .client_manager import (
    create_http_client,
    create_limits,
    create_timeout,
    parse_body,
)
from .dispatcher import RequestDispatcher

__all__ = [
    "create_http_client",
    "create_limits",
    "create_timeout",
    "parse_body",
    "RequestDispatcher",
]
