"""HTTP client construction and response helpers.

Each :class:`~beeswax_client.client.BeeswaxClient` owns exactly one
``httpx.AsyncClient``; its cookie jar is the session carrier. This module
builds that client from settings and provides the small helpers shared
by the login and dispatch paths.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
}


def create_timeout(seconds: Optional[float] = None) -> httpx.Timeout:
    """Create a timeout configuration object.

    The client imposes no timeout of its own; ``None`` disables every
    httpx timeout.

    :param seconds: Timeout in seconds for connect, read, write and pool
    :type seconds: Optional[float]
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(seconds)


def create_limits(
    max_keepalive_connections: int = 10,
    max_connections: int = 20,
    keepalive_expiry: float = 30.0,
) -> httpx.Limits:
    """Create a connection limits configuration object.

    :param max_keepalive_connections: Maximum number of keepalive connections
    :type max_keepalive_connections: int
    :param max_connections: Maximum total number of connections
    :type max_connections: int
    :param keepalive_expiry: Keepalive connection expiry time in seconds
    :type keepalive_expiry: float
    :return: Configured limits object
    :rtype: httpx.Limits
    """
    return httpx.Limits(
        max_keepalive_connections=max_keepalive_connections,
        max_connections=max_connections,
        keepalive_expiry=keepalive_expiry,
    )


def create_http_client(
    settings: Settings,
    api_root: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """Build the HTTP client for one Beeswax client instance.

    :param settings: Client settings
    :type settings: Settings
    :param api_root: Optional API root overriding the settings
    :type api_root: Optional[str]
    :param transport: Optional transport (tests pass ``httpx.MockTransport``)
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param **kwargs: Additional ``httpx.AsyncClient`` options
    :return: Configured HTTP client
    :rtype: httpx.AsyncClient
    """
    base_url = (api_root or settings.beeswax_api_root).rstrip("/")
    client_config: Dict[str, Any] = {
        "base_url": base_url,
        "timeout": create_timeout(settings.http_timeout_seconds),
        "limits": create_limits(),
        "headers": dict(DEFAULT_HEADERS),
        "verify": settings.http_verify_ssl,
        "follow_redirects": True,
        **kwargs,
    }
    if transport is not None:
        client_config["transport"] = transport
    logger.debug(f"Creating HTTP client for {base_url}")
    return httpx.AsyncClient(**client_config)


def parse_body(response: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to text.

    :param response: The HTTP response
    :type response: httpx.Response
    :return: Parsed JSON, the raw text, or None for an empty body
    :rtype: Any
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
