"""Request dispatch with transparent re-authentication.

Every call to the Beeswax API goes through :class:`RequestDispatcher`.
It sends one logical operation, logs in again when the session has
expired, and turns the different ways Beeswax reports failure into
exceptions from :mod:`beeswax_client.exceptions`:

- 401: log in (sharing any login already in flight) and resend once;
  when a login completed after the request was sent, only resend
- other non-2xx: :class:`~beeswax_client.exceptions.StatusCodeError`
- 2xx with ``success: false``: :class:`~beeswax_client.exceptions.ApplicationError`
- no response at all: :class:`~beeswax_client.exceptions.TransportError`

Errors carry the status code and the parsed body, never the
``httpx.Response`` itself.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from ...exceptions import ApplicationError, StatusCodeError, TransportError
from ..security import safe_log_dict, sanitize_headers
from .client_manager import parse_body

if TYPE_CHECKING:
    from ...auth.coordinator import AuthCoordinator

logger = logging.getLogger(__name__)

# Methods whose body is sent as JSON; GET filters go in the query string
_JSON_BODY_METHODS = {"POST", "PUT", "PATCH"}


class RequestDispatcher:
    """Sends requests on behalf of one client instance.

    :param http_client: HTTP client carrying the session cookies
    :type http_client: httpx.AsyncClient
    :param auth: Coordinator used when the session has expired
    :type auth: AuthCoordinator
    """

    def __init__(self, http_client: httpx.AsyncClient, auth: "AuthCoordinator"):
        self._http_client = http_client
        self._auth = auth

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    async def dispatch(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one logical request and return the parsed response body.

        :param method: HTTP method
        :type method: str
        :param path: Path relative to the API root, or an absolute URL
        :type path: str
        :param body: JSON body for POST/PUT/PATCH; query filters for GET
        :type body: Optional[Dict[str, Any]]
        :param params: Explicit query parameters
        :type params: Optional[Dict[str, Any]]
        :param files: Multipart files; content must be re-readable bytes
        :type files: Optional[Dict[str, Any]]
        :return: Parsed JSON body, text, or None for an empty body
        :rtype: Any
        :raises StatusCodeError: For non-2xx responses, including a 401
            that persists after logging in again
        :raises ApplicationError: For 2xx responses declaring ``success: false``
        :raises TransportError: When no response was received
        :raises AuthenticationError: When logging in again fails
        """
        method = method.upper()
        request_kwargs = self._build_request_kwargs(method, body, params, files)

        generation = self._auth.generation
        response = await self._send(method, path, request_kwargs)
        if response.status_code == 401:
            if self._auth.generation == generation:
                logger.info(f"Session expired on {method} {path}, authenticating")
                await self._auth.authenticate()
            else:
                # Another request logged in after this one was sent
                logger.debug(f"Session renewed since {method} {path} was sent, resending")
            response = await self._send(method, path, request_kwargs)

        data = parse_body(response)
        url = str(response.request.url)

        if not response.is_success:
            logger.debug(f"{method} {path} failed with status {response.status_code}")
            raise StatusCodeError(
                response.status_code, error=data, method=method, url=url
            )

        if isinstance(data, dict) and data.get("success") is False:
            logger.debug(f"{method} {path} returned success=false")
            raise ApplicationError(data, method=method, url=url)

        return data

    @staticmethod
    def _build_request_kwargs(
        method: str,
        body: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
        files: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        request_kwargs: Dict[str, Any] = {}
        query: Dict[str, Any] = {}
        if body and method not in _JSON_BODY_METHODS:
            query.update(body)
        if params:
            query.update(params)
        if query:
            request_kwargs["params"] = query
        if files is not None:
            request_kwargs["files"] = files
            if body and method in _JSON_BODY_METHODS:
                request_kwargs["data"] = body
        elif method in _JSON_BODY_METHODS:
            request_kwargs["json"] = body if body is not None else {}
        return request_kwargs

    async def _send(
        self, method: str, path: str, request_kwargs: Dict[str, Any]
    ) -> httpx.Response:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"=== SEND: {method} {path} "
                f"params={safe_log_dict(request_kwargs.get('params'))} "
                f"json={safe_log_dict(request_kwargs.get('json'))}"
            )
        try:
            response = await self._http_client.request(method, path, **request_kwargs)
        except httpx.TransportError as e:
            logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise TransportError(
                f"{method} {path} failed: {e}", method=method, url=path
            ) from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"=== RECV: {method} {path} -> {response.status_code} "
                f"headers={sanitize_headers(dict(response.headers))}"
            )
        return response
