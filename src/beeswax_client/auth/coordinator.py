"""Login coordination for the Beeswax client.

Any request may discover that the session expired. When several requests
discover it at the same time they must share one login rather than each
sending their own, so the coordinator keeps a single pending login task
that every caller awaits.
"""

import asyncio
import logging
from typing import Optional

import httpx

from ..exceptions import AuthenticationError, TransportError
from ..utils.http.client_manager import parse_body
from ..utils.security import sanitize_headers
from .session import SessionStore

logger = logging.getLogger(__name__)

LOGIN_PATH = "/rest/v2/authenticate"


class AuthCoordinator:
    """Performs logins with single-flight coalescing.

    :param session: Session store updated on successful login
    :type session: SessionStore
    :param http_client: HTTP client sharing the session's cookie jar
    :type http_client: httpx.AsyncClient
    :param keep_logged_in: Ask Beeswax for a longer lasting session
    :type keep_logged_in: bool
    :param login_path: Path of the login endpoint
    :type login_path: str
    """

    def __init__(
        self,
        session: SessionStore,
        http_client: httpx.AsyncClient,
        keep_logged_in: bool = True,
        login_path: str = LOGIN_PATH,
    ):
        self._session = session
        self._http_client = http_client
        self._keep_logged_in = keep_logged_in
        self._login_path = login_path
        self._pending: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        """Number of successful logins, read by callers to detect a renewed session."""
        return self._session.generation

    @property
    def pending(self) -> bool:
        """Whether a login is currently in flight."""
        return self._pending is not None

    async def authenticate(self) -> None:
        """Log in, or wait for the login already in flight.

        :raises AuthenticationError: If the server rejects the login
        :raises TransportError: If the login request fails at network level
        """
        if self._pending is None:
            logger.debug("Starting login")
            self._pending = asyncio.ensure_future(self._login())
        else:
            logger.debug("Login already in flight, joining it")
        # One waiter being cancelled must not cancel the shared login
        await asyncio.shield(self._pending)

    async def _login(self) -> None:
        credentials = self._session.credentials
        try:
            try:
                response = await self._http_client.post(
                    self._login_path,
                    json={
                        "email": credentials.email,
                        "password": credentials.password,
                        "keep_logged_in": self._keep_logged_in,
                    },
                )
            except httpx.TransportError as e:
                logger.error(f"Login request failed: {type(e).__name__}: {e}")
                raise TransportError(
                    f"Login request failed: {e}",
                    method="POST",
                    url=self._login_path,
                ) from e

            logger.debug(
                f"Login response {response.status_code} "
                f"headers={sanitize_headers(dict(response.headers))}"
            )
            body = parse_body(response)
            if not response.is_success:
                logger.error(f"Login rejected with status {response.status_code}")
                self._session.clear()
                raise AuthenticationError(
                    f"Login failed with status {response.status_code}",
                    status_code=response.status_code,
                    body=body,
                )
            if isinstance(body, dict) and body.get("success") is False:
                logger.error("Login rejected by Beeswax")
                self._session.clear()
                raise AuthenticationError(
                    f"Login failed: {body.get('message') or body}",
                    status_code=response.status_code,
                    body=body,
                )

            self._session.replace(response.cookies)
            logger.info(f"Authenticated to Beeswax as {credentials.email}")
        finally:
            self._pending = None

