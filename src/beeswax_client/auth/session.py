"""Session state shared by every request of one client.

Beeswax authenticates with a session cookie issued by the login
endpoint. The store wraps the cookie jar of the client's
``httpx.AsyncClient`` so that every request carries the current session
without any per-request plumbing.
"""

import logging
from typing import Optional

import httpx

from ..models import Credentials

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds the credentials and the current session cookies.

    The session has no known expiry. It is considered stale only when
    the server answers 401, at which point the auth coordinator logs in
    again and calls :meth:`replace`.

    :param credentials: Immutable login credentials
    :type credentials: Credentials
    :param cookies: Cookie jar to manage, usually ``http_client.cookies``
    :type cookies: Optional[httpx.Cookies]
    """

    def __init__(self, credentials: Credentials, cookies: Optional[httpx.Cookies] = None):
        self._credentials = credentials
        self._cookies = cookies if cookies is not None else httpx.Cookies()
        self._generation = 0

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def cookies(self) -> httpx.Cookies:
        """The live cookie jar shared with the HTTP client."""
        return self._cookies

    @property
    def generation(self) -> int:
        """Number of successful logins performed so far."""
        return self._generation

    @property
    def authenticated(self) -> bool:
        return self._generation > 0

    def replace(self, cookies: httpx.Cookies) -> None:
        """Replace the session with the cookies issued by a fresh login.

        The old session material is discarded, not merged.

        :param cookies: Cookies set by the login response
        :type cookies: httpx.Cookies
        """
        self._cookies.clear()
        self._cookies.update(cookies)
        self._generation += 1
        logger.debug(
            f"Session replaced (generation {self._generation}, "
            f"{len(self._cookies.jar)} cookie(s))"
        )

    def clear(self) -> None:
        """Drop all session material, e.g. after a rejected login."""
        self._cookies.clear()
