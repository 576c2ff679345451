"""Beeswax API client.

:class:`BeeswaxClient` is the composition root: it owns the HTTP client,
the session, the login coordinator and the dispatcher, and exposes one
:class:`~beeswax_client.resources.ResourceClient` per resource type.

Examples:
    >>> async with BeeswaxClient(email="me@example.com", password="...") as bx:
    ...     result = await bx.advertisers.find(42)
    ...     if result.success:
    ...         print(result.payload)
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .auth import AuthCoordinator, SessionStore
from .config.settings import Settings
from .exceptions import ConfigurationError
from .models import Credentials, Result
from .resources import RESOURCES, ResourceClient
from .uploads import CreativeAssetUploader
from .utils.errors import ErrorClassifier, ErrorPatterns
from .utils.http import RequestDispatcher, create_http_client
from .utils.security import setup_secure_logging

logger = logging.getLogger(__name__)


class BeeswaxClient:
    """Session-authenticated client for the Beeswax REST API.

    Every resource in :data:`~beeswax_client.resources.RESOURCES` is
    available as an attribute (``client.advertisers``,
    ``client.line_items``, ...). All state lives on the instance; two
    clients never share a session.

    :param settings: Settings to read defaults from (env/.env when omitted)
    :type settings: Optional[Settings]
    :param api_root: API root URL, overrides the settings
    :type api_root: Optional[str]
    :param email: Login email, overrides the settings
    :type email: Optional[str]
    :param password: Login password, overrides the settings
    :type password: Optional[str]
    :param http_client: Pre-built HTTP client; it is not closed by
        :meth:`aclose`
    :type http_client: Optional[httpx.AsyncClient]
    :param transport: Transport for the HTTP client built here
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param error_patterns: Message patterns for edit/delete classification
    :type error_patterns: Optional[ErrorPatterns]
    :param configure_logging: Install the sanitizing log handler at
        ``settings.log_level``
    :type configure_logging: bool
    :raises ConfigurationError: If email or password is missing
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        api_root: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        error_patterns: Optional[ErrorPatterns] = None,
        configure_logging: bool = False,
    ):
        self.settings = settings or Settings()
        if configure_logging:
            setup_secure_logging(self.settings.log_level)
        self.credentials = self._resolve_credentials(email, password)

        if http_client is None:
            self._http_client = create_http_client(
                self.settings, api_root=api_root, transport=transport
            )
            self._owns_http_client = True
        else:
            self._http_client = http_client
            self._owns_http_client = False
        self.api_root = str(self._http_client.base_url).rstrip("/")

        self.session = SessionStore(self.credentials, cookies=self._http_client.cookies)
        self.auth = AuthCoordinator(
            self.session,
            self._http_client,
            keep_logged_in=self.settings.beeswax_keep_logged_in,
        )
        self.dispatcher = RequestDispatcher(self._http_client, self.auth)
        self.classifier = ErrorClassifier(error_patterns or ErrorPatterns())

        self._resources: Dict[str, ResourceClient] = {}
        for name, descriptor in RESOURCES.items():
            resource = ResourceClient(self.dispatcher, descriptor, self.classifier)
            self._resources[name] = resource
            setattr(self, name, resource)

        self.creative_assets = CreativeAssetUploader(self.dispatcher)
        logger.debug(f"Beeswax client ready for {self.api_root}")

    def _resolve_credentials(
        self, email: Optional[str], password: Optional[str]
    ) -> Credentials:
        if email is None and password is None:
            return self.settings.credentials()
        merged = self.settings.model_copy(
            update={
                "beeswax_email": email if email is not None else self.settings.beeswax_email,
                "beeswax_password": password
                if password is not None
                else self.settings.beeswax_password,
            }
        )
        return merged.credentials()

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    def resource(self, name: str) -> ResourceClient:
        """Return the resource client registered under ``name``.

        :raises ConfigurationError: If no resource has that name
        """
        try:
            return self._resources[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown resource '{name}'. Available: {', '.join(self._resources)}",
                setting="resource",
            ) from None

    async def authenticate(self) -> None:
        """Log in now instead of waiting for the first 401."""
        await self.auth.authenticate()

    async def request(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None
    ) -> Result:
        """Send a request to an endpoint not covered by the registry.

        :return: Successful result wrapping the response body
        :rtype: Result
        """
        return Result.ok(await self.dispatcher.dispatch(method, path, body))

    async def upload_creative_asset(
        self, source_url: Optional[str] = None, **params: Any
    ) -> Dict[str, Any]:
        """Upload a remote file as a creative asset.

        See :class:`~beeswax_client.uploads.CreativeAssetUploader`.
        """
        return await self.creative_assets.upload(source_url, **params)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "BeeswaxClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
