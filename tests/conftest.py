import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
import pytest_asyncio

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from beeswax_client import BeeswaxClient  # noqa: E402
from beeswax_client.auth import LOGIN_PATH  # noqa: E402

API_ROOT = "https://bx.example.com"

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    # Add custom markers for test organization
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "auth: mark test as testing authentication"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set required environment variables for tests.

    This fixture automatically sets up the minimum required environment
    variables needed for the Settings class to initialize properly during tests.
    """
    monkeypatch.setenv("BEESWAX_API_ROOT", API_ROOT)
    monkeypatch.setenv("BEESWAX_EMAIL", "test@example.com")
    monkeypatch.setenv("BEESWAX_PASSWORD", "test-password")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.delenv("HTTP_TIMEOUT_SECONDS", raising=False)
    yield


class FakeBeeswax:
    """Scriptable stand-in for the Beeswax API behind ``httpx.MockTransport``.

    Routes are queues keyed by ``(method, path)``; the last reply of a
    queue is repeated. With ``require_session`` every non-login request
    without a currently valid ``sessionid`` cookie gets a 401. With
    ``single_session`` a login invalidates every earlier session.
    """

    def __init__(
        self,
        require_session: bool = False,
        login_delay: float = 0.0,
        single_session: bool = False,
    ):
        self.require_session = require_session
        self.single_session = single_session
        self.login_delay = login_delay
        self.requests: List[httpx.Request] = []
        self.login_bodies: List[Dict[str, Any]] = []
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.valid_sessions: set = set()
        self.login_replies: List[Reply] = []
        self.delays: Dict[Tuple[str, str], List[float]] = {}

    # -- scripting -----------------------------------------------------
    def add(self, method: str, path: str, *replies: Reply) -> "FakeBeeswax":
        self.routes.setdefault((method.upper(), path), []).extend(replies)
        return self

    def delay(self, method: str, path: str, *seconds: float) -> None:
        """Hold back the next requests to a route before answering them."""
        self.delays.setdefault((method.upper(), path), []).extend(seconds)

    def reject_login(self, reply: Reply) -> None:
        self.login_replies.append(reply)

    def expire_sessions(self) -> None:
        self.valid_sessions.clear()

    # -- inspection ----------------------------------------------------
    @property
    def login_count(self) -> int:
        return len(self.login_bodies)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper() and r.url.path == path
        ]

    def api_calls(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path != LOGIN_PATH]

    # -- transport -----------------------------------------------------
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0)
        self.requests.append(request)
        pending_delays = self.delays.get((request.method, request.url.path))
        if pending_delays:
            await asyncio.sleep(pending_delays.pop(0))

        if request.url.path == LOGIN_PATH:
            return await self._login(request)

        if self.require_session and self._session_of(request) not in self.valid_sessions:
            return httpx.Response(401, json={"detail": "Authentication required"})

        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"detail": "no route"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        response = reply(request) if callable(reply) else reply
        if not isinstance(response, httpx.Response):
            response = httpx.Response(200, json=response)
        return response

    async def _login(self, request: httpx.Request) -> httpx.Response:
        self.login_bodies.append(json.loads(request.content or b"{}"))
        if self.login_delay:
            await asyncio.sleep(self.login_delay)
        if self.login_replies:
            reply = self.login_replies.pop(0)
            return reply(request) if callable(reply) else reply
        session_id = f"s{self.login_count}"
        if self.single_session:
            self.valid_sessions.clear()
        self.valid_sessions.add(session_id)
        return httpx.Response(
            200,
            json={"success": True, "message": "Authenticated"},
            headers=[("set-cookie", f"sessionid={session_id}; Path=/")],
        )

    @staticmethod
    def _session_of(request: httpx.Request) -> Optional[str]:
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name == "sessionid":
                return value
        return None


@pytest.fixture
def fake_beeswax():
    """Fake Beeswax server without session enforcement."""
    return FakeBeeswax()


@pytest_asyncio.fixture
async def bx(fake_beeswax):
    """Client wired to the fake server."""
    client = BeeswaxClient(transport=fake_beeswax.transport())
    yield client
    await client.aclose()


def page(n: int, start: int = 0, id_field: str = "advertiser_id") -> Dict[str, Any]:
    """Build a Beeswax list body with ``n`` records."""
    return {
        "success": True,
        "payload": [{id_field: start + i} for i in range(n)],
    }
