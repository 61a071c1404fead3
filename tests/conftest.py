"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

The Architect server is faked with httpx.MockTransport: tests register
canned responses on a FakeServer, build an APIClient around it, and hand
the resulting CliState to the CLI through the Typer context object.
"""

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from click.testing import Result
from typer.testing import CliRunner

from architect_cli.cli.client import APIClient
from architect_cli.cli.main import app
from architect_cli.cli.state import CliState
from architect_cli.core.config import CliConfig
from architect_cli.core.logging import setup_logging

TEST_SERVER_URL = "http://architect.test"


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the developer's ARCHITECT_* variables and config file out of tests."""
    for var in ("ARCHITECT_SERVER", "ARCHITECT_TIMEOUT", "ARCHITECT_CONFIG", "ARCHITECT_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Start quiet, and drop handlers bound to a CliRunner stream once the test is over."""
    setup_logging(enable_console=False)
    yield
    setup_logging(enable_console=False)


# =============================================================================
# Fake server
# =============================================================================


class FakeServer:
    """
    Canned responses keyed by (method, path).

    Usage:
        fake_server.add("GET", "tools", json=[...])
        fake_server.add("GET", "overview", error=httpx.ConnectError("refused"))
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        status: int = 200,
        error: Exception | None = None,
        content: bytes | None = None,
    ) -> None:
        self.routes[(method.upper(), f"/api/{endpoint}")] = (status, json, error, content)

    def refuse_all(self) -> None:
        """Make every request fail as if nothing were listening."""
        self.routes = {}
        self.add("*", "*", error=httpx.ConnectError("[Errno 111] Connection refused"))

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path)) or self.routes.get(("*", "/api/*"))
        if route is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})
        status, body, error, content = route
        if error is not None:
            raise error
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=body)


@pytest.fixture
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def api_client(fake_server: FakeServer) -> APIClient:
    """APIClient whose requests are answered by fake_server."""
    return APIClient(TEST_SERVER_URL, transport=httpx.MockTransport(fake_server.handler))


@pytest.fixture
def cli_state(api_client: APIClient) -> CliState:
    return CliState(config=CliConfig(server_url=TEST_SERVER_URL), client=api_client)


@pytest.fixture
def invoke(cli_state: CliState) -> Callable[..., Result]:
    """Run the CLI against the fake server: invoke("tools", "list")."""
    runner = CliRunner()

    def _invoke(*args: str) -> Result:
        return runner.invoke(app, list(args), obj=cli_state)

    return _invoke


# =============================================================================
# Sample payloads
# =============================================================================


@pytest.fixture
def sample_tools() -> list[dict[str, Any]]:
    return [
        {
            "name": "weather",
            "description": "Current weather for a city",
            "version": 3,
            "active": True,
            "category": "web",
            "tags": ["http", "api"],
            "capabilities": [{"type": "network"}],
            "createdAt": "2024-05-01T10:00:00Z",
            "updatedAt": "2024-05-02T10:00:00Z",
            "code": "export default async () => fetch(url)",
            "rateLimit": {"maxCallsPerMinute": 10, "maxCallsPerHour": 100},
            "dependencies": ["node-fetch"],
            "author": "alice",
        },
        {
            "name": "scraper",
            "description": "Scrape a page",
            "version": 1,
            "active": False,
            "category": "web",
            "tags": ["http"],
            "createdAt": "2024-05-01T10:00:00Z",
            "updatedAt": "2024-05-01T10:00:00Z",
        },
        {
            "name": "calc",
            "description": "Arithmetic",
            "version": 2,
            "active": True,
            "category": "math",
            "tags": ["api"],
            "createdAt": "2024-05-01T10:00:00Z",
            "updatedAt": "2024-05-01T10:00:00Z",
        },
    ]


@pytest.fixture
def sample_entries() -> list[dict[str, Any]]:
    return [
        {
            "id": "weather",
            "name": "weather",
            "description": "Current weather for a city",
            "author": "alice",
            "version": "1.2.0",
            "category": "web",
            "tags": ["http"],
            "exportedAt": "2024-05-01T10:00:00Z",
            "owner_login": "octo",
        },
    ]
