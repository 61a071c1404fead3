"""
HTTP Client for CLI.

Provides the async HTTP client for communicating with the Architect server.
Every request goes to {base_url}/api/{endpoint} and every failure is
normalized into an ArchitectError subclass with a human-readable message.
"""

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from architect_cli.core.config import DEFAULT_TIMEOUT, SERVER_ENV_VAR
from architect_cli.core.exceptions import (
    ArchitectError,
    ConnectionFailedError,
    InvalidResponseError,
    RequestFailedError,
    ServerError,
)
from architect_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIClient:
    """
    HTTP client for Architect server communication.

    Features:
    - Lazily built httpx.AsyncClient, reused for the whole invocation
    - reset() to rebuild the connection after a configuration change
    - Optional pydantic validation of response bodies
    - Structured logging of requests/responses

    Usage:
        client = APIClient("http://localhost:3001")
        tools = await client.get("tools", schema=list[Tool])
        result = await client.post("marketplace/install", {"id": "foo"})
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Server root URL, without the /api suffix.
            timeout: Request timeout in seconds.
            transport: Custom httpx transport (used by tests to fake the server).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._stale = False

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._stale:
            await self.close()
            self._stale = False
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def reset(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """
        Force the underlying client to be rebuilt on the next request.

        Args:
            base_url: New server root URL, if it changed.
            timeout: New request timeout, if it changed.
        """
        if base_url is not None:
            self.base_url = base_url.rstrip("/")
        if timeout is not None:
            self.timeout = timeout
        self._stale = True

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def request(
        self,
        method: str,
        endpoint: str,
        schema: Any = None,
        **kwargs: Any,
    ) -> Any:
        """
        Make an HTTP request to the server and return the decoded body.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: Path below /api (e.g., "tools", "cache")
            schema: Type to validate the body against (e.g., list[Tool]).
                The raw JSON value is returned when None.
            **kwargs: Additional arguments for httpx

        Raises:
            ConnectionFailedError: Server unreachable
            ServerError: HTTP error status
            RequestFailedError: Any other transport failure
            InvalidResponseError: Body is not JSON or does not match schema
        """
        client = await self._get_client()
        endpoint = endpoint.lstrip("/")

        log_with_source(logger, "cli", "debug", "API request", method=method, endpoint=endpoint)

        try:
            response = await client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "cli",
                "info",
                "API request failed",
                method=method,
                endpoint=endpoint,
                error=str(e),
            )
            raise self._transport_error(e) from e

        log_with_source(
            logger,
            "cli",
            "debug",
            "API response",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )

        if response.is_error:
            raise self._status_error(response)

        return self._decode(endpoint, response, schema)

    async def get(self, endpoint: str, params: dict[str, Any] | None = None, schema: Any = None) -> Any:
        """Make a GET request."""
        return await self.request("GET", endpoint, schema=schema, params=_clean(params))

    async def post(self, endpoint: str, body: dict[str, Any] | None = None, schema: Any = None) -> Any:
        """Make a POST request."""
        return await self.request("POST", endpoint, schema=schema, json=body)

    async def delete(self, endpoint: str, params: dict[str, Any] | None = None, schema: Any = None) -> Any:
        """Make a DELETE request."""
        return await self.request("DELETE", endpoint, schema=schema, params=_clean(params))

    def _transport_error(self, error: httpx.HTTPError) -> ArchitectError:
        if isinstance(error, httpx.ConnectError) or "connection reset" in str(error).lower():
            return ConnectionFailedError(
                f"Cannot connect to Architect server at {self.base_url}.\n"
                f"Make sure the server is running or set {SERVER_ENV_VAR} env variable."
            )
        detail = str(error) or type(error).__name__
        return RequestFailedError(f"Request failed: {detail}")

    @staticmethod
    def _status_error(response: httpx.Response) -> ServerError:
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message")
        if not message:
            message = response.reason_phrase or "request failed"
        return ServerError(f"Server error ({response.status_code}): {message}", response.status_code)

    @staticmethod
    def _decode(endpoint: str, response: httpx.Response, schema: Any) -> Any:
        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Invalid response from server ({endpoint}): body is not valid JSON"
            ) from e

        if schema is None:
            return data

        try:
            return TypeAdapter(schema).validate_python(data)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            raise InvalidResponseError(
                f"Invalid response from server ({endpoint}): {location}: {first['msg']}"
            ) from e


def _clean(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop parameters that were not provided."""
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}
