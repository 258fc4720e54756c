"""API client for Tempus."""

import asyncio
from typing import Any

import httpx

from tempus_cli.exceptions import AuthError, NetworkError, ServerError
from tempus_cli.services.auth_service import IdentityProvider, StoredCredentialsIdentity
from tempus_cli.services.config_service import ConfigService, get_config_service
from tempus_cli.utils.logger import get_logger

DEFAULT_ERROR_MESSAGE = "Request failed"


def error_message(response: httpx.Response, fallback: str) -> str:
    """The server's ``message`` field, verbatim, or ``fallback``."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return fallback


class APIClient:
    """HTTP client for the Tempus API.

    Every request carries ``Authorization: Bearer <token>`` from the identity
    provider. Without a token the request is never sent.
    """

    def __init__(
        self,
        identity: IdentityProvider | None = None,
        config_service: ConfigService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config_manager = config_service or get_config_service()
        self.config = self.config_manager.config
        self.identity = identity or StoredCredentialsIdentity(self.config_manager)
        self.base_url = self.config.api.endpoint.rstrip("/")
        self.timeout = self.config.api.timeout
        self.retry = self.config.api.retry
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.logger = get_logger("api")

    async def __aenter__(self) -> "APIClient":
        """Enter the async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the async context manager and ensure the client is closed."""
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        token = self.identity.get_token()
        if not token:
            raise AuthError("No auth token available")

        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        fallback_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> httpx.Response:
        """Make an HTTP request to the API.

        Raises:
            AuthError: No token, or the server answered 401
            NetworkError: No response was received
            ServerError: Any other non-2xx response
        """
        # Token check comes first so an unauthenticated call never hits the network
        headers = self._get_headers()
        client = await self._get_client()
        url = f"{path}" if path.startswith("/") else f"/{path}"

        for attempt in range(self.retry + 1):
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    headers=headers,
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                message = error_message(e.response, fallback_message)
                status = e.response.status_code
                self.logger.warning("%s %s -> %s: %s", method, url, status, message)
                if status == 401:
                    raise AuthError(message) from e
                raise ServerError(message, status_code=status) from e
            except httpx.ConnectError as e:
                # Never reached the server, so even a POST is safe to resend
                self.logger.warning("%s %s failed: %s", method, url, e)
                if attempt >= self.retry:
                    raise NetworkError(f"{fallback_message}: {e}") from e
            except httpx.RequestError as e:
                self.logger.warning("%s %s failed: %s", method, url, e)
                raise NetworkError(f"{fallback_message}: {e}") from e

            # Wait before retry (simple exponential backoff)
            await asyncio.sleep(2**attempt)

        raise NetworkError(fallback_message)

    async def get(self, path: str, *, params: dict[str, Any] | None = None, **kwargs) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, *, json: dict[str, Any] | None = None, **kwargs) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json, **kwargs)

    async def patch(self, path: str, *, json: dict[str, Any] | None = None, **kwargs) -> httpx.Response:
        """Make a PATCH request."""
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path, **kwargs)
