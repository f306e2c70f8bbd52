"""HTTP transport shared by the reservation and payment API clients.

Wraps httpx.AsyncClient with the backend's conventions:
- Bearer token from the session, checked for expiry before each request
- JSON request/response bodies
- Error bodies of the form {"success": false, "message": "..."}

Failures are raised as ApiError carrying a user-facing message; the API
clients turn them into result objects.
"""

import logging
from typing import Any, Callable

import httpx

from bodima.config import ClientSettings
from bodima.utils.jwt import is_token_expired

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]
UnauthorizedHook = Callable[[], None]

UNAUTHORIZED_MESSAGE = "Unauthorized - please sign in again"
TIMEOUT_MESSAGE = "Request timed out - please check your connection"
DECODE_MESSAGE = "Failed to decode response"
CLIENT_ERROR_MESSAGE = "Client error occurred"
SERVER_ERROR_MESSAGE = "Server error occurred"
UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    """Raised when a backend call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with message and optional HTTP status.

        Args:
            message: Human-readable error message.
            status_code: HTTP status if a response was received.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Pull the backend's ``message`` out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class ApiClient:
    """Async JSON client for the Bodima backend.

    Usage:
        async with ApiClient(settings, token_provider=session.auth_token) as api:
            body = await api.post("/reservations", json=payload)
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        token_provider: TokenProvider | None = None,
        on_unauthorized: UnauthorizedHook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            settings: Client settings (base URL, timeout)
            token_provider: Returns the current auth token, if any
            on_unauthorized: Called when the token is expired or rejected
            transport: Custom httpx transport (mock or ASGI in tests)
        """
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _handle_unauthorized(self) -> None:
        if self._on_unauthorized is not None:
            self._on_unauthorized()

    def _auth_headers(self) -> dict[str, str]:
        if self._token_provider is None:
            return {}
        token = self._token_provider()
        if not token:
            return {}
        if is_token_expired(token):
            logger.info("Auth token expired; forcing sign out")
            self._handle_unauthorized()
            raise ApiError(UNAUTHORIZED_MESSAGE, status_code=401)
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: Optional JSON body

        Returns:
            Decoded JSON object.

        Raises:
            ApiError: On transport failure, non-2xx status or bad body.
        """
        headers = self._auth_headers()
        logger.debug("%s %s", method, path)

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise ApiError(TIMEOUT_MESSAGE) from e
        except httpx.HTTPError as e:
            raise ApiError(f"Network error: {e}") from e

        status = response.status_code
        logger.debug("%s %s -> %d", method, path, status)

        if 200 <= status < 300:
            try:
                body = response.json()
            except ValueError as e:
                raise ApiError(DECODE_MESSAGE, status_code=status) from e
            if not isinstance(body, dict):
                raise ApiError(DECODE_MESSAGE, status_code=status)
            return body

        if status == 401:
            self._handle_unauthorized()
            raise ApiError(UNAUTHORIZED_MESSAGE, status_code=status)
        if 400 <= status < 500:
            raise ApiError(_error_message(response, CLIENT_ERROR_MESSAGE), status_code=status)
        if 500 <= status < 600:
            raise ApiError(_error_message(response, SERVER_ERROR_MESSAGE), status_code=status)
        raise ApiError(UNKNOWN_ERROR_MESSAGE, status_code=status)

    async def get(self, path: str) -> dict[str, Any]:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> dict[str, Any]:
        return await self.request("PUT", path, json=json)
