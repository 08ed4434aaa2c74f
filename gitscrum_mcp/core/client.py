"""HTTP client for the GitScrum REST API."""

import logging
from typing import Any, Optional

import httpx

from gitscrum_mcp.config import settings
from gitscrum_mcp.core.exceptions import (
    APIError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NetworkUnreachableError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnprocessableError,
)
from gitscrum_mcp.core.token_store import TokenStore

logger = logging.getLogger(__name__)

CLIENT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "X-Client-Type": "mcp",
    "X-Client-Source": "mcp-server",
}


def build_query_params(params: Optional[dict[str, Any]]) -> dict[str, str]:
    """
    Drop None values and render the rest the way the API expects.

    Booleans become 'true'/'false', lists become comma separated values.
    """
    if not params:
        return {}

    result = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            result[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            result[key] = ",".join(str(v) for v in value)
        else:
            result[key] = str(value)
    return result


class GitScrumClient:
    """Async client for the GitScrum API with bearer token authentication."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.token_store = token_store or TokenStore()
        self.token = token if token is not None else (self.token_store.get_token() or "")
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.timeout
        self._client: Optional[httpx.AsyncClient] = None

        if not self.token:
            logger.warning(
                "No authentication token found. Use the auth_login tool to authenticate."
            )

    async def __aenter__(self) -> "GitScrumClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def set_token(self, token: str) -> None:
        self.token = token

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", **CLIENT_HEADERS}

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Make an authenticated request.

        Args:
            method: HTTP method
            endpoint: Path relative to the API base URL
            params: Query parameters, None values are dropped
            json: JSON body

        Returns:
            Decoded JSON body, {} for empty responses

        Raises:
            APIError: Subclass matching the response status
            NetworkUnreachableError: If the server cannot be reached
        """
        if self._client is None:
            raise RuntimeError("GitScrumClient must be used as an async context manager")

        path = "/" + endpoint.lstrip("/")
        query = build_query_params(params)
        logger.debug(f"{method} {path} params={query}")

        try:
            response = await self._client.request(
                method,
                path,
                params=query or None,
                json=json,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            raise NetworkUnreachableError(f"{self.base_url}{path}", str(e)) from e

        if response.is_error:
            raise self._error_from_response(response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Invalid JSON response from API: {e}", response.status_code
            ) from e

    def _error_from_response(self, response: httpx.Response) -> APIError:
        """Map an error response to the matching exception."""
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or f"API Error: {status}"

        logger.debug(f"API error {status}: {message}")

        if status == 400:
            return BadRequestError(f"Invalid request: {message}", status)
        if status == 401:
            return UnauthorizedError(
                "Session expired. Authentication required. Use login to reconnect.",
                status,
            )
        if status == 403:
            return ForbiddenError(f"Access denied: {message}", status)
        if status == 404:
            return NotFoundError("Resource not found or was deleted.", status)
        if status == 409:
            return ConflictError(f"Conflict: {message}", status)
        if status == 422:
            return UnprocessableError(message, body.get("errors"))
        if status == 429:
            return RateLimitedError(
                "MCP rate limit exceeded",
                limit=response.headers.get("X-MCP-RateLimit-Limit"),
                remaining=response.headers.get("X-MCP-RateLimit-Remaining"),
                reset=response.headers.get("X-MCP-RateLimit-Reset"),
                upgrade_url=settings.upgrade_url,
            )
        if status >= 500:
            return ServerError(f"Server error: {message}", status)
        return APIError(message, status)

    async def get(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.request("POST", endpoint, params=params, json=data)

    async def put(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        return await self.request("PUT", endpoint, params=params, json=data)

    async def delete(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", endpoint, params=params)

    async def logout(self) -> None:
        """Invalidate the token server side. Remote failures are ignored."""
        if self.token:
            try:
                await self.post("auth/logout", {})
            except (APIError, NetworkUnreachableError) as e:
                logger.info(f"Ignoring logout failure: {e}")
        self.token = ""


def unwrap_data(response: Any, default: Any = None) -> Any:
    """Return the 'data' member of an API envelope, or default when absent."""
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return default
