"""
OAuth 2.0 Device Authorization Grant (RFC 8628).

Flow:
1. request_device_code() gets a device code and a verification URL
2. The user opens the URL in a browser, logs in and clicks Authorize
3. poll_for_token() is called until it returns a token or fails
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from gitscrum_mcp.config import settings
from gitscrum_mcp.core.exceptions import DeviceAuthError, NetworkUnreachableError
from gitscrum_mcp.models.auth import AuthErrorBody, DeviceCode, TokenResponse

logger = logging.getLogger(__name__)

# Must match the OAuth client registry on the API
MCP_CLIENT_ID = "9e8d7c6b-5a4f-3e2d-1c0b-a9b8c7d6e5f4"
DEVICE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
SLOW_DOWN_INCREMENT = 5

# Polling signals, not failures
PENDING_ERRORS = ("authorization_pending", "slow_down")

AUTH_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "X-Client-Source": "mcp-server",
}


def _decode_error(response: httpx.Response) -> AuthErrorBody:
    try:
        return AuthErrorBody.model_validate(response.json())
    except (ValueError, PydanticValidationError):
        return AuthErrorBody(
            error="unknown_error",
            error_description=f"API error: {response.status_code} {response.reason_phrase}",
        )


class DeviceAuthClient:
    """Requests device codes and polls for the access token."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_url = (api_url or settings.api_url).rstrip("/")
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.timeout
        # Set when the last poll answered slow_down
        self.slow_down = False

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                return await client.post(url, json=payload, headers=AUTH_HEADERS)
            except httpx.TransportError as e:
                raise NetworkUnreachableError(url, str(e)) from e

    async def request_device_code(self) -> DeviceCode:
        """
        Start the device authorization flow.

        Returns:
            Device code information to show to the user

        Raises:
            DeviceAuthError: If the server rejects the request
            NetworkUnreachableError: If the server cannot be reached
        """
        url = f"{self.api_url}/oauth/device/code"
        response = await self._post(url, {"client_id": MCP_CLIENT_ID})

        if response.is_error:
            body = _decode_error(response)
            raise DeviceAuthError(
                body.error_description
                or f"API error: {response.status_code} {response.reason_phrase}",
                body.error,
            )

        device_code = DeviceCode.model_validate(response.json())
        logger.info(f"Device code issued, expires in {device_code.expires_in}s")
        return device_code

    async def poll_for_token(self, device_code: str) -> Optional[TokenResponse]:
        """
        Poll once for the access token.

        Returns:
            The token once the user has authorized, None while authorization
            is still pending (also on slow_down, which sets self.slow_down)

        Raises:
            DeviceAuthError: On terminal errors such as expired_token or access_denied
            NetworkUnreachableError: If the server cannot be reached
        """
        url = f"{self.api_url}/oauth/device/token"
        response = await self._post(
            url,
            {"device_code": device_code, "grant_type": DEVICE_GRANT_TYPE},
        )

        if response.is_error:
            body = _decode_error(response)
            if body.error in PENDING_ERRORS:
                self.slow_down = body.error == "slow_down"
                logger.debug(f"Device authorization still pending ({body.error})")
                return None
            raise DeviceAuthError(body.error_description or body.error, body.error)

        self.slow_down = False
        return TokenResponse.model_validate(response.json())

    async def wait_for_token(
        self,
        device_code: DeviceCode,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> TokenResponse:
        """
        Poll at the server interval until the token arrives or the code expires.

        Cancel the awaiting task to stop polling.

        Raises:
            DeviceAuthError: If the code expires or the user denies access
        """
        interval = device_code.interval or 5
        deadline = clock() + device_code.expires_in

        while clock() < deadline:
            await sleep(interval)
            token = await self.poll_for_token(device_code.device_code)
            if token is not None:
                return token
            if self.slow_down:
                interval += SLOW_DOWN_INCREMENT

        raise DeviceAuthError(
            "Authorization timed out. Please try again.", "expired_token"
        )
