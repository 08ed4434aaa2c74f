"""Authentication tools using the device authorization flow."""

import logging
from typing import Any

from mcp.types import CallToolResult, TextContent, Tool

from gitscrum_mcp.core.exceptions import (
    DeviceAuthError,
    GitScrumMCPError,
    NetworkUnreachableError,
    UnauthorizedError,
)
from gitscrum_mcp.tools.dispatcher import ToolContext, execute_action, to_json
from gitscrum_mcp.tools.registry import ToolModule

logger = logging.getLogger(__name__)

LOGIN_INSTRUCTIONS = [
    "Open the verification URL in your browser",
    "Sign in with Google, GitHub, or email",
    "Click Authorize",
    "After authorizing, call auth_complete",
]

LOGIN_OPTIONS = [
    "Run auth_login to authenticate via browser",
    "Set GITSCRUM_TOKEN environment variable",
]

TOOLS = [
    Tool(
        name="auth_login",
        description="Start login. Returns URL and code for browser authorization.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="auth_complete",
        description=(
            "Complete login after browser authorization. "
            "Uses the code saved by auth_login when device_code is omitted."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "device_code": {
                    "type": "string",
                    "description": "The device_code returned from auth_login",
                },
            },
        },
    ),
    Tool(
        name="auth_status",
        description="Check authentication status.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="auth_logout",
        description="Logout and clear token.",
        inputSchema={"type": "object", "properties": {}},
    ),
]


def _payload(data: dict[str, Any], is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=to_json(data))],
        isError=is_error,
    )


def _login_error_type(exc: GitScrumMCPError) -> str:
    message = exc.message.lower()
    if isinstance(exc, UnauthorizedError) or "401" in message or "unauthorized" in message:
        return "unauthorized"
    if "timeout" in message or "timed out" in message:
        return "timeout"
    if isinstance(exc, NetworkUnreachableError):
        return "network"
    return "unknown"


async def _user_summary(ctx: ToolContext) -> dict[str, Any]:
    user = await ctx.users.get_me()
    return {"name": user.name, "email": user.email, "username": user.username or None}


async def auth_login(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    try:
        device_code = await ctx.device_auth.request_device_code()
    except (DeviceAuthError, NetworkUnreachableError) as e:
        return _payload({"error": _login_error_type(e), "message": e.message}, is_error=True)

    ctx.token_store.save_pending_device_code(device_code.device_code, device_code.expires_in)

    return _payload(
        {
            "status": "pending",
            "verification_url": device_code.verification_url,
            "user_code": device_code.user_code,
            "expires_in_minutes": round(device_code.expires_in / 60),
            "instructions": LOGIN_INSTRUCTIONS,
        }
    )


async def auth_complete(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    device_code = args.get("device_code")
    if device_code:
        logger.debug("Using device_code from arguments, ignoring any pending code")
    else:
        device_code = ctx.token_store.get_pending_device_code()
    if not device_code:
        return _payload(
            {
                "error": "no_pending_auth",
                "message": "No pending authorization. Run auth_login first.",
            },
            is_error=True,
        )

    try:
        token = await ctx.device_auth.poll_for_token(device_code)
    except DeviceAuthError as e:
        if e.is_expired:
            return _payload(
                {
                    "error": "expired",
                    "message": "Authorization code expired. Run auth_login for a new code.",
                },
                is_error=True,
            )
        if e.is_denied:
            return _payload(
                {
                    "error": "access_denied",
                    "message": "Authorization denied. Run auth_login to try again.",
                },
                is_error=True,
            )
        return _payload({"error": "auth_failed", "message": e.message}, is_error=True)
    except NetworkUnreachableError as e:
        return _payload({"error": "auth_failed", "message": e.message}, is_error=True)

    if token is None:
        return _payload(
            {
                "status": "authorization_pending",
                "message": (
                    "User has not yet authorized. "
                    "Complete authorization in browser, then retry."
                ),
            }
        )

    ctx.token_store.clear_pending_device_code()
    ctx.token_store.save_token(token.access_token)
    ctx.client.set_token(token.access_token)
    logger.info("Authentication completed")

    try:
        user = await _user_summary(ctx)
    except GitScrumMCPError as e:
        logger.warning(f"Authenticated, but user lookup failed: {e.message}")
        return _payload({"status": "authenticated"})
    return _payload({"status": "authenticated", "user": user})


async def auth_status(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    token = ctx.token_store.get_token()
    if not token:
        return _payload({"authenticated": False, "options": LOGIN_OPTIONS})

    ctx.client.set_token(token)
    try:
        user = await _user_summary(ctx)
    except GitScrumMCPError as e:
        logger.info(f"Token check failed: {e.message}")
        return _payload(
            {
                "authenticated": False,
                "error": "token_invalid",
                "message": "Token expired or invalid. Run auth_login to reconnect.",
            },
            is_error=True,
        )

    return _payload(
        {
            "authenticated": True,
            "user": user,
            "token_source": ctx.token_store.token_source(),
        }
    )


async def auth_logout(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    await ctx.client.logout()
    ctx.token_store.clear_token()
    return _payload({"status": "logged_out"})


HANDLERS = {
    "auth_login": auth_login,
    "auth_complete": auth_complete,
    "auth_status": auth_status,
    "auth_logout": auth_logout,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, name, ctx, arguments, "auth")


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=list(HANDLERS))
