"""MCP server for GitScrum project management."""

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Resource, TextContent, Tool

from gitscrum_mcp import __version__
from gitscrum_mcp.config import settings
from gitscrum_mcp.core.client import GitScrumClient
from gitscrum_mcp.core.device_auth import DeviceAuthClient
from gitscrum_mcp.core.exceptions import GitScrumMCPError
from gitscrum_mcp.core.token_store import TokenStore
from gitscrum_mcp.tools.dispatcher import ToolContext, error_text
from gitscrum_mcp.tools.registry import get_all_tools, initialize_tool_modules, route_tool_call

# Configure logging to stderr (stdout is used for MCP protocol)
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr  # Log to stderr, not stdout
)
logger = logging.getLogger(__name__)

INSTRUCTIONS = "GitScrum project management. Stateless MCP - always provide required parameters."

DOCS_URI = "gitscrum://docs/api"

# Create MCP server
app = Server("gitscrum-mcp", version=__version__, instructions=INSTRUCTIONS)

initialize_tool_modules()


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=DOCS_URI,
            name="GitScrum API Documentation",
            mimeType="text/plain",
            description="Documentation for GitScrum MCP server capabilities",
        ),
    ]


@app.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    if str(uri) == DOCS_URI:
        tool_names = "\n".join(
            f"{index}. {tool.name} - {tool.description.splitlines()[0]}"
            for index, tool in enumerate(get_all_tools(), start=1)
        )
        return f"""GitScrum MCP Server - API Documentation

This MCP server lets you manage GitScrum workspaces, projects, tasks, sprints
and user stories using natural language.

**Available Tools:**

{tool_names}

**Authentication:**
Call auth_login, open the verification URL, authorize, then call auth_complete.
Alternatively set the GITSCRUM_TOKEN environment variable.

**Conventions:**
- Most tools take an 'action' argument selecting the operation
- company_slug identifies a workspace, project_slug a project
- Successful results end with a context block listing identifiers to reuse

**Configuration:**
API URL: {settings.api_url}
"""
    raise ValueError(f"Unknown resource: {uri}")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return get_all_tools()


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> CallToolResult:
    """Handle tool calls."""
    logger.info(f"Tool called: {name}")
    logger.debug(f"Arguments: {arguments}")

    try:
        token_store = TokenStore()
        async with GitScrumClient(token_store=token_store) as client:
            ctx = ToolContext(
                client=client,
                token_store=token_store,
                device_auth=DeviceAuthClient(),
            )
            return await route_tool_call(ctx, name, arguments or {})

    except GitScrumMCPError as e:
        return CallToolResult(
            content=[TextContent(type="text", text=error_text(e))],
            isError=True,
        )
    except Exception as e:
        logger.exception("Unexpected error in tool call")
        return CallToolResult(
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
            isError=True,
        )


async def main() -> None:
    """Run the MCP server."""
    logger.info("Starting GitScrum MCP server...")
    logger.info(f"API URL: {settings.api_url}")
    logger.info(f"Debug mode: {settings.debug}")

    async with stdio_server() as (read_stream, write_stream):
        logger.info("Server ready, waiting for MCP messages on stdin/stdout")
        await app.run(read_stream, write_stream, app.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
