"""Global search tool."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.tools.dispatcher import (
    ToolContext,
    execute_action,
    required,
    success,
    to_json,
)
from gitscrum_mcp.tools.registry import ToolModule

MIN_QUERY_LENGTH = 2

TOOLS = [
    Tool(
        name="search",
        description=(
            "Search across workspaces, projects, tasks, sprints, wiki, notes by name.\n\n"
            "Use to discover slugs and UUIDs needed by other tools. "
            "Results include entity type, name, and identifiers."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search text (min 2 chars)"},
                "categories": {
                    "type": "string",
                    "description": "Filter: workspaces, tasks, projects, user_stories, sprints, wiki, notes",
                },
                "limit": {"type": "number", "description": "Results per category (default: 5)"},
            },
            "required": ["query"],
        },
    )
]


async def search(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    query = (args.get("query") or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return required("query (min 2 chars)")
    results = await ctx.search.search(
        query, categories=args.get("categories"), limit=args.get("limit")
    )
    return success(to_json(results))


HANDLERS = {"search": search}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, name, ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["search"])
