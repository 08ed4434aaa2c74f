"""Task type tool."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.resolver import normalize_color
from gitscrum_mcp.models.context import ResolvedContext, ResponseContext
from gitscrum_mcp.tools.dispatcher import (
    ToolContext,
    execute_action,
    required,
    resolve_scope,
    success,
    to_json,
)
from gitscrum_mcp.tools.registry import ToolModule

PROJECT_REQUIRED = "project_slug (or project name to search)"

TOOLS = [
    Tool(
        name="task_type",
        description=(
            "Task types (Bug, Feature, etc). Actions: list, create, update, assign.\n\n"
            "- 'list': requires company_slug + project_slug (types with their ID)\n"
            "- 'create': requires title + color + company_slug + project_slug\n"
            "- 'update': requires type_id + company_slug + project_slug\n"
            "- 'assign': requires type_id + task_uuid + company_slug + project_slug"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["list", "create", "update", "assign"],
                    "description": "Operation to perform",
                },
                "company_slug": {"type": "string", "description": "Workspace slug"},
                "project_slug": {"type": "string", "description": "Project slug"},
                "type_id": {"type": "number", "description": "Task type ID. Required for: update, assign"},
                "task_uuid": {"type": "string", "description": "Task UUID. Required for: assign"},
                "title": {"type": "string", "description": "Type name e.g. 'Bug'. Required for: create"},
                "color": {"type": "string", "description": "Color name or hex without #. Required for: create"},
            },
            "required": ["action", "company_slug", "project_slug"],
        },
    )
]


def _context(scope: ResolvedContext) -> ResponseContext:
    return ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug)


async def type_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    types = await ctx.projects.get_types(scope.project_slug, scope.company_slug)
    return success(to_json(types), _context(scope))


async def type_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title") or not args.get("color"):
        return required("title and color")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    task_type = await ctx.task_types.create_task_type(
        scope.project_slug,
        scope.company_slug,
        args["title"],
        normalize_color(args["color"]),
    )
    return success(to_json({"created": True, "task_type": task_type}), _context(scope))


async def type_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    type_id = args.get("type_id")
    if not type_id:
        return required("type_id")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    await ctx.task_types.update_task_type(
        type_id,
        scope.project_slug,
        scope.company_slug,
        title=args.get("title") or None,
        color=normalize_color(args["color"]) if args.get("color") else None,
    )
    return success(to_json({"updated": True, "type_id": type_id}), _context(scope))


async def type_assign(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("task_uuid") or not args.get("type_id"):
        return required("task_uuid and type_id")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    result = await ctx.task_types.assign_to_task(
        args["task_uuid"], args["type_id"], scope.project_slug, scope.company_slug
    )
    return success(to_json({"assigned": True, "result": result}), _context(scope))


HANDLERS = {
    "list": type_list,
    "create": type_create,
    "update": type_update,
    "assign": type_assign,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["task_type"])
