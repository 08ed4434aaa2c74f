"""Sprint tool."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.resolver import normalize_color
from gitscrum_mcp.models.context import ResolvedContext, ResponseContext
from gitscrum_mcp.models.sprint import SprintRequest
from gitscrum_mcp.tools.dispatcher import (
    ToolContext,
    execute_action,
    required,
    resolve_scope,
    success,
    to_json,
)
from gitscrum_mcp.tools.registry import ToolModule

PROJECT_REQUIRED = "project_slug (or company_slug + project_slug)"

ACTIONS = [
    "list", "all", "get", "kpis", "stats", "reports", "progress", "metrics",
    "create", "update",
]

TOOLS = [
    Tool(
        name="sprint",
        description=(
            "Sprint management. Actions: " + ", ".join(ACTIONS) + ".\n\n"
            "- 'list': requires company_slug + project_slug (returns sprints with their slug)\n"
            "- 'all': no params needed (all sprints across workspaces)\n"
            "- 'get'/'kpis'/'stats'/'progress'/'metrics': requires slug + company_slug + project_slug\n"
            "- 'reports': requires slug + company_slug + project_slug. Optional: resource\n"
            "- 'create': requires title + company_slug + project_slug. "
            "The API defaults dates to today and today + 7 days\n"
            "- 'update': requires slug + company_slug + project_slug"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ACTIONS,
                    "description": "Which operation to perform",
                },
                "project_slug": {"type": "string", "description": "Project identifier"},
                "company_slug": {"type": "string", "description": "Workspace identifier"},
                "slug": {
                    "type": "string",
                    "description": "Existing sprint's slug. Required for all actions except list, all, create",
                },
                "title": {"type": "string", "description": "Sprint name. Required for: create"},
                "description": {"type": "string", "description": "Sprint description in markdown"},
                "date_start": {"type": "string", "description": "Start date YYYY-MM-DD"},
                "date_finish": {"type": "string", "description": "End date YYYY-MM-DD"},
                "color": {"type": "string", "description": "Color name or hex, e.g. 'blue' or 'FF5733'"},
                "is_private": {"type": "boolean", "description": "Sprint visibility"},
                "close_on_finish": {"type": "boolean", "description": "Auto-close when the end date is reached"},
                "resource": {
                    "type": "string",
                    "description": (
                        "For 'reports': single chart (burndown, burnup, performance, types, "
                        "efforts, member_distribution, task_type_distribution)"
                    ),
                },
            },
            "required": ["action"],
        },
    )
]


def _sprint_context(scope: ResolvedContext, slug: str) -> ResponseContext:
    return ResponseContext(
        company_slug=scope.company_slug,
        project_slug=scope.project_slug,
        sprint_slug=slug,
    )


def _sprint_request(args: dict[str, Any]) -> SprintRequest:
    return SprintRequest(
        title=args.get("title") or None,
        description=args.get("description") or None,
        date_start=args.get("date_start") or None,
        date_finish=args.get("date_finish") or None,
        color=normalize_color(args["color"]) if args.get("color") else None,
        is_private=args.get("is_private"),
        close_on_finish=args.get("close_on_finish"),
    )


async def sprint_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    sprints = await ctx.sprints.list_sprints(scope.project_slug, scope.company_slug)
    return success(
        to_json(sprints),
        ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug),
    )


async def sprint_all(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    return success(to_json(await ctx.sprints.list_all_sprints()))


def _sprint_read(fetch_name: str):
    """Handler for a read action on one sprint."""

    async def handler(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
        slug = args.get("slug")
        if not slug:
            return required("slug")
        scope = await resolve_scope(ctx, args)
        if scope is None:
            return required(PROJECT_REQUIRED)
        fetch = getattr(ctx.sprints, fetch_name)
        data = await fetch(slug, scope.project_slug, scope.company_slug)
        return success(to_json(data), _sprint_context(scope, slug))

    return handler


async def sprint_reports(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    slug = args.get("slug")
    if not slug:
        return required("slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    reports = await ctx.sprints.get_sprint_reports(
        slug, scope.project_slug, scope.company_slug, resource=args.get("resource")
    )
    return success(to_json(reports), _sprint_context(scope, slug))


async def sprint_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title"):
        return required("title")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required("company_slug and project_slug")

    sprint = await ctx.sprints.create_sprint(
        scope.project_slug, scope.company_slug, _sprint_request(args)
    )
    return success(
        to_json({"created": True, "sprint": sprint}),
        ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug),
    )


async def sprint_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    slug = args.get("slug")
    if not slug:
        return required("slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required("company_slug and project_slug")

    await ctx.sprints.update_sprint(
        slug, scope.project_slug, scope.company_slug, _sprint_request(args)
    )
    return success(
        to_json({"updated": True, "slug": slug}), _sprint_context(scope, slug)
    )


HANDLERS = {
    "list": sprint_list,
    "all": sprint_all,
    "get": _sprint_read("get_sprint"),
    "kpis": _sprint_read("get_sprint_kpis"),
    "stats": _sprint_read("get_sprint_stats"),
    "reports": sprint_reports,
    "progress": _sprint_read("get_sprint_progress"),
    "metrics": _sprint_read("get_sprint_metrics"),
    "create": sprint_create,
    "update": sprint_update,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["sprint"])
