"""Workflow tool for Kanban board columns."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.resolver import normalize_color, normalize_workflow_status
from gitscrum_mcp.models.context import ResponseContext
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

TOOLS = [
    Tool(
        name="workflow",
        description=(
            "Manage Kanban board columns. Actions: create, update.\n\n"
            "- To see existing columns: use the 'project' tool with action 'workflows'\n"
            "- 'create': requires project_slug + title. Optional: color, status\n"
            "- 'update': requires workflow_id. Optional: title, color, position, status"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["create", "update"],
                    "description": "create (new column) or update (modify existing)",
                },
                "workflow_id": {"type": "number", "description": "[update] Column ID"},
                "project_slug": {"type": "string", "description": "Project identifier"},
                "company_slug": {
                    "type": "string",
                    "description": "Workspace identifier (optional if project_slug is unique)",
                },
                "title": {"type": "string", "description": "Column name e.g. 'Backlog', 'Done'"},
                "color": {"type": "string", "description": "Color name or hex without #"},
                "status": {
                    "type": "string",
                    "description": "Column type: 'todo'/'backlog', 'in progress'/'doing', 'done'/'closed'",
                },
                "position": {"type": "number", "description": "[update] Board position (1 = leftmost)"},
            },
            "required": ["action"],
        },
    )
]


def _column_data(args: dict[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if args.get("title"):
        data["title"] = args["title"]
    if args.get("color"):
        data["color"] = normalize_color(args["color"])
    if args.get("status") is not None:
        data["status"] = normalize_workflow_status(args["status"])
    return data


async def workflow_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title"):
        return required("title")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)

    workflow = await ctx.workflows.create_workflow(
        scope.project_slug, scope.company_slug, _column_data(args)
    )
    workflow_id = workflow.get("id") if isinstance(workflow, dict) else None
    return success(
        to_json({"created": True, "workflow_id": workflow_id, "title": args["title"]}),
        ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug),
    )


async def workflow_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    workflow_id = args.get("workflow_id")
    if not workflow_id:
        return required("workflow_id")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)

    data = _column_data(args)
    if args.get("position") is not None:
        data["position"] = args["position"]
    await ctx.workflows.update_workflow(
        workflow_id, scope.project_slug, scope.company_slug, data
    )
    return success(to_json({"updated": True, "workflow_id": workflow_id}))


HANDLERS = {
    "create": workflow_create,
    "update": workflow_update,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["workflow"])
