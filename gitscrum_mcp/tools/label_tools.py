"""Label tool: workspace labels and their use on projects and tasks."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.resolver import normalize_color
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
        name="label",
        description=(
            "Labels. Actions: list, create, update, attach, detach, toggle.\n\n"
            "- 'list': requires company_slug (all workspace labels with their slug/ID)\n"
            "- 'create': requires company_slug + title + color\n"
            "- 'attach'/'detach': requires label_slug + project_slug\n"
            "- 'toggle': requires label_slug + task_uuid + project_slug\n"
            "- 'update': requires label_slug + company_slug"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["list", "create", "update", "attach", "detach", "toggle"],
                    "description": "Which operation to perform",
                },
                "company_slug": {"type": "string", "description": "Workspace identifier (always required)"},
                "project_slug": {
                    "type": "string",
                    "description": "Project identifier. Required for: attach, detach, toggle",
                },
                "label_slug": {
                    "type": "string",
                    "description": "Existing label's identifier. Required for: update, attach, detach, toggle",
                },
                "task_uuid": {"type": "string", "description": "Task UUID. Required for: toggle"},
                "title": {"type": "string", "description": "Label name. Required for: create"},
                "color": {
                    "type": "string",
                    "description": "Color name or hex without #, e.g. 'red' or 'FF5733'. Required for: create",
                },
            },
            "required": ["action", "company_slug"],
        },
    )
]


async def label_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if args.get("project_slug"):
        labels = await ctx.projects.get_labels(args["project_slug"], args["company_slug"])
    else:
        labels = await ctx.labels.list_workspace_labels(args["company_slug"])
    return success(to_json(labels))


async def label_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title") or not args.get("color"):
        return required("title and color")
    label = await ctx.labels.create_label(
        args["company_slug"], args["title"], normalize_color(args["color"])
    )
    return success(to_json({"created": True, "label": label}))


async def label_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    label_slug = args.get("label_slug")
    if not label_slug:
        return required("label_slug")
    await ctx.labels.update_label(
        label_slug,
        args["company_slug"],
        title=args.get("title") or None,
        color=normalize_color(args["color"]) if args.get("color") else None,
    )
    return success(to_json({"updated": True, "label_slug": label_slug}))


async def label_attach(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    label_slug = args.get("label_slug")
    if not label_slug:
        return required("label_slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    await ctx.labels.attach_to_project(label_slug, scope.project_slug, scope.company_slug)
    return success(to_json({"attached": True, "label_slug": label_slug}))


async def label_detach(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    label_slug = args.get("label_slug")
    if not label_slug:
        return required("label_slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    await ctx.labels.detach_from_project(label_slug, scope.project_slug, scope.company_slug)
    return success(to_json({"detached": True, "label_slug": label_slug}))


async def label_toggle(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    label_slug = args.get("label_slug")
    task_uuid = args.get("task_uuid")
    if not task_uuid or not label_slug:
        return required("task_uuid and label_slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    await ctx.labels.toggle_on_task(
        task_uuid, label_slug, scope.project_slug, scope.company_slug
    )
    return success(
        to_json({"toggled": True, "label_slug": label_slug, "task_uuid": task_uuid})
    )


HANDLERS = {
    "list": label_list,
    "create": label_create,
    "update": label_update,
    "attach": label_attach,
    "detach": label_detach,
    "toggle": label_toggle,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    # Every label action is workspace scoped
    if not arguments.get("company_slug"):
        return required("company_slug")
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["label"])
