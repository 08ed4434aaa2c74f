"""Workspace and project tools."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.resolver import find_project_by_name
from gitscrum_mcp.models.context import ResolvedContext, ResponseContext
from gitscrum_mcp.tools.dispatcher import (
    ToolContext,
    error,
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
        name="workspace",
        description=(
            "Workspace management. Actions: list, find (by name), get, stats.\n\n"
            "This is the starting point. Use 'list' to get all workspaces and their "
            "company_slug. company_slug is needed by most other tools."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["list", "find", "get", "stats"],
                    "description": "Which operation to perform",
                },
                "name": {
                    "type": "string",
                    "description": "Workspace name to search for. Required for: find",
                },
                "company_slug": {
                    "type": "string",
                    "description": "Workspace identifier. Required for: get, stats",
                },
            },
            "required": ["action"],
        },
    ),
    Tool(
        name="project",
        description=(
            "Project management. Actions: create, find (by name), list, get, stats, "
            "tasks, workflows, types, efforts, labels, members.\n\n"
            "- 'list': requires company_slug. Returns projects with their project_slug.\n"
            "- 'find': search by name, returns project_slug + company_slug\n"
            "- 'workflows'/'types'/'efforts'/'labels': IDs used by the 'task' tool\n"
            "- 'members': users that can be assigned to tasks\n"
            "- 'create': requires company_slug + name"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": [
                        "create", "find", "list", "get", "stats", "tasks",
                        "workflows", "types", "efforts", "labels", "members",
                    ],
                    "description": "Which operation to perform",
                },
                "name": {
                    "type": "string",
                    "description": "Project name. Required for: create, find",
                },
                "company_slug": {
                    "type": "string",
                    "description": "Workspace identifier. Required for: create, list. Optional for: find",
                },
                "project_slug": {
                    "type": "string",
                    "description": "Project identifier. Required for: get, stats, tasks, workflows, types, efforts, labels, members",
                },
                "status": {
                    "type": "string",
                    "enum": ["in_progress", "completed", "archived"],
                    "description": "Filter projects by status. Optional for: list",
                },
                "description": {
                    "type": "string",
                    "description": "Project description. Optional for: create",
                },
                "visibility": {
                    "type": "string",
                    "enum": ["public", "private"],
                    "description": "Project visibility (default: public). Optional for: create",
                },
                "client_uuid": {
                    "type": "string",
                    "description": "Client UUID to associate the project with. Optional for: create",
                },
            },
            "required": ["action"],
        },
    ),
]


def scope_context(scope: ResolvedContext) -> ResponseContext:
    return ResponseContext(
        company_slug=scope.company_slug, project_slug=scope.project_slug
    )


# Workspace actions


async def workspace_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    return success(to_json(await ctx.workspaces.list_workspaces()))


async def workspace_find(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    name = args.get("name")
    if not name:
        return required("name")
    workspace = await ctx.workspaces.find_workspace_by_name(name)
    if workspace is None:
        return success(to_json({"found": False, "query": name}))
    return success(
        to_json({"found": True, "workspace": workspace}),
        ResponseContext(company_slug=workspace.get("slug")),
    )


async def workspace_get(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    company_slug = args.get("company_slug")
    if not company_slug:
        return required("company_slug")
    workspace = await ctx.workspaces.get_workspace(company_slug)
    return success(to_json(workspace), ResponseContext(company_slug=company_slug))


async def workspace_stats(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    company_slug = args.get("company_slug")
    if not company_slug:
        return required("company_slug")
    stats = await ctx.workspaces.get_workspace_stats(company_slug)
    return success(to_json(stats), ResponseContext(company_slug=company_slug))


WORKSPACE_HANDLERS = {
    "list": workspace_list,
    "find": workspace_find,
    "get": workspace_get,
    "stats": workspace_stats,
}


# Project actions


async def project_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    company_slug = args.get("company_slug")
    if not company_slug:
        return required("company_slug")
    if not args.get("name"):
        return required("name")

    data = {
        key: args[key]
        for key in ("name", "description", "visibility", "client_uuid")
        if args.get(key) is not None
    }
    project = await ctx.projects.create_project(company_slug, data)
    return success(
        to_json({"created": True, "project": project}),
        ResponseContext(company_slug=company_slug, project_slug=project["project_slug"]),
    )


async def project_find(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    name = args.get("name")
    if not name:
        return required("name")
    project = await find_project_by_name(ctx.search, name, args.get("company_slug"))
    if project is None:
        return success(to_json({"found": False, "query": name}))
    return success(
        to_json({"found": True, "project": project}),
        ResponseContext(
            company_slug=project.company_slug, project_slug=project.project_slug
        ),
    )


async def project_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    company_slug = args.get("company_slug")
    if not company_slug:
        return required("company_slug")
    projects = await ctx.projects.list_projects(company_slug, args.get("status"))
    return success(to_json(projects), ResponseContext(company_slug=company_slug))


def _scoped(fetch_name: str):
    """Handler for a read-only action that only needs the project scope."""

    async def handler(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
        scope = await resolve_scope(ctx, args)
        if scope is None:
            return required(PROJECT_REQUIRED)
        fetch = getattr(ctx.projects, fetch_name)
        data = await fetch(scope.project_slug, scope.company_slug)
        return success(to_json(data), scope_context(scope))

    return handler


PROJECT_HANDLERS = {
    "create": project_create,
    "find": project_find,
    "list": project_list,
    "get": _scoped("get_project"),
    "stats": _scoped("get_project_stats"),
    "tasks": _scoped("get_project_tasks"),
    "workflows": _scoped("get_workflows"),
    "types": _scoped("get_types"),
    "efforts": _scoped("get_efforts"),
    "labels": _scoped("get_labels"),
    "members": _scoped("get_members"),
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    action = arguments.get("action")
    if name == "workspace":
        return await execute_action(WORKSPACE_HANDLERS, action, ctx, arguments, name)
    if name == "project":
        return await execute_action(PROJECT_HANDLERS, action, ctx, arguments, name)
    return error(f"Unknown tool: {name}")


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["workspace", "project"])
