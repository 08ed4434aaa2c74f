"""User story tool."""

from typing import Any

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.models.context import ResponseContext
from gitscrum_mcp.models.userstory import CreateUserStoryRequest, UpdateUserStoryRequest
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

STORY_FIELDS = (
    "additional_information",
    "acceptance_criteria",
    "epic_uuid",
    "user_story_priority_id",
)

TOOLS = [
    Tool(
        name="user_story",
        description=(
            "User stories. Actions: list, all, get, create, update.\n\n"
            "- 'list': requires company_slug + project_slug (returns stories with their slug)\n"
            "- 'all': no params needed (all user stories across workspaces)\n"
            "- 'get': requires slug + company_slug + project_slug\n"
            "- 'create': requires title + company_slug + project_slug\n"
            "- 'update': requires slug + company_slug + project_slug"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["list", "all", "get", "create", "update"],
                    "description": "Which operation to perform",
                },
                "project_slug": {"type": "string", "description": "Project identifier"},
                "company_slug": {"type": "string", "description": "Workspace identifier"},
                "slug": {
                    "type": "string",
                    "description": "Existing story's slug. Only for: get, update",
                },
                "title": {"type": "string", "description": "Story title. Required for: create"},
                "additional_information": {"type": "string", "description": "Story details in markdown"},
                "acceptance_criteria": {"type": "string", "description": "Definition of done"},
                "epic_uuid": {"type": "string", "description": "Epic UUID to associate the story with"},
                "user_story_priority_id": {"type": "integer", "description": "Priority ID"},
                "per_page": {"type": "number", "description": "Page size for: all"},
                "page": {"type": "number", "description": "Page for: all"},
            },
            "required": ["action"],
        },
    )
]


async def story_list(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    stories = await ctx.user_stories.list_user_stories(scope.project_slug, scope.company_slug)
    return success(
        to_json(stories),
        ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug),
    )


async def story_all(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    stories = await ctx.user_stories.list_all_user_stories(
        per_page=args.get("per_page"), page=args.get("page")
    )
    return success(to_json(stories))


async def story_get(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    slug = args.get("slug")
    if not slug:
        return required("slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)
    story = await ctx.user_stories.get_user_story(slug, scope.project_slug, scope.company_slug)
    return success(
        to_json(story),
        ResponseContext(
            company_slug=scope.company_slug,
            project_slug=scope.project_slug,
            user_story_slug=slug,
        ),
    )


async def story_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title"):
        return required("title")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)

    request = CreateUserStoryRequest(
        title=args["title"],
        project_slug=scope.project_slug,
        company_slug=scope.company_slug,
        **{key: args.get(key) for key in STORY_FIELDS},
    )
    story = await ctx.user_stories.create_user_story(request)
    return success(
        to_json({"created": True, "story": story}),
        ResponseContext(company_slug=scope.company_slug, project_slug=scope.project_slug),
    )


async def story_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    slug = args.get("slug")
    if not slug:
        return required("slug")
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required(PROJECT_REQUIRED)

    request = UpdateUserStoryRequest(
        project_slug=scope.project_slug,
        company_slug=scope.company_slug,
        title=args.get("title"),
        **{key: args.get(key) for key in STORY_FIELDS},
    )
    result = await ctx.user_stories.update_user_story(slug, request)
    return success(
        to_json({"updated": True, "story": result}),
        ResponseContext(
            company_slug=scope.company_slug,
            project_slug=scope.project_slug,
            user_story_slug=slug,
        ),
    )


HANDLERS = {
    "list": story_list,
    "all": story_all,
    "get": story_get,
    "create": story_create,
    "update": story_update,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["user_story"])
