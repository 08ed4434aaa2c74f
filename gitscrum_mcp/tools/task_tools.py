"""Task tool: listing, creating, updating and filtering tasks."""

import logging
from typing import Any, Optional

from mcp.types import CallToolResult, Tool

from gitscrum_mcp.core.exceptions import IdentifierNotFoundError
from gitscrum_mcp.core.resolver import resolve_label_ids, resolve_label_like_id
from gitscrum_mcp.models.context import ResolvedContext, ResponseContext
from gitscrum_mcp.models.task import CreateTaskRequest, TaskFilters, UpdateTaskRequest
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

logger = logging.getLogger(__name__)

ACTIONS = [
    "my", "today", "notifications", "get", "create", "update", "complete",
    "subtasks", "filter", "by_code", "duplicate", "move",
]

TOOLS = [
    Tool(
        name="task",
        description=(
            "Task management. Actions: " + ", ".join(ACTIONS) + ".\n\n"
            "- 'my' and 'today': no extra params needed, returns user's tasks\n"
            "- 'create': requires company_slug + project_slug + title. All optional "
            "fields (sprint_slug, user_story_slug, column, type_id, effort_id, "
            "usernames, ...) can be set in one call\n"
            "- 'update': requires uuid + company_slug + project_slug\n"
            "- 'get'/'complete'/'subtasks': requires uuid\n"
            "- 'filter': requires company_slug + project_slug\n"
            "- 'by_code': requires task_code (e.g. 'PROJ-123') + company_slug + project_slug\n"
            "- 'duplicate': requires uuid + company_slug + project_slug\n"
            "- 'move': requires uuid + company_slug + project_slug + new_project_slug + new_workflow_id"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ACTIONS,
                    "description": "Which operation to perform",
                },
                "uuid": {"type": "string", "description": "Task UUID"},
                "task_uuid": {"type": "string", "description": "Alias for uuid"},
                "per_page": {"type": "integer", "description": "Number of results (1-100, default 50)"},
                "title": {"type": "string", "description": "Task title. Required for: create"},
                "project_slug": {"type": "string", "description": "Project identifier"},
                "company_slug": {"type": "string", "description": "Workspace identifier"},
                "description": {"type": "string", "description": "Task description in markdown"},
                "due_date": {"type": "string", "description": "Deadline, YYYY-MM-DD"},
                "start_date": {"type": "string", "description": "Start date, YYYY-MM-DD"},
                "workflow_id": {"type": "integer", "description": "Kanban column ID. Use this OR column"},
                "column": {"type": "string", "description": "Kanban column name, e.g. 'In Progress'"},
                "effort_id": {"type": "integer", "description": "Effort ID (project action=efforts)"},
                "type_id": {"type": "integer", "description": "Task type ID (project action=types)"},
                "usernames": {"type": "array", "items": {"type": "string"}, "description": "Usernames to assign"},
                "label_ids": {"type": "array", "items": {"type": "integer"}, "description": "Label IDs to attach"},
                "sprint_slug": {"type": "string", "description": "Sprint to add the task to"},
                "user_story_slug": {"type": "string", "description": "User story to link the task to"},
                "estimated_minutes": {"type": "number", "description": "Time estimate in minutes"},
                "parent_id": {"type": "string", "description": "Parent task UUID to create a subtask"},
                "is_bug": {"type": "boolean", "description": "Mark task as bug"},
                "is_blocker": {"type": "boolean", "description": "Mark task as blocker"},
                "is_archived": {"type": "boolean", "description": "Archive task"},
                "workflow": {"type": "string", "description": "Filter: Kanban column title"},
                "labels": {"type": "string", "description": "Filter: comma separated label titles"},
                "type": {"type": "string", "description": "Filter: task type title"},
                "effort": {"type": "string", "description": "Filter: effort title"},
                "sprint": {"type": "string", "description": "Filter: sprint slug or title"},
                "user_story": {"type": "string", "description": "Filter: user story slug or title"},
                "status": {"type": "string", "enum": ["todo", "in-progress", "done"], "description": "Filter: status"},
                "users": {"type": "string", "description": "Filter: comma separated usernames"},
                "unassigned": {"type": "boolean", "description": "Filter: only unassigned tasks"},
                "created_at": {"type": "string", "description": "Filter: YYYY-MM-DD=YYYY-MM-DD"},
                "closed_at": {"type": "string", "description": "Filter: YYYY-MM-DD=YYYY-MM-DD"},
                "task_code": {"type": "string", "description": "Task code for by_code, e.g. 'PROJ-123'"},
                "new_project_slug": {"type": "string", "description": "Target project for move"},
                "new_workflow_id": {"type": "integer", "description": "Target column ID for move"},
            },
            "required": ["action"],
        },
    )
]


def _uuid(args: dict[str, Any]) -> Optional[str]:
    return args.get("uuid") or args.get("task_uuid")


def _scope_context(scope: ResolvedContext, **extra: Any) -> ResponseContext:
    return ResponseContext(
        company_slug=scope.company_slug, project_slug=scope.project_slug, **extra
    )


async def _column_id(
    ctx: ToolContext, scope: ResolvedContext, column: str
) -> tuple[Optional[int], Optional[CallToolResult]]:
    """Workflow id for a column title, or an error result listing the columns."""
    workflows = await ctx.projects.get_workflows(scope.project_slug, scope.company_slug)
    try:
        return resolve_label_like_id(column, workflows), None
    except IdentifierNotFoundError:
        return None, error(
            to_json(
                {
                    "error": "column_not_found",
                    "column": column,
                    "available_columns": workflows,
                }
            )
        )


def _find_by_slug(items: list[dict[str, Any]], slug: str, title_too: bool = False):
    for item in items:
        if item.get("slug") == slug:
            return item
        if title_too and str(item.get("title", "")).lower() == slug.lower():
            return item
    return None


async def task_my(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    return success(to_json(await ctx.tasks.get_my_tasks(args.get("per_page") or 50)))


async def task_today(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    return success(to_json(await ctx.tasks.get_today_tasks(args.get("per_page") or 50)))


async def task_notifications(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    notifications = await ctx.tasks.get_notifications()
    count = await ctx.tasks.get_notification_count()
    return success(to_json({"notifications": notifications, "unread_count": count}))


async def task_get(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")
    task = await ctx.tasks.get_task(uuid)
    task_data = task if isinstance(task, dict) else {}
    project = task_data.get("project") or {}
    company = task_data.get("company") or {}
    return success(
        to_json(task),
        ResponseContext(
            company_slug=company.get("slug"),
            project_slug=project.get("slug"),
            task_uuid=uuid,
        ),
    )


async def task_create(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    if not args.get("title"):
        return required("title")

    scope = await resolve_scope(ctx, args)
    if scope is None:
        return error("company_slug and project_slug required to create task")

    workflow_id = args.get("workflow_id")
    if not workflow_id and args.get("column"):
        workflow_id, failure = await _column_id(ctx, scope, args["column"])
        if failure:
            return failure

    request = CreateTaskRequest(
        title=args["title"],
        project_slug=scope.project_slug,
        company_slug=scope.company_slug,
        description=args.get("description"),
        workflow_id=workflow_id,
        effort_id=args.get("effort_id"),
        type_id=args.get("type_id"),
        usernames=args.get("usernames"),
        label_ids=args.get("label_ids"),
        due_date=args.get("due_date"),
        start_date=args.get("start_date"),
        estimated_minutes=args.get("estimated_minutes"),
        sprint_slug=args.get("sprint_slug"),
        user_story_slug=args.get("user_story_slug"),
        parent_id=args.get("parent_id"),
        is_bug=args.get("is_bug"),
        is_blocker=args.get("is_blocker"),
    )
    task = await ctx.tasks.create_task(request)
    task_uuid = task.get("uuid") if isinstance(task, dict) else None
    return success(
        to_json({"created": True, "task": task}),
        _scope_context(scope, sprint_slug=args.get("sprint_slug"), task_uuid=task_uuid),
    )


async def task_update(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")

    scope = await resolve_scope(ctx, args)
    if scope is None:
        return error("To update task: need company_slug and project_slug")

    fields: dict[str, Any] = {
        key: args[key]
        for key in (
            "title", "description", "due_date", "start_date", "estimated_minutes",
            "is_blocker", "is_bug", "is_archived", "label_ids",
        )
        if args.get(key) is not None
    }

    if args.get("column"):
        workflow_id, failure = await _column_id(ctx, scope, args["column"])
        if failure:
            return failure
        fields["workflow_id"] = workflow_id
    elif args.get("workflow_id") is not None:
        fields["workflow_id"] = args["workflow_id"]

    # The update endpoint takes database column names
    if args.get("effort_id") is not None:
        fields["config_issue_effort_id"] = args["effort_id"]
    if args.get("type_id") is not None:
        fields["config_issue_type_id"] = args["type_id"]

    if args.get("sprint_slug"):
        response = await ctx.sprints.list_sprints(scope.project_slug, scope.company_slug)
        sprint = _find_by_slug(response.get("data") or [], args["sprint_slug"])
        if sprint is None:
            return error(
                to_json({"error": "sprint_not_found", "sprint_slug": args["sprint_slug"]})
            )
        fields["sprint_id"] = sprint["id"]

    if args.get("user_story_slug"):
        response = await ctx.user_stories.list_user_stories(
            scope.project_slug, scope.company_slug
        )
        story = _find_by_slug(response.get("data") or [], args["user_story_slug"])
        if story is None:
            return error(
                to_json(
                    {
                        "error": "user_story_not_found",
                        "user_story_slug": args["user_story_slug"],
                    }
                )
            )
        fields["user_story_id"] = story["id"]

    if args.get("usernames"):
        fields["members"] = args["usernames"]

    request = UpdateTaskRequest(
        company_slug=scope.company_slug, project_slug=scope.project_slug, **fields
    )
    await ctx.tasks.update_task(uuid, request)
    return success(
        to_json({"updated": True, "uuid": uuid}),
        _scope_context(scope, task_uuid=uuid),
    )


async def task_complete(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")
    await ctx.tasks.complete_task(uuid)
    return success(to_json({"completed": True, "uuid": uuid}))


async def task_subtasks(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")
    subtasks = await ctx.tasks.get_subtasks(uuid)
    return success(to_json(subtasks), ResponseContext(task_uuid=uuid))


async def task_filter(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    scope = await resolve_scope(ctx, args)
    if scope is None:
        return required("company_slug and project_slug")
    project_slug, company_slug = scope.project_slug, scope.company_slug

    filters = TaskFilters(
        title=args.get("title"),
        description=args.get("description"),
        status=args.get("status"),
        users=args.get("users"),
        start_date=args.get("start_date"),
        due_date=args.get("due_date"),
        created_at=args.get("created_at"),
        closed_at=args.get("closed_at"),
        is_blocker=bool(args.get("is_blocker")),
        is_bug=bool(args.get("is_bug")),
        unassigned=bool(args.get("unassigned")),
        is_archived=bool(args.get("is_archived")),
        per_page=args.get("per_page") or 50,
    )

    # The search endpoint filters by id, titles are resolved first
    if args.get("workflow"):
        workflows = await ctx.projects.get_workflows(project_slug, company_slug)
        try:
            filters.workflow = str(resolve_label_like_id(args["workflow"], workflows))
        except IdentifierNotFoundError as e:
            return error(to_json(e.to_payload("column")))

    if args.get("labels"):
        labels = await ctx.projects.get_labels(project_slug, company_slug)
        ids = resolve_label_ids(args["labels"], labels)
        if ids:
            filters.labels = ",".join(str(i) for i in ids)

    if args.get("type"):
        types = await ctx.projects.get_types(project_slug, company_slug)
        try:
            filters.type = str(resolve_label_like_id(args["type"], types))
        except IdentifierNotFoundError:
            logger.debug(f"Ignoring unknown type filter '{args['type']}'")

    if args.get("effort"):
        efforts = await ctx.projects.get_efforts(project_slug, company_slug)
        try:
            filters.effort = str(resolve_label_like_id(args["effort"], efforts))
        except IdentifierNotFoundError:
            logger.debug(f"Ignoring unknown effort filter '{args['effort']}'")

    if args.get("sprint"):
        response = await ctx.sprints.list_sprints(project_slug, company_slug)
        sprint = _find_by_slug(response.get("data") or [], args["sprint"], title_too=True)
        if sprint is not None:
            filters.sprint = str(sprint["id"])

    if args.get("user_story"):
        response = await ctx.user_stories.list_user_stories(project_slug, company_slug)
        story = _find_by_slug(response.get("data") or [], args["user_story"], title_too=True)
        if story is not None:
            filters.user_story = str(story["id"])

    tasks = await ctx.tasks.search_tasks(company_slug, project_slug, filters)
    return success(to_json(tasks), _scope_context(scope))


async def task_by_code(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    task_code = args.get("task_code")
    if not task_code:
        return required("task_code (e.g. 'PROJ-123')")

    scope = await resolve_scope(ctx, args)
    if scope is None:
        return error("company_slug and project_slug required for by_code")

    task = await ctx.tasks.get_task_by_code(task_code, scope.company_slug, scope.project_slug)
    return success(to_json(task), _scope_context(scope))


async def task_duplicate(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")

    scope = await resolve_scope(ctx, args)
    if scope is None:
        return error("company_slug and project_slug required to duplicate task")

    task = await ctx.tasks.duplicate_task(
        uuid, scope.company_slug, scope.project_slug, args.get("workflow_id")
    )
    return success(to_json({"duplicated": True, "task": task}), _scope_context(scope))


async def task_move(ctx: ToolContext, args: dict[str, Any]) -> CallToolResult:
    uuid = _uuid(args)
    if not uuid:
        return required("uuid")
    if not args.get("new_project_slug"):
        return required("new_project_slug")
    if not args.get("new_workflow_id"):
        return required("new_workflow_id")

    scope = await resolve_scope(ctx, args)
    if scope is None:
        return error("company_slug and project_slug required to move task")

    result = await ctx.tasks.move_task(
        uuid,
        scope.company_slug,
        scope.project_slug,
        args["new_project_slug"],
        args["new_workflow_id"],
    )
    return success(to_json({"moved": True, "result": result}), _scope_context(scope))


HANDLERS = {
    "my": task_my,
    "today": task_today,
    "notifications": task_notifications,
    "get": task_get,
    "create": task_create,
    "update": task_update,
    "complete": task_complete,
    "subtasks": task_subtasks,
    "filter": task_filter,
    "by_code": task_by_code,
    "duplicate": task_duplicate,
    "move": task_move,
}


async def handle(ctx: ToolContext, name: str, arguments: dict[str, Any]) -> CallToolResult:
    return await execute_action(HANDLERS, arguments.get("action"), ctx, arguments, name)


MODULE = ToolModule(tools=TOOLS, handler=handle, handles=["task"])
