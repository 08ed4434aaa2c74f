"""
Action dispatch shared by all tools.

Each tool takes an 'action' argument and maps it to a handler. Handlers raise
GitScrumMCPError subclasses; execute_action is the boundary that turns them
into error results.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from mcp.types import CallToolResult, TextContent
from pydantic import ValidationError as PydanticValidationError

from gitscrum_mcp.core.client import GitScrumClient
from gitscrum_mcp.core.device_auth import DeviceAuthClient
from gitscrum_mcp.core.exceptions import GitScrumMCPError, ValidationError
from gitscrum_mcp.core.resolver import resolve_project_context
from gitscrum_mcp.core.token_store import TokenStore
from gitscrum_mcp.models.context import ResolvedContext, ResponseContext
from gitscrum_mcp.services.label_service import LabelService
from gitscrum_mcp.services.project_service import ProjectService
from gitscrum_mcp.services.search_service import SearchService
from gitscrum_mcp.services.sprint_service import SprintService
from gitscrum_mcp.services.task_service import TaskService
from gitscrum_mcp.services.task_type_service import TaskTypeService
from gitscrum_mcp.services.user_service import UserService
from gitscrum_mcp.services.userstory_service import UserStoryService
from gitscrum_mcp.services.workflow_service import WorkflowService
from gitscrum_mcp.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Everything a handler needs for one tool call."""

    client: GitScrumClient
    token_store: TokenStore
    device_auth: DeviceAuthClient
    users: UserService = field(init=False)
    search: SearchService = field(init=False)
    workspaces: WorkspaceService = field(init=False)
    projects: ProjectService = field(init=False)
    tasks: TaskService = field(init=False)
    sprints: SprintService = field(init=False)
    user_stories: UserStoryService = field(init=False)
    labels: LabelService = field(init=False)
    task_types: TaskTypeService = field(init=False)
    workflows: WorkflowService = field(init=False)

    def __post_init__(self) -> None:
        self.users = UserService(self.client)
        self.search = SearchService(self.client)
        self.workspaces = WorkspaceService(self.client)
        self.projects = ProjectService(self.client)
        self.tasks = TaskService(self.client)
        self.sprints = SprintService(self.client)
        self.user_stories = UserStoryService(self.client)
        self.labels = LabelService(self.client)
        self.task_types = TaskTypeService(self.client)
        self.workflows = WorkflowService(self.client)


ActionHandler = Callable[[ToolContext, dict[str, Any]], Awaitable[CallToolResult]]


def _encode(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return str(value)


def to_json(data: Any) -> str:
    """Render a payload for the caller."""
    return json.dumps(data, indent=2, default=_encode, ensure_ascii=False)


def format_context(context: Optional[ResponseContext]) -> str:
    """Trailer with identifiers the caller can reuse in follow-up calls."""
    if context is None:
        return ""
    parts = [
        f"{key}: {value}"
        for key, value in context.model_dump().items()
        if value is not None and value != ""
    ]
    if not parts:
        return ""
    return "\n\n---context\n" + "\n".join(parts) + "\n---"


def success(text: str, context: Optional[ResponseContext] = None) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text + format_context(context))],
        isError=False,
    )


def error(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=message)],
        isError=True,
    )


def required(field_name: str) -> CallToolResult:
    """Error for a missing required argument."""
    return error(f"Error: {field_name} required")


def error_text(exc: GitScrumMCPError) -> str:
    """Structured error payload: kind, message and any details of the error."""
    return to_json(exc.to_dict())


def invalid_arguments(exc: PydanticValidationError) -> ValidationError:
    """Name the arguments a request model rejected."""
    fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
    return ValidationError(f"Invalid value for {', '.join(fields)}")


async def execute_action(
    handlers: dict[str, ActionHandler],
    action: Optional[str],
    ctx: ToolContext,
    args: dict[str, Any],
    tool: str,
) -> CallToolResult:
    """
    Run the handler registered for an action.

    Args:
        handlers: Action name to handler map of one tool
        action: Requested action
        ctx: Context for the call
        args: Tool arguments
        tool: Tool name, for error messages

    Returns:
        Handler result, or an error result for unknown actions and failures
    """
    handler = handlers.get(action) if action else None
    if handler is None:
        return error(
            f"Unknown action: {action} for tool {tool}. "
            f"Available actions: {', '.join(handlers)}"
        )

    try:
        return await handler(ctx, args)
    except GitScrumMCPError as e:
        logger.info(f"{tool}.{action} failed ({e.kind}): {e.message}")
        return error(error_text(e))
    except PydanticValidationError as e:
        logger.info(f"{tool}.{action} rejected arguments: {e}")
        return error(error_text(invalid_arguments(e)))
    except Exception as e:
        logger.exception(f"Unexpected error in {tool}.{action}")
        return error(str(e) or e.__class__.__name__)


async def resolve_scope(ctx: ToolContext, args: dict[str, Any]) -> Optional[ResolvedContext]:
    """
    Company and project slugs for a project scoped action.

    A project slug or name without company_slug is looked up through search.
    """
    return await resolve_project_context(
        ctx.search,
        company_slug=args.get("company_slug"),
        project_slug=args.get("project_slug"),
        project_name=args.get("project_name"),
    )
