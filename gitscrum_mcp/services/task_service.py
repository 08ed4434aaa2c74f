"""Task service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data
from gitscrum_mcp.models.task import CreateTaskRequest, TaskFilters, UpdateTaskRequest


class TaskService:
    """Service for managing GitScrum tasks."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def get_my_tasks(self, per_page: int = 50) -> Any:
        """
        List tasks assigned to the current user across all workspaces.

        Args:
            per_page: Page size

        Returns:
            Paginated API response
        """
        return await self.client.get("tasks/all-workspaces", params={"per_page": per_page})

    async def get_today_tasks(self, limit: int = 20) -> Any:
        """List the current user's tasks due today."""
        return await self.client.get("tasks/my-today", params={"limit": limit})

    async def get_notifications(self) -> list:
        response = await self.client.get("feeds/notifications")
        return unwrap_data(response, []) or []

    async def get_notification_count(self) -> int:
        response = await self.client.get("feeds/notifications/count")
        return unwrap_data(response, 0) or 0

    async def get_task(self, task_uuid: str) -> Any:
        """
        Get task details.

        Args:
            task_uuid: Task UUID

        Returns:
            Task details including its project and company
        """
        response = await self.client.get(f"tasks/{task_uuid}")
        return unwrap_data(response)

    async def search_tasks(
        self, company_slug: str, project_slug: str, filters: TaskFilters
    ) -> Any:
        """
        Filter the tasks of a project.

        Args:
            company_slug: Workspace slug
            project_slug: Project slug
            filters: Filters with ids already resolved

        Returns:
            Paginated API response
        """
        params = {"company_slug": company_slug, "project_slug": project_slug}
        params.update(filters.to_query())
        return await self.client.get("tasks", params=params)

    async def create_task(self, request: CreateTaskRequest) -> Any:
        """
        Create a new task.

        Sprint and user story are passed by slug, the API links them.

        Args:
            request: Task creation request

        Returns:
            Created task
        """
        response = await self.client.post(
            "tasks",
            request.model_dump(exclude_none=True),
        )
        return unwrap_data(response)

    async def update_task(self, task_uuid: str, request: UpdateTaskRequest) -> Any:
        """
        Update an existing task.

        Args:
            task_uuid: Task UUID
            request: Task update request

        Returns:
            Updated task
        """
        response = await self.client.put(
            f"tasks/{task_uuid}",
            request.model_dump(exclude_none=True),
        )
        return unwrap_data(response)

    async def complete_task(self, task_uuid: str) -> Any:
        """Mark a task as done. Returns the raw API response."""
        return await self.client.put(f"tasks/{task_uuid}/complete", {})

    async def get_subtasks(self, task_uuid: str) -> list:
        response = await self.client.get(f"tasks/{task_uuid}/sub-tasks")
        return unwrap_data(response, []) or []

    async def get_task_by_code(self, code: str, company_slug: str, project_slug: str) -> Any:
        """Get a task by its human readable code, e.g. PROJ-123."""
        response = await self.client.get(
            f"tasks/by-code/{code}",
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
        return unwrap_data(response, response)

    async def duplicate_task(
        self,
        task_uuid: str,
        company_slug: str,
        project_slug: str,
        workflow_id: Optional[int] = None,
    ) -> Any:
        """
        Copy a task, optionally into another workflow column.

        Returns:
            The new task
        """
        body = {}
        if workflow_id is not None:
            body["config_workflow_id"] = workflow_id
        response = await self.client.post(
            f"tasks/{task_uuid}/duplicate",
            body,
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
        return unwrap_data(response, response)

    async def move_task(
        self,
        task_uuid: str,
        company_slug: str,
        project_slug: str,
        new_project_slug: str,
        new_workflow_id: Optional[int] = None,
    ) -> Any:
        """Move a task to another project of the same workspace."""
        body: dict[str, Any] = {"new_project_slug": new_project_slug}
        if new_workflow_id is not None:
            body["new_workflow_id"] = new_workflow_id
        response = await self.client.post(
            f"tasks/{task_uuid}/move",
            body,
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
        return unwrap_data(response, response)
