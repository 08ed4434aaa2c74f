"""Task type service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class TaskTypeService:
    """Service for project task types (Bug, Feature, ...)."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def create_task_type(
        self, project_slug: str, company_slug: str, title: str, color: str
    ) -> Any:
        """
        Create a task type in a project.

        Returns:
            Raw API response
        """
        return await self.client.post(
            "project-templates/type",
            {"title": title, "color": color, "type": "issues"},
            params={"company_slug": company_slug, "project_slug": project_slug},
        )

    async def update_task_type(
        self,
        type_id: int,
        project_slug: str,
        company_slug: str,
        title: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        data = {}
        if title is not None:
            data["title"] = title
        if color is not None:
            data["color"] = color
        await self.client.put(
            f"project-templates/type/{type_id}",
            data,
            params={"company_slug": company_slug, "project_slug": project_slug},
        )

    async def assign_to_task(
        self, task_uuid: str, type_id: int, project_slug: str, company_slug: str
    ) -> Any:
        """Set the type of a task. Returns the updated task."""
        response = await self.client.put(
            f"tasks/{task_uuid}",
            {"config_issue_type_id": type_id},
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
        return unwrap_data(response)
