"""Workflow (Kanban column) service for GitScrum API operations."""

from typing import Any

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class WorkflowService:
    """Service for project Kanban columns."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def create_workflow(
        self, project_slug: str, company_slug: str, data: dict[str, Any]
    ) -> Any:
        """
        Create a Kanban column.

        Args:
            project_slug: Project slug
            company_slug: Workspace slug
            data: title, and optionally color and status (0 todo, 1 done, 2 in progress)

        Returns:
            Created column
        """
        response = await self.client.post(
            "projects-workflows/",
            data,
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
        return unwrap_data(response)

    async def update_workflow(
        self,
        workflow_id: int,
        project_slug: str,
        company_slug: str,
        data: dict[str, Any],
    ) -> None:
        await self.client.put(
            f"projects-workflows/{workflow_id}/",
            data,
            params={"company_slug": company_slug, "project_slug": project_slug},
        )
