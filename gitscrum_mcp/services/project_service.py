"""Project service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class ProjectService:
    """Service for projects and their templates (workflows, types, efforts)."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def create_project(self, company_slug: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Create a project in a workspace.

        Args:
            company_slug: Workspace slug
            data: Project fields (name, description, visibility, ...)

        Returns:
            The new project slug and name
        """
        response = await self.client.post(
            "projects", data, params={"company_slug": company_slug}
        )
        project = unwrap_data(response, {}) or {}
        return {"project_slug": project.get("slug"), "name": project.get("name")}

    async def list_projects(self, company_slug: str, status: Optional[str] = None) -> Any:
        """
        List projects of a workspace.

        Returns:
            Paginated API response
        """
        return await self.client.get(
            "projects",
            params={"company_slug": company_slug, "per_page": 100, "status": status},
        )

    async def get_project(self, project_slug: str, company_slug: str) -> Any:
        response = await self.client.get(
            f"projects/{project_slug}", params={"company_slug": company_slug}
        )
        return unwrap_data(response)

    async def get_project_stats(self, project_slug: str, company_slug: str) -> Any:
        response = await self.client.get(
            f"projects/{project_slug}/stats", params={"company_slug": company_slug}
        )
        return unwrap_data(response)

    async def get_project_tasks(
        self, project_slug: str, company_slug: str, per_page: int = 50
    ) -> Any:
        """List tasks of a project. Returns the paginated API response."""
        return await self.client.get(
            "tasks",
            params={
                "project_slug": project_slug,
                "company_slug": company_slug,
                "per_page": per_page,
            },
        )

    async def _template(self, kind: str, project_slug: str, company_slug: str) -> list:
        response = await self.client.get(
            f"project-templates/{kind}",
            params={"project_slug": project_slug, "company_slug": company_slug},
        )
        return unwrap_data(response, []) or []

    async def get_workflows(self, project_slug: str, company_slug: str) -> list:
        """
        Get the workflow columns of a project.

        Returns:
            List of columns with id and title
        """
        return await self._template("workflow", project_slug, company_slug)

    async def get_types(self, project_slug: str, company_slug: str) -> list:
        """Get the task types of a project."""
        return await self._template("type", project_slug, company_slug)

    async def get_efforts(self, project_slug: str, company_slug: str) -> list:
        """Get the effort levels of a project."""
        return await self._template("effort", project_slug, company_slug)

    async def get_labels(self, project_slug: str, company_slug: str) -> list:
        """Get the labels available to tasks of a project."""
        response = await self.client.get(
            "task-labels",
            params={"project_slug": project_slug, "company_slug": company_slug},
        )
        return unwrap_data(response, []) or []

    async def get_members(self, project_slug: str, company_slug: str) -> Any:
        """Get the users that can be assigned to tasks of a project."""
        return await self.client.get(
            f"project-members/{project_slug}/assignees",
            params={"company_slug": company_slug},
        )
