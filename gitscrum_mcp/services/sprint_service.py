"""Sprint service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data
from gitscrum_mcp.models.sprint import SprintRequest


class SprintService:
    """Service for managing GitScrum sprints."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    @staticmethod
    def _scope(project_slug: str, company_slug: str) -> dict[str, str]:
        return {"project_slug": project_slug, "company_slug": company_slug}

    async def list_sprints(self, project_slug: str, company_slug: str) -> Any:
        """
        List sprints of a project.

        Returns:
            Paginated API response, sprints under 'data'
        """
        return await self.client.get("sprints", params=self._scope(project_slug, company_slug))

    async def list_all_sprints(self) -> Any:
        """List sprints across all workspaces."""
        return await self.client.get("sprints/all-workspaces")

    async def get_sprint(self, slug: str, project_slug: str, company_slug: str) -> Any:
        response = await self.client.get(
            f"sprints/{slug}", params=self._scope(project_slug, company_slug)
        )
        return unwrap_data(response)

    async def _sprint_resource(
        self,
        slug: str,
        resource: str,
        project_slug: str,
        company_slug: str,
        extra: Optional[dict[str, Any]] = None,
    ) -> Any:
        params = self._scope(project_slug, company_slug)
        params.update(extra or {})
        response = await self.client.get(f"sprints/{slug}/{resource}", params=params)
        return unwrap_data(response)

    async def get_sprint_kpis(self, slug: str, project_slug: str, company_slug: str) -> Any:
        return await self._sprint_resource(slug, "kpis", project_slug, company_slug)

    async def get_sprint_stats(self, slug: str, project_slug: str, company_slug: str) -> Any:
        return await self._sprint_resource(slug, "stats", project_slug, company_slug)

    async def get_sprint_progress(self, slug: str, project_slug: str, company_slug: str) -> Any:
        return await self._sprint_resource(slug, "progress", project_slug, company_slug)

    async def get_sprint_metrics(self, slug: str, project_slug: str, company_slug: str) -> Any:
        return await self._sprint_resource(slug, "metrics", project_slug, company_slug)

    async def get_sprint_reports(
        self,
        slug: str,
        project_slug: str,
        company_slug: str,
        resource: Optional[str] = None,
        report_task: bool = False,
    ) -> Any:
        """
        Get sprint reports.

        Args:
            slug: Sprint slug
            project_slug: Project slug
            company_slug: Workspace slug
            resource: Report name (burndown, burnup, performance, ...)
            report_task: Include per task details

        Returns:
            Report data
        """
        return await self._sprint_resource(
            slug,
            "reports",
            project_slug,
            company_slug,
            {"resource": resource, "report_task": report_task or None},
        )

    async def create_sprint(
        self, project_slug: str, company_slug: str, request: SprintRequest
    ) -> Any:
        """
        Create a sprint.

        Returns:
            Created sprint
        """
        response = await self.client.post(
            "sprints",
            request.model_dump(exclude_none=True),
            params=self._scope(project_slug, company_slug),
        )
        return unwrap_data(response)

    async def update_sprint(
        self, slug: str, project_slug: str, company_slug: str, request: SprintRequest
    ) -> None:
        await self.client.put(
            f"sprints/{slug}",
            request.model_dump(exclude_none=True),
            params=self._scope(project_slug, company_slug),
        )
