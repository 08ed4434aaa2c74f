"""Label service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class LabelService:
    """Workspace labels and their attachment to projects and tasks."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def list_workspace_labels(self, company_slug: str) -> list:
        response = await self.client.get(
            "projects-labels", params={"company_slug": company_slug}
        )
        return unwrap_data(response, []) or []

    async def create_label(self, company_slug: str, title: str, color: str) -> Any:
        """
        Create a workspace label.

        Args:
            company_slug: Workspace slug
            title: Label title
            color: 6 digit hex color without '#'

        Returns:
            Created label
        """
        response = await self.client.post(
            "projects-labels",
            {"title": title, "color": color},
            params={"company_slug": company_slug},
        )
        return unwrap_data(response)

    async def update_label(
        self,
        label_slug: str,
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
            f"projects-labels/{label_slug}",
            data,
            params={"company_slug": company_slug},
        )

    async def attach_to_project(
        self, label_slug: str, project_slug: str, company_slug: str
    ) -> None:
        await self.client.post(
            f"projects-labels/{label_slug}/attach",
            {"slug": label_slug},
            params={"company_slug": company_slug, "project_slug": project_slug},
        )

    async def detach_from_project(
        self, label_slug: str, project_slug: str, company_slug: str
    ) -> None:
        await self.client.delete(
            f"projects-labels/{label_slug}/detach",
            params={"company_slug": company_slug, "project_slug": project_slug},
        )

    async def toggle_on_task(
        self, task_uuid: str, label_slug: str, project_slug: str, company_slug: str
    ) -> Any:
        """Add the label to the task, or remove it when already present."""
        return await self.client.post(
            f"task-labels/{label_slug}/toggle",
            {},
            params={
                "company_slug": company_slug,
                "project_slug": project_slug,
                "task_uuid": task_uuid,
            },
        )
