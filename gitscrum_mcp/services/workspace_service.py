"""Workspace service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class WorkspaceService:
    """Service for GitScrum workspaces (companies)."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def list_workspaces(
        self,
        per_page: Optional[int] = None,
        page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Any:
        """
        List workspaces the user belongs to.

        Returns:
            Paginated API response
        """
        return await self.client.get(
            "workspaces",
            params={"per_page": per_page, "page": page, "search": search},
        )

    async def find_workspace_by_name(self, name: str) -> Optional[dict[str, Any]]:
        """
        Find a workspace by name.

        Args:
            name: Workspace name, matched case-insensitively

        Returns:
            The exact match if any, else the first search hit, else None
        """
        response = await self.list_workspaces(per_page=5, search=name)
        workspaces = unwrap_data(response, []) or []
        if not workspaces:
            return None

        wanted = name.lower()
        for workspace in workspaces:
            if str(workspace.get("name", "")).lower() == wanted:
                return workspace
        return workspaces[0]

    async def get_workspace(self, company_slug: str) -> Any:
        """Get workspace details."""
        response = await self.client.get(f"workspaces/{company_slug}")
        return unwrap_data(response)

    async def get_workspace_stats(self, company_slug: str) -> Any:
        """Get workspace statistics."""
        response = await self.client.get(f"workspaces/{company_slug}/stats")
        return unwrap_data(response)
