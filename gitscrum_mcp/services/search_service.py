"""Global search service."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data


class SearchService:
    """Service for the cross-entity search endpoint."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def search(
        self,
        query: str,
        categories: Optional[str] = None,
        limit: Optional[int] = None,
        company_slug: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Search tasks, projects, user stories and other entities.

        Args:
            query: Search text
            categories: Comma separated categories (tasks, projects, ...)
            limit: Maximum results per category
            company_slug: Restrict the search to one workspace

        Returns:
            Results keyed by category, each with an 'items' list
        """
        response = await self.client.get(
            "search",
            params={
                "q": query,
                "categories": categories,
                "limit": limit,
                "company_slug": company_slug,
            },
        )
        return unwrap_data(response, {}) or {}
