"""User story service for GitScrum API operations."""

from typing import Any, Optional

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data
from gitscrum_mcp.models.userstory import CreateUserStoryRequest, UpdateUserStoryRequest


class UserStoryService:
    """Service for managing GitScrum user stories."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def list_user_stories(self, project_slug: str, company_slug: str) -> Any:
        """
        List user stories of a project.

        Args:
            project_slug: Project slug
            company_slug: Workspace slug

        Returns:
            Paginated API response, stories under 'data'
        """
        return await self.client.get(
            "user-stories",
            params={"project_slug": project_slug, "company_slug": company_slug},
        )

    async def list_all_user_stories(
        self, per_page: Optional[int] = None, page: Optional[int] = None
    ) -> Any:
        """List user stories across all workspaces."""
        return await self.client.get(
            "user-stories/all-workspaces",
            params={"per_page": per_page, "page": page},
        )

    async def get_user_story(self, slug: str, project_slug: str, company_slug: str) -> Any:
        """
        Get user story details.

        Args:
            slug: User story slug
            project_slug: Project slug
            company_slug: Workspace slug

        Returns:
            User story details
        """
        response = await self.client.get(
            f"user-stories/{slug}",
            params={"project_slug": project_slug, "company_slug": company_slug},
        )
        return unwrap_data(response)

    async def create_user_story(self, request: CreateUserStoryRequest) -> Any:
        """
        Create a new user story.

        Args:
            request: User story creation request

        Returns:
            Created user story
        """
        response = await self.client.post(
            "user-stories",
            request.model_dump(exclude_none=True),
        )
        return unwrap_data(response)

    async def update_user_story(self, slug: str, request: UpdateUserStoryRequest) -> Any:
        """
        Update an existing user story.

        Args:
            slug: User story slug
            request: User story update request

        Returns:
            Raw API response
        """
        return await self.client.put(
            f"user-stories/{slug}",
            request.model_dump(exclude_none=True),
        )
