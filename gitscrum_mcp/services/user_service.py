"""User service for GitScrum API operations."""

from gitscrum_mcp.core.client import GitScrumClient, unwrap_data
from gitscrum_mcp.models.user import UserInfo


class UserService:
    """Service for the authenticated user."""

    def __init__(self, client: GitScrumClient) -> None:
        self.client = client

    async def get_me(self) -> UserInfo:
        """
        Get the user that owns the current token.

        Returns:
            User name, email and username
        """
        response = await self.client.post("auth/me", {})
        return UserInfo.model_validate(unwrap_data(response, {}) or {})
