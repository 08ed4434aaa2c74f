"""User story request models."""

from typing import Optional

from pydantic import BaseModel


class CreateUserStoryRequest(BaseModel):
    """Request model for creating a user story."""

    title: str
    project_slug: str
    company_slug: str
    additional_information: Optional[str] = None
    acceptance_criteria: Optional[str] = None
    epic_uuid: Optional[str] = None
    user_story_priority_id: Optional[int] = None


class UpdateUserStoryRequest(BaseModel):
    """Request model for updating a user story."""

    project_slug: str
    company_slug: str
    title: Optional[str] = None
    additional_information: Optional[str] = None
    acceptance_criteria: Optional[str] = None
    epic_uuid: Optional[str] = None
    user_story_priority_id: Optional[int] = None
