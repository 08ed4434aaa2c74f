"""Workspace and project context models."""

from typing import Optional

from pydantic import BaseModel


class ResolvedContext(BaseModel):
    """Workspace and project slugs resolved for a request."""

    company_slug: str
    project_slug: str


class ResponseContext(BaseModel):
    """Identifiers echoed back to the caller so it can reuse them in the next call."""

    company_slug: Optional[str] = None
    project_slug: Optional[str] = None
    sprint_slug: Optional[str] = None
    user_story_slug: Optional[str] = None
    task_uuid: Optional[str] = None


class ProjectMatch(BaseModel):
    """Project found through search."""

    project_slug: str
    company_slug: str
    name: str
    workspace_slug: str
