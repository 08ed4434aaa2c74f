"""Task request models."""

from typing import Optional, Union

from pydantic import BaseModel, Field


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""

    title: str
    project_slug: str
    company_slug: str
    description: Optional[str] = None
    workflow_id: Optional[int] = None
    effort_id: Optional[int] = None
    type_id: Optional[int] = None
    usernames: Optional[list[str]] = None
    label_ids: Optional[list[int]] = None
    due_date: Optional[str] = None  # YYYY-MM-DD
    start_date: Optional[str] = None  # YYYY-MM-DD
    estimated_minutes: Optional[Union[int, float]] = None
    sprint_slug: Optional[str] = None
    user_story_slug: Optional[str] = None
    parent_id: Optional[str] = None
    is_bug: Optional[bool] = None
    is_blocker: Optional[bool] = None


class UpdateTaskRequest(BaseModel):
    """
    Request model for updating a task.

    The update endpoint expects database column names for effort and type,
    and usernames under 'members'.
    """

    company_slug: str
    project_slug: str
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    start_date: Optional[str] = None
    estimated_minutes: Optional[Union[int, float]] = None
    is_blocker: Optional[bool] = None
    is_bug: Optional[bool] = None
    is_archived: Optional[bool] = None
    label_ids: Optional[list[int]] = None
    workflow_id: Optional[int] = None
    config_issue_effort_id: Optional[int] = None
    config_issue_type_id: Optional[int] = None
    sprint_id: Optional[int] = None
    user_story_id: Optional[int] = None
    members: Optional[list[str]] = None


class TaskFilters(BaseModel):
    """
    Filters for the task search endpoint.

    Workflow, label, type, effort, sprint and user story filters take
    numeric ids (comma separated for labels).
    """

    title: Optional[str] = None
    description: Optional[str] = None
    number: Optional[str] = None
    workflow: Optional[str] = None
    labels: Optional[str] = None
    type: Optional[str] = None
    effort: Optional[str] = None
    sprint: Optional[str] = None
    user_story: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    closed_at: Optional[str] = None
    users: Optional[str] = None
    is_blocker: bool = False
    is_bug: bool = False
    unassigned: bool = False
    is_archived: bool = False
    per_page: int = Field(default=50, ge=1, le=100)
    page: Optional[int] = None

    def to_query(self) -> dict:
        """Query parameters as named by the API."""
        params: dict = {"per_page": self.per_page}
        for name in (
            "page", "title", "description", "number", "status", "users",
            "start_date", "due_date", "created_at", "closed_at",
        ):
            value = getattr(self, name)
            if value:
                params[name] = value
        for flag in ("is_blocker", "is_bug", "unassigned", "is_archived"):
            if getattr(self, flag):
                params[flag] = 1

        # Id filters use plural parameter names
        renamed = {
            "workflow": "workflows",
            "labels": "labels",
            "type": "types",
            "effort": "efforts",
            "sprint": "sprints",
            "user_story": "user_stories",
        }
        for name, param in renamed.items():
            value = getattr(self, name)
            if value:
                params[param] = value
        return params
