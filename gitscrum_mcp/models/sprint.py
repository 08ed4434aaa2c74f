"""Sprint request models."""

from typing import Optional

from pydantic import BaseModel


class SprintRequest(BaseModel):
    """Body for creating or updating a sprint. Title is required on create only."""

    title: Optional[str] = None
    description: Optional[str] = None
    date_start: Optional[str] = None  # YYYY-MM-DD
    date_finish: Optional[str] = None  # YYYY-MM-DD
    color: Optional[str] = None
    is_private: Optional[bool] = None
    close_on_finish: Optional[bool] = None
