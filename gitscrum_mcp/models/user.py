"""User models."""

from typing import Optional

from pydantic import BaseModel


class UserInfo(BaseModel):
    """Authenticated user as returned by auth/me."""

    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None

    class Config:
        extra = "ignore"
