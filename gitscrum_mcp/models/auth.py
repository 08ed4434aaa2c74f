"""Device authorization and token models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DeviceCode(BaseModel):
    """Device code issued by the authorization server (RFC 8628 section 3.2)."""

    device_code: str
    user_code: str
    verification_uri: str
    verification_uri_complete: Optional[str] = None
    expires_in: int
    interval: int = 5

    class Config:
        frozen = True

    @property
    def verification_url(self) -> str:
        """URL to show the user, preferring the one with the code embedded."""
        return self.verification_uri_complete or self.verification_uri


class TokenResponse(BaseModel):
    """Access token returned once the user approves the device."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None


class AuthErrorBody(BaseModel):
    """Error body of the OAuth endpoints."""

    error: str = "unknown_error"
    error_description: Optional[str] = None


class StoredToken(BaseModel):
    """Content of the token file."""

    token: str
    saved_at: datetime = Field(alias="savedAt")

    class Config:
        populate_by_name = True


class PendingAuth(BaseModel):
    """Device code waiting for approval, kept between auth_login and auth_complete.

    Timestamps are epoch milliseconds.
    """

    device_code: str
    created_at: int
    expires_at: int

    def is_expired(self, now_ms: int) -> bool:
        # Still valid at exactly expires_at
        return now_ms > self.expires_at
