"""Exception hierarchy for the GitScrum MCP server."""

from typing import Any, Optional


class GitScrumMCPError(Exception):
    """Base exception for all GitScrum MCP errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Structured form used in tool error payloads."""
        return {"error": self.kind, "message": self.message}


class ValidationError(GitScrumMCPError):
    """A required field is missing or malformed. Raised before any network call."""

    kind = "validation"


class TokenStorageError(GitScrumMCPError):
    """The token file could not be written."""

    kind = "token_storage"


class APIError(GitScrumMCPError):
    """The backend answered with an error status."""

    kind = "api_error"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BadRequestError(APIError):
    kind = "bad_request"


class UnauthorizedError(APIError):
    """401: the user has to authenticate again."""

    kind = "unauthorized"


class ForbiddenError(APIError):
    kind = "forbidden"


class NotFoundError(APIError):
    kind = "not_found"


class ConflictError(APIError):
    kind = "conflict"


class UnprocessableError(APIError):
    """422 with per-field validation errors."""

    kind = "unprocessable"

    def __init__(
        self,
        message: str,
        errors: Optional[dict[str, list[str]]] = None,
        status_code: int = 422,
    ) -> None:
        super().__init__(message, status_code)
        self.errors = errors or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "validation_failed",
            "message": self.message,
            "validation_errors": self.errors,
        }


class RateLimitedError(APIError):
    """429 from the MCP rate limiter."""

    kind = "rate_limited"

    def __init__(
        self,
        message: str,
        limit: Optional[str] = None,
        remaining: Optional[str] = None,
        reset: Optional[str] = None,
        upgrade_url: Optional[str] = None,
    ) -> None:
        super().__init__(message, 429)
        self.limit = limit
        self.remaining = remaining
        self.reset = reset
        self.upgrade_url = upgrade_url

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "rate_limit_exceeded",
            "message": self.message,
            "limit": self.limit,
            "remaining": self.remaining,
            "reset": self.reset,
            "upgrade_url": self.upgrade_url,
        }


class ServerError(APIError):
    kind = "server_error"


class NetworkUnreachableError(GitScrumMCPError):
    """Transport failure before any HTTP status was received."""

    kind = "network_unreachable"

    def __init__(self, url: str, reason: str = "") -> None:
        message = f"Network error: Unable to connect to {url}. Is the API server running?"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.url = url


class DeviceAuthError(GitScrumMCPError):
    """Terminal failure of the device authorization grant."""

    kind = "device_auth"

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_code = error_code

    @property
    def is_expired(self) -> bool:
        return self.error_code == "expired_token" or "expired" in self.message.lower()

    @property
    def is_denied(self) -> bool:
        return self.error_code == "access_denied" or "denied" in self.message.lower()


class IdentifierNotFoundError(GitScrumMCPError):
    """A human readable title did not match any candidate returned by the API."""

    kind = "not_resolved"

    def __init__(self, title: str, candidates: list[dict[str, Any]]) -> None:
        super().__init__(f"'{title}' not found")
        self.title = title
        self.candidates = candidates

    def to_payload(self, name: str) -> dict[str, Any]:
        return {
            "error": f"{name}_not_found",
            name: self.title,
            "available": self.candidates,
        }
