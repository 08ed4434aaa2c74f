"""Local storage for the access token and the pending device code."""

import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from gitscrum_mcp.config import settings
from gitscrum_mcp.core.exceptions import TokenStorageError
from gitscrum_mcp.models.auth import PendingAuth, StoredToken

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "GITSCRUM_TOKEN"
TOKEN_FILE_NAME = "mcp-token.json"
PENDING_AUTH_FILE_NAME = "pending-auth.json"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _write_private(file_path: Path, content: str) -> None:
    """
    Write content atomically with owner-only permissions.

    The data goes to a temp file in the same directory which is then renamed
    over the target, so readers never see a partial file.

    Raises:
        OSError: If write or rename fails
    """
    temp_fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.tmp.",
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, 0o600)
        os.replace(temp_path, file_path)
    except OSError:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise


class TokenStore:
    """
    Stores the bearer token and the pending device code under the config directory.

    Token precedence: the GITSCRUM_TOKEN environment variable always wins over
    the saved token file.
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.config_dir = Path(config_dir) if config_dir else settings.config_dir
        self.token_file = self.config_dir / TOKEN_FILE_NAME
        self.pending_auth_file = self.config_dir / PENDING_AUTH_FILE_NAME
        self._clock = clock

    def _ensure_config_dir(self) -> None:
        if not self.config_dir.exists():
            self.config_dir.mkdir(parents=True, mode=0o700)
            os.chmod(self.config_dir, 0o700)

    # Token

    def get_token(self) -> Optional[str]:
        """
        Get the current token.

        Returns:
            The environment token if set, else the saved token, else None
        """
        env_token = os.environ.get(TOKEN_ENV_VAR)
        if env_token:
            return env_token

        try:
            content = self.token_file.read_text(encoding="utf-8")
            stored = StoredToken.model_validate_json(content)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, PydanticValidationError) as e:
            # A corrupt cache must not break status checks
            logger.debug(f"Ignoring unreadable token file {self.token_file}: {e}")
            return None

        return stored.token or None

    def token_source(self) -> Optional[str]:
        """Where the current token comes from: environment_variable, saved_token or None."""
        if os.environ.get(TOKEN_ENV_VAR):
            return "environment_variable"
        if self.get_token():
            return "saved_token"
        return None

    def has_token(self) -> bool:
        return self.get_token() is not None

    def save_token(self, token: str) -> None:
        """
        Overwrite the token file with the given token.

        Raises:
            TokenStorageError: If the file cannot be written
        """
        stored = StoredToken(token=token, saved_at=datetime.now(timezone.utc))
        try:
            self._ensure_config_dir()
            _write_private(
                self.token_file,
                stored.model_dump_json(by_alias=True, indent=2),
            )
        except OSError as e:
            logger.error(f"Failed to save token to {self.token_file}: {e}")
            raise TokenStorageError(
                "Could not save authentication token to disk"
            ) from e
        logger.info(f"Token saved to {self.token_file}")

    def clear_token(self) -> None:
        """Delete the token file. Missing file counts as success."""
        try:
            self.token_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clear token: {e}")

    # Pending device code

    def save_pending_device_code(self, device_code: str, expires_in: int) -> None:
        """Remember a device code until auth_complete consumes it or it expires."""
        now = self._clock()
        pending = PendingAuth(
            device_code=device_code,
            created_at=now,
            expires_at=now + expires_in * 1000,
        )
        try:
            self._ensure_config_dir()
            _write_private(self.pending_auth_file, pending.model_dump_json(indent=2))
        except OSError as e:
            logger.error(f"Failed to save pending device code: {e}")

    def get_pending(self) -> Optional[PendingAuth]:
        """Read the pending record, deleting it when expired."""
        try:
            content = self.pending_auth_file.read_text(encoding="utf-8")
            pending = PendingAuth.model_validate_json(content)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.debug(f"Ignoring unreadable pending auth file: {e}")
            return None

        if pending.is_expired(self._clock()):
            logger.info("Pending device code expired, removing it")
            self.clear_pending_device_code()
            return None
        return pending

    def get_pending_device_code(self) -> Optional[str]:
        pending = self.get_pending()
        return pending.device_code if pending else None

    def clear_pending_device_code(self) -> None:
        try:
            self.pending_auth_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to clear pending device code: {e}")

