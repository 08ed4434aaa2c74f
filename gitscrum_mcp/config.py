"""Configuration for the GitScrum MCP server."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings loaded from GITSCRUM_* environment variables and an optional .env file.

    The access token itself is read by TokenStore, not from here.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITSCRUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = "https://services.gitscrum.com"
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".gitscrum")
    debug: bool = False
    timeout: float = 30.0
    upgrade_url: str = "https://gitscrum.com/pricing"


settings = Settings()
