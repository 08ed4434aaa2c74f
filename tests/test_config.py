"""Tests for settings loading."""

from pathlib import Path

from gitscrum_mcp.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GITSCRUM_API_URL", "GITSCRUM_DEBUG", "GITSCRUM_CONFIG_DIR"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_url == "https://services.gitscrum.com"
        assert settings.config_dir == Path.home() / ".gitscrum"
        assert settings.debug is False
        assert settings.timeout == 30.0

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GITSCRUM_API_URL", "http://localhost:8000")
        monkeypatch.setenv("GITSCRUM_DEBUG", "true")
        monkeypatch.setenv("GITSCRUM_CONFIG_DIR", str(tmp_path))

        settings = Settings(_env_file=None)

        assert settings.api_url == "http://localhost:8000"
        assert settings.debug is True
        assert settings.config_dir == tmp_path
