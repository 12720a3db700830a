"""
Unit tests for Pydantic Settings configuration.

Tests settings loading and validation.
"""

import pytest

from ridewitus.config.settings import Settings


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_loads_from_env(self, monkeypatch):
        """Settings should load from environment variables."""
        monkeypatch.setenv("JWT_SECRET", "from-env")
        monkeypatch.setenv("DATABASE_POOL_SIZE", "12")

        settings = Settings(_env_file=None)

        assert settings.jwt_secret == "from-env"
        assert settings.database_pool_size == 12

    def test_settings_has_defaults(self, monkeypatch):
        """Settings should have sensible defaults."""
        for key in ("ENVIRONMENT", "LOG_LEVEL", "DEBUG", "APP_URL"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.auth_cookie_name == "auth_token"

    @pytest.mark.parametrize("environment,expected", [("production", True), ("PRODUCTION", True), ("development", False)])
    def test_is_production_property(self, environment, expected):
        assert Settings(_env_file=None, environment=environment).is_production is expected

    def test_missing_required_lists_absent_keys(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.missing_required == ["JWT_SECRET", "DATABASE_URL"]

    def test_missing_required_empty_when_configured(self):
        settings = Settings(_env_file=None, jwt_secret="s", database_url="sqlite:///x.db")
        assert settings.missing_required == []

    def test_allowed_origins_includes_localhost(self):
        """allowed_origins should include localhost for development."""
        settings = Settings(_env_file=None)
        assert "http://localhost:3000" in settings.allowed_origins
