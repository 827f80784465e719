"""Tests for environment-driven settings."""
from study_dashboard.core.config import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        settings = get_settings()
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.log_format == "text"
        assert settings.upcoming_exam_limit == 5

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
        monkeypatch.setenv("UPCOMING_EXAM_LIMIT", "3")
        settings = get_settings()
        assert settings.database_url == "sqlite+aiosqlite:///./other.db"
        assert settings.upcoming_exam_limit == 3
