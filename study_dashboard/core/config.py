"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Study Dashboard"
    debug: bool = False

    # Database (async driver; Alembic converts to a sync url)
    database_url: str = "sqlite+aiosqlite:///./study_dashboard.db"

    # Signs the auth cookie
    secret_key: str = "change-me-in-production-use-env"

    # Auth cookie (session-based for logged-in users)
    auth_cookie_name: str = "study_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days
    auth_cookie_secure: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json

    upcoming_exam_limit: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
