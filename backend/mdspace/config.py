"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage (unset -> in-memory store)
    redis_url: str | None = None

    # Public URLs
    base_url: str = "http://localhost:8000"
    ui_origin: str = "http://localhost:8501"
    cors_origins: list[str] = ["*"]

    # Document lifecycle
    markdown_ttl_hours: int = 24
    max_files_per_user: int = 10

    # Payload limits
    max_content_bytes: int = 1024 * 1024
    max_comment_chars: int = 1000

    # Session cookie
    session_cookie_name: str = "mdspace_session"
    session_max_age_seconds: int = 24 * 3600
    session_cookie_secure: bool = False

    # Rate limiting (write requests per minute per session)
    writes_per_min: int = 30

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
