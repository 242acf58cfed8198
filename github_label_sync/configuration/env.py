"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"

    # GitHub PAT settings
    GITHUB_PAT_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    # Canonical repository holding the label definitions. Falls back to the
    # repository GitHub Actions runs in.
    SOURCE_REPO: str | None = None
    GITHUB_REPOSITORY: str | None = None

    # Webhook payload written by GitHub Actions for the triggering event.
    GITHUB_EVENT_PATH: Path | None = None

    # Fan-out limits
    MAX_REPOSITORIES: int | None = None
    MAX_LABELS: int | None = None
    MAX_CONCURRENCY: int | None = None
    INCLUDE_SOURCE_REPO: bool = False


settings = Settings()
