"""
Configuration module using pydantic-settings.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GRIDIRON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_title: str = "Gridiron Draft API"
    api_version: str = "0.1.0"
    api_description: str = "Snake drafts and live fantasy scoring for NFL leagues"
    debug: bool = False

    # Environment / logging
    environment: str = "development"
    log_level: str | None = None

    # Database
    database_url: str = "sqlite:///./gridiron_draft.db"
    database_echo: bool = False

    # ESPN site API
    espn_base_url: str = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
    espn_timeout: float = 15.0
    espn_max_retries: int = 2
    espn_backoff: float = 0.5  # seconds, doubled per retry

    # Draft rules
    roster_size: int = 6
    min_teams: int = 2
    max_teams: int = 12

    # Catalog seeding
    seed_delay: float = 0.25  # pause between roster fetches

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
