"""
ftsmeili Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "ftsmeili"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # API SERVER
    # =========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: str = "http://localhost:3000"

    # =========================================================================
    # STORED CONFIGURATION
    # =========================================================================
    # JSON file written by the settings endpoint and `ftsmeili configure`.
    # Empty means configuration only lives in memory.
    CONFIG_PATH: str = "data/ftsmeili.json"

    # =========================================================================
    # MEILISEARCH (defaults for keys never written to the stored configuration)
    # =========================================================================
    MEILISEARCH_HOST: str = ""
    MEILISEARCH_INDEX: str = ""
    MEILISEARCH_API_KEY: str = ""
    MEILISEARCH_TIMEOUT: float = 10.0
    MEILISEARCH_WAIT_FOR_TASKS: bool = False
    MEILISEARCH_TASK_TIMEOUT_MS: int = 5000
    MEILISEARCH_TASK_POLL_INTERVAL_MS: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
