"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Migrator settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Notion
    notion_api_key: str = ""
    notion_parent_page_id: str = ""
    notion_database_id: str = ""

    # Microsoft Graph (OneDrive downloads)
    graph_access_token: str = ""
    graph_base_url: str = "https://graph.microsoft.com/v1.0"

    # Batch fetching
    batch_concurrency: int = 5
    fetch_timeout_seconds: float = 30.0
    fetch_retry_attempts: int = 2

    # Link cache
    link_cache_ttl_seconds: int = 300
    link_cache_max_size: int = 1000

    # Hierarchy mapping
    max_depth: int = 10
    create_databases: bool = False

    # App
    environment: str = "development"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings. Lazy initialization to avoid import-time errors."""
    return Settings()
