"""
FloodDataSync - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Report/sensor store
    store_backend: str = "http"  # http, sql, memory
    store_base_url: str = "http://localhost:3000"
    store_timeout_seconds: float = 10.0

    # Database (used when store_backend == "sql")
    database_url: Optional[str] = None

    # Background refresh
    refresh_interval_seconds: float = 3.0

    # Peer validation thresholds
    validation_upvotes: int = 3
    validation_max_downvotes: int = 2
    rejection_downvotes: int = 3
    max_votes_per_report: int = 5

    # Dashboard map (central Lagos)
    map_center_lat: float = 6.5244
    map_center_lon: float = 3.3792
    map_zoom: int = 12

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
