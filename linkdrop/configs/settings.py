"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from linkdrop.configs.base import BaseSettings
from linkdrop.configs.database import DatabaseSettings
from linkdrop.configs.metadata import MetadataSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)

    default_page_size: int = Field(default=20, description="Default page size for link listings")
    max_page_size: int = Field(default=100, description="Upper bound for the limit query parameter")


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from linkdrop.configs import get_settings
        settings = get_settings()
    """
    return Settings()
