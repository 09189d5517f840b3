"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from linkdrop.configs.database import DatabaseSettings
from linkdrop.configs.metadata import MetadataSettings
from linkdrop.configs.settings import Settings, get_settings

__all__ = ["DatabaseSettings", "MetadataSettings", "Settings", "get_settings"]
