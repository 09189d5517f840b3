"""
Metadata enrichment configuration settings.

Controls the outbound Open Graph resolution providers, request identity
headers, timeouts, and background worker concurrency.

Dependencies: pydantic_settings
System role: Link metadata pipeline configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetadataSettings(BaseSettings):
    """Settings for link metadata resolution."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="METADATA_",
        case_sensitive=False,
        extra="ignore",
    )

    provider_url: str | None = Field(
        default=None,
        description="Custom provider URL prefix, tried before the built-in providers",
    )
    provider_format: str = Field(
        default="envelope_json",
        description="Response shape of the custom provider (envelope_json, flat_json, html)",
    )
    timeout_seconds: float = Field(
        default=15.0,
        description="Hard timeout per provider request in seconds",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; LinkdropBot/1.0; +https://linkdrop.local/bot)",
        description="User-Agent header sent to providers",
    )
    accept: str = Field(
        default="text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
        description="Accept header sent to providers",
    )
    accept_language: str = Field(
        default="en-US,en;q=0.9,zh-CN;q=0.8",
        description="Accept-Language header sent to providers",
    )
    max_content_length: int = Field(
        default=1_000_000,
        description="Maximum bytes read from a provider response body",
    )
    allow_private_targets: bool = Field(
        default=False,
        description="Allow direct page fetches to loopback, private and reserved addresses",
    )
    worker_concurrency: int = Field(
        default=4,
        description="Number of concurrent enrichment worker tasks",
    )

    @property
    def request_headers(self) -> dict[str, str]:
        """Fixed client identification headers for every provider request."""
        return {
            "User-Agent": self.user_agent,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
        }
