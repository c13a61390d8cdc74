"""Configuration for the ingestion pipeline using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE


class IngestionConfig(BaseSettings):
    """Configuration for newsletter and URL ingestion.

    All settings are loaded from environment variables with the INGESTION_ prefix.

    :param request_timeout: Timeout in seconds when fetching linked pages.
    :param max_emails: Maximum emails fetched per newsletter sender.
    :param lookback_hours: How far back to look for emails when no watermark is given.
    :param process_urls: Whether extracted URLs are fetched and stored.
    :param user_agent: User-Agent header sent when fetching pages.
    """

    model_config = SettingsConfigDict(
        env_prefix="INGESTION_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    request_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Page fetch timeout in seconds",
    )
    max_emails: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum emails fetched per sender",
    )
    lookback_hours: int = Field(
        default=24,
        ge=1,
        description="Email lookback window in hours",
    )
    process_urls: bool = Field(
        default=True,
        description="Fetch, parse and store extracted URLs",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; NewsletterIngest/1.0)",
        description="User-Agent header for page fetches",
    )


@lru_cache
def get_ingestion_settings() -> IngestionConfig:
    """Get cached ingestion settings.

    :returns: The IngestionConfig instance.
    """
    return IngestionConfig()
