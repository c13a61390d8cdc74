"""Configuration for AI summarisation using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE
from src.summarisation.models import DEFAULT_MAX_LENGTH


class SummarisationConfig(BaseSettings):
    """Configuration for the summarisation providers.

    All settings are loaded from environment variables with the SUMMARISATION_
    prefix. Providers are tried in the order of ``model_ids``.

    :param enabled: Whether AI summarisation is used at all.
    :param region_name: AWS region hosting the Bedrock models.
    :param model_ids: Bedrock model IDs, in the order they are tried.
    :param max_length: Default maximum summary length in words.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUMMARISATION_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Use AI summarisation")
    region_name: str = Field(default="eu-west-2", description="AWS region for Bedrock")
    model_ids: list[str] = Field(
        default_factory=lambda: [
            "global.anthropic.claude-haiku-4-5-20251001-v1:0",
            "global.anthropic.claude-sonnet-4-5-20250929-v1:0",
        ],
        description="Bedrock model IDs in fallback order",
    )
    max_length: int = Field(
        default=DEFAULT_MAX_LENGTH,
        ge=10,
        le=1000,
        description="Default maximum summary length in words",
    )


@lru_cache
def get_summarisation_settings() -> SummarisationConfig:
    """Get cached summarisation settings.

    :returns: The SummarisationConfig instance.
    """
    return SummarisationConfig()
