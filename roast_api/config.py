"""Configuration using pydantic-settings."""

import os
from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROAST_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = "0.0.0.0"  # nosec B104 - Required for container deployment
    port: int = 8000
    log_level: str = "INFO"
    log_file: str | None = None

    environment: Literal["development", "preview", "production"] = "development"

    # GitHub settings
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROAST_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    github_api_url: str = "https://api.github.com"
    contributions_api_url: str = "https://github-contributions-api.jogruber.de/v4"
    http_timeout: float | None = None

    # Model settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROAST_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    gemini_model: str = "gemini/gemini-1.5-flash-latest"
    llm_timeout: int | None = None

    # Counter settings
    redis_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROAST_REDIS_URL", "KV_URL"),
    )
    counter_key: str = "github_roaster_user_count"

    # Cache settings
    profile_cache_ttl_seconds: int = 3600

    @property
    def is_production(self) -> bool:
        """Check if running in the production deployment."""
        return self.environment == "production"

    @model_validator(mode="after")
    def validate_environment(self) -> "Settings":
        """Set environment from the hosting platform's VERCEL_ENV unless given explicitly."""
        if "environment" in self.model_fields_set:
            return self

        env = os.getenv("VERCEL_ENV", "").lower()
        if env in ("development", "preview", "production"):
            self.environment = env  # type: ignore[assignment]
        return self


settings = Settings()


def get_settings() -> Settings:
    """Get settings instance (for dependency injection)."""
    return settings
