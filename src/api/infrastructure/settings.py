"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set credentials explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AtlasSettings(BaseSettings):
    """Atlas Admin API connection settings.

    Environment variables:
        ATLAS_BASE_URL: Atlas base URL (default: https://cloud.mongodb.com)
        ATLAS_PUBLIC_KEY: Programmatic API key public part
        ATLAS_PRIVATE_KEY: Programmatic API key private part (required in production)
        ATLAS_REQUEST_TIMEOUT_SECONDS: Per-request timeout (default: 30)
        ATLAS_ITEMS_PER_PAGE: Page size for list endpoints (default: 500)
    """

    model_config = SettingsConfigDict(
        env_prefix="ATLAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://cloud.mongodb.com",
        description="Atlas base URL",
    )
    public_key: str = Field(default="", description="API key public part")
    private_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key private part",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout in seconds",
        gt=0,
    )
    items_per_page: int = Field(
        default=500,
        description="Page size for list endpoints",
        ge=1,
        le=500,
    )


class DrainSettings(BaseSettings):
    """Settings for the wait on dependent clusters before project deletion.

    Environment variables:
        ATLAS_DRAIN_POLL_INTERVAL_SECONDS: Delay between polls (default: 30)
        ATLAS_DRAIN_TIMEOUT_SECONDS: Upper bound on the wait (default: 1800)
        ATLAS_DRAIN_MAX_CONSECUTIVE_RETRIES: Failed listings tolerated in a row (default: 20)
    """

    model_config = SettingsConfigDict(
        env_prefix="ATLAS_DRAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    poll_interval_seconds: float = Field(
        default=30.0,
        description="Delay between two polls of the dependents listing",
        ge=0,
    )
    timeout_seconds: float = Field(
        default=1800.0,
        description="Upper bound on the whole wait",
        gt=0,
    )
    max_consecutive_retries: int = Field(
        default=20,
        description="Consecutive polls without a listing before giving up",
        ge=0,
    )

    @model_validator(mode="after")
    def validate_interval_within_timeout(self) -> "DrainSettings":
        """Validate poll interval <= timeout."""
        if self.poll_interval_seconds > self.timeout_seconds:
            raise ValueError(
                f"poll_interval_seconds ({self.poll_interval_seconds}) must be <= "
                f"timeout_seconds ({self.timeout_seconds})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Atlas Project Reconciler", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def atlas(self) -> AtlasSettings:
        """Get Atlas API settings."""
        return get_atlas_settings()

    @property
    def drain(self) -> DrainSettings:
        """Get dependents drain settings."""
        return get_drain_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_atlas_settings() -> AtlasSettings:
    """Get cached Atlas API settings."""
    return AtlasSettings()


@lru_cache
def get_drain_settings() -> DrainSettings:
    """Get cached dependents drain settings."""
    return DrainSettings()
