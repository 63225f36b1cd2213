"""
Shared configuration management for the user-type access layer.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="USERTYPES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    json_logs: bool = Field(default=True)


class UserTypesConfig(BaseConfig):
    """Settings for user-type resolution against the remote store."""

    service_name: str = "user-types"

    # Remote store (PostgREST endpoint)
    store_url: str = Field(default="http://localhost:54321")
    store_api_key: Optional[str] = Field(default=None)
    store_timeout_seconds: float = Field(default=10.0, gt=0)

    # Cache
    cache_ttl_seconds: float = Field(default=300.0, gt=0)

    # Retry policy
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = Field(default=1.0, ge=0)

    # Observability
    enable_metrics: bool = Field(default=True)


def get_config(**overrides) -> UserTypesConfig:
    """Get configuration, applying keyword overrides on top of the environment."""
    return UserTypesConfig(**overrides)
