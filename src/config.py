"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_CHANNEL_NAME,
    DEFAULT_WEBHOOK_PATH,
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_VERSION,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Facebook Configuration
    facebook_page_access_token: str = Field(
        ..., description="Facebook Page access token"
    )
    facebook_verify_token: str = Field(..., description="Webhook verification token")
    facebook_app_secret: str | None = Field(
        default=None,
        description="Facebook App secret (optional, for signature verification)",
    )
    facebook_verify_signature: bool = Field(
        default=False,
        description="Drop webhook deliveries whose X-Hub-Signature-256 does not match",
    )
    facebook_graph_api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION,
        description="Graph API version used for the Send API",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Routing
    webhook_path: str = Field(
        default=DEFAULT_WEBHOOK_PATH, description="URI path of the webhook"
    )
    send_api_path: str | None = Field(
        default=None,
        description="URI path of the push send endpoint (disabled when unset)",
    )
    channel_name: str = Field(
        default=DEFAULT_CHANNEL_NAME,
        description="Channel name passed to the bot notification handler",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    @field_validator("webhook_path", "send_api_path")
    @classmethod
    def _path_must_be_absolute(cls, value: str | None) -> str | None:
        """Paths are used as router prefixes: '/name', no trailing slash."""
        if value is None:
            return value
        if not value.startswith("/"):
            raise ValueError("paths must start with '/'")
        value = value.rstrip("/")
        if not value:
            raise ValueError("paths must not be the root path")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
