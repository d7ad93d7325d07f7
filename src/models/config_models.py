"""Adapter configuration models."""

from pydantic import BaseModel, ConfigDict, Field

from src.config import Settings
from src.constants import DEFAULT_CHANNEL_NAME, DEFAULT_WEBHOOK_PATH


class AdapterConfig(BaseModel):
    """Static configuration of the Messenger webhook adapter.

    Built once at application startup and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    app_secret: str | None = Field(
        default=None, description="Facebook App secret"
    )
    validation_token: str = Field(..., description="Webhook verification token")
    page_access_token: str = Field(..., description="Facebook Page access token")
    webhook_path: str = Field(default=DEFAULT_WEBHOOK_PATH)
    send_api_path: str | None = Field(default=None)
    channel_name: str = Field(default=DEFAULT_CHANNEL_NAME)
    verify_signature: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdapterConfig":
        """Build the adapter configuration from application settings."""
        return cls(
            app_secret=settings.facebook_app_secret,
            validation_token=settings.facebook_verify_token,
            page_access_token=settings.facebook_page_access_token,
            webhook_path=settings.webhook_path,
            send_api_path=settings.send_api_path,
            channel_name=settings.channel_name,
            verify_signature=settings.facebook_verify_signature,
        )
