"""FastAPI application initialization."""

import os
from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import health, send_api, webhook
from src.config import Settings, get_settings
from src.logging_config import setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware
from src.models.config_models import AdapterConfig
from src.services.event_dispatcher import MessengerEventDispatcher
from src.services.messaging_protocol import MessagingService, get_messaging_service
from src.services.notification import MessageNotification

APP_TITLE = "Facebook Messenger Webhook Adapter"
APP_VERSION = "1.0.0"


def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        setup_logfire(app, settings)

        # Initialize Sentry if DSN is provided
        if settings.sentry_dsn:
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=settings.sentry_traces_sample_rate,
                environment=settings.env,
                integrations=[FastApiIntegration()],
            )

        config: AdapterConfig = app.state.adapter_config
        logfire.info(
            "Application startup complete",
            webhook_path=config.webhook_path,
            send_api_path=config.send_api_path,
            channel_name=config.channel_name,
            environment=settings.env,
        )

        yield

        logfire.info("Application shutdown complete")

    return lifespan


def create_app(
    settings: Settings | None = None,
    *,
    message_notification: MessageNotification | None = None,
    messaging_service: MessagingService | None = None,
) -> FastAPI:
    """Build the webhook adapter application.

    Args:
        settings: Application settings. Loaded from the environment if not provided.
        message_notification: Host bot callback for text messages.
                              Echoes messages back if not provided.
        messaging_service: Outbound relay. Uses the Facebook Send API if not provided.

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    config = AdapterConfig.from_settings(settings)
    messaging = messaging_service or get_messaging_service(settings)

    app = FastAPI(
        title=APP_TITLE,
        description="Bridges Facebook Messenger webhooks to a host bot",
        version=APP_VERSION,
        lifespan=_build_lifespan(settings),
    )

    app.state.settings = settings
    app.state.adapter_config = config
    app.state.messaging_service = messaging
    app.state.dispatcher = MessengerEventDispatcher(
        messaging_service=messaging,
        message_notification=message_notification,
        channel_name=config.channel_name,
    )

    # Correlation ID middleware (must be first for request tracing)
    app.add_middleware(CorrelationIDMiddleware)

    # CORS middleware (if needed for webhook testing)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router, tags=["health"])
    app.include_router(webhook.router, prefix=config.webhook_path, tags=["webhook"])
    if config.send_api_path:
        app.include_router(
            send_api.router, prefix=config.send_api_path, tags=["send"]
        )

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "message": APP_TITLE,
            "channel": config.channel_name,
            "version": APP_VERSION,
        }

    return app


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ENV") == "local",
    )
