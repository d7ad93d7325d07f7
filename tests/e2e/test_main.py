"""End-to-end tests for main application."""

from unittest.mock import patch

import pytest

from src.main import APP_TITLE, APP_VERSION, create_app
from src.services.event_dispatcher import MessengerEventDispatcher
from src.services.messaging_protocol import FacebookMessagingService


class TestMainApplication:
    """Test FastAPI application initialization."""

    def test_app_initialization(self, mock_settings, mock_logfire):
        """Test that FastAPI app is initialized correctly."""
        app = create_app(mock_settings)

        assert app.title == APP_TITLE
        assert app.version == APP_VERSION
        assert app.state.adapter_config.webhook_path == "/webhook"
        assert isinstance(app.state.messaging_service, FacebookMessagingService)
        assert isinstance(app.state.dispatcher, MessengerEventDispatcher)

    def test_root_endpoint(self, test_client):
        """Test root endpoint."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == APP_TITLE
        assert data["channel"] == "FacebookMessenger"

    def test_router_registration(self, test_client):
        """Test that routers are registered."""
        assert test_client.get("/health").status_code == 200
        # Webhook endpoint returns 403 without proper params
        assert test_client.get("/webhook").status_code == 403

    def test_uses_cached_settings_by_default(self, mock_settings, mock_logfire):
        with patch("src.main.get_settings", return_value=mock_settings) as get_settings:
            app = create_app()

        get_settings.assert_called_once()
        assert app.state.settings is mock_settings

    @pytest.mark.asyncio
    async def test_lifespan_startup(self, mock_settings, mock_logfire):
        """Test application lifespan sets up logging and skips Sentry without DSN."""
        app = create_app(mock_settings)

        with patch("src.main.sentry_sdk.init") as sentry_init:
            async with app.router.lifespan_context(app):
                pass

        mock_logfire.configure.assert_called_once()
        mock_logfire.instrument_fastapi.assert_called_once_with(app)
        sentry_init.assert_not_called()

    @pytest.mark.asyncio
    async def test_lifespan_initializes_sentry(self, mock_settings, mock_logfire):
        settings = mock_settings.model_copy(
            update={"sentry_dsn": "https://key@sentry.example.com/1"}
        )
        app = create_app(settings)

        with patch("src.main.sentry_sdk.init") as sentry_init:
            async with app.router.lifespan_context(app):
                pass

        assert sentry_init.call_args.kwargs["dsn"] == "https://key@sentry.example.com/1"
