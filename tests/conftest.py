"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings: mock_settings, adapter_config
2. Collaborators: mock_messaging_service, notification_calls, recording_notification
3. Payload builders: text_message_item, delivery_factory
4. Infrastructure: mock_logfire, logfire_capture, test_client
"""

import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock, patch

import pytest

try:
    import logfire
except ImportError:
    logfire = None

from src.config import Settings
from src.models.config_models import AdapterConfig
from src.services.messaging_protocol import MockMessagingService

# Suppress warnings when logfire isn't configured in tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def mock_settings():
    """Application settings with the push send endpoint enabled."""
    return Settings(
        facebook_page_access_token="test-page-token",
        facebook_verify_token="test-verify-token",
        facebook_app_secret="test-app-secret",
        facebook_verify_signature=False,
        webhook_path="/webhook",
        send_api_path="/send",
        channel_name="FacebookMessenger",
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )


@pytest.fixture
def adapter_config(mock_settings):
    return AdapterConfig.from_settings(mock_settings)


# =============================================================================
# Collaborators
# =============================================================================


@pytest.fixture
def mock_messaging_service():
    """Outbound relay that records sent messages."""
    return MockMessagingService()


@pytest.fixture
def notification_calls():
    """Calls received by ``recording_notification``."""
    return []


@pytest.fixture
def recording_notification(notification_calls):
    """Host bot callback that records calls and answers "hi there"."""

    def notification(channel_name, sender_id, text, context):
        notification_calls.append((channel_name, sender_id, text, context))
        return "hi there", context

    return notification


# =============================================================================
# Payload builders
# =============================================================================


@pytest.fixture
def text_message_item():
    """Build a messaging item carrying a text message."""

    def build(text="hello", sender_id="user-456", mid="mid.1"):
        return {
            "sender": {"id": sender_id},
            "recipient": {"id": "page-123"},
            "timestamp": 1458692752478,
            "message": {"mid": mid, "text": text},
        }

    return build


@pytest.fixture
def delivery_factory():
    """Wrap messaging items into a page webhook delivery."""

    def build(*items, object_type="page"):
        return {
            "object": object_type,
            "entry": [
                {"id": "page-123", "time": 1458692752478, "messaging": list(items)}
            ],
        }

    return build


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    This fixture patches Logfire to capture log calls for assertion.
    """
    if logfire is None:
        pytest.skip("logfire not available")

    captured_logs = []

    def capture(level):
        def _capture(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _capture

    with (
        patch("src.services.event_dispatcher.logfire.info", side_effect=capture("info")),
        patch("src.services.event_dispatcher.logfire.warn", side_effect=capture("warn")),
        patch("src.services.event_dispatcher.logfire.error", side_effect=capture("error")),
    ):
        yield captured_logs


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Useful for tests that don't need to verify logging behavior.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()

    # Patch module-level imports in our code (only modules that use logfire)
    for module in (
        "src.main",
        "src.logging_config",
        "src.middleware.correlation_id",
        "src.services.event_dispatcher",
        "src.services.facebook_service",
        "src.services.messaging_protocol",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def test_client(
    mock_settings, mock_logfire, mock_messaging_service, recording_notification
):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    from src.main import create_app

    app = create_app(
        mock_settings,
        message_notification=recording_notification,
        messaging_service=mock_messaging_service,
    )
    return TestClient(app)
