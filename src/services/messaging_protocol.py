"""Messaging abstraction protocols for decoupling from Facebook API.

This module provides a Protocol-based abstraction for the outbound relay,
allowing the dispatcher to:
- Send replies without knowing about the Graph API
- Mock messaging in tests without complex httpx mocking
- Support dependency injection for cleaner architecture
"""

from typing import Protocol

import logfire

from src.config import Settings
from src.constants import FACEBOOK_API_TIMEOUT_SECONDS, FACEBOOK_GRAPH_API_VERSION


class MessagingService(Protocol):
    """Protocol for sending text messages.

    Implementations never raise: the relay is fire-and-forget, so the
    outcome is reported through the return value and the logs only.
    """

    async def send_message(
        self,
        recipient_id: str,
        text: str,
    ) -> bool:
        """Send message to recipient.

        Args:
            recipient_id: Platform-specific user identifier
            text: Message text to send

        Returns:
            True if message sent successfully, False otherwise
        """
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Wraps ``facebook_service.send_message`` with a fixed page access token.
    Failures are logged and swallowed; nothing is retried.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...")
        >>> await service.send_message("user123", "Hello!")
        True
    """

    def __init__(
        self,
        page_access_token: str,
        *,
        api_version: str = FACEBOOK_GRAPH_API_VERSION,
        timeout: float = FACEBOOK_API_TIMEOUT_SECONDS,
    ):
        """Initialize with Facebook Page access token.

        Args:
            page_access_token: Facebook Page access token for API calls
            api_version: Graph API version
            timeout: Request timeout in seconds
        """
        if not page_access_token:
            raise ValueError("page_access_token is required")
        self._token = page_access_token
        self._api_version = api_version
        self._timeout = timeout

    async def send_message(self, recipient_id: str, text: str) -> bool:
        """Send message via Facebook Messenger.

        Args:
            recipient_id: Facebook user ID (PSID) to send message to
            text: Message text to send

        Returns:
            True if message sent successfully, False on error
        """
        from src.services.facebook_service import send_message

        try:
            await send_message(
                page_access_token=self._token,
                recipient_id=recipient_id,
                text=text,
                api_version=self._api_version,
                timeout=self._timeout,
            )
            return True
        except Exception as e:
            logfire.error(
                "Unable to send message",
                recipient_id=recipient_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False


class MockMessagingService:
    """Mock implementation for testing.

    Allows tests to verify messaging behavior without making real API calls.

    Example:
        >>> service = MockMessagingService()
        >>> await service.send_message("user123", "Test message")
        True
        >>> service.sent_messages
        [('user123', 'Test message')]
    """

    def __init__(self, should_fail_send: bool = False):
        self._should_fail_send = should_fail_send
        self.sent_messages: list[tuple[str, str]] = []

    async def send_message(self, recipient_id: str, text: str) -> bool:
        """Record sent message and return configured result."""
        self.sent_messages.append((recipient_id, text))
        return not self._should_fail_send


def get_messaging_service(settings: Settings) -> FacebookMessagingService:
    """Factory function to get a MessagingService implementation.

    Args:
        settings: Application settings

    Returns:
        MessagingService implementation (currently Facebook)
    """
    return FacebookMessagingService(
        page_access_token=settings.facebook_page_access_token,
        api_version=settings.facebook_graph_api_version,
        timeout=settings.facebook_api_timeout_seconds,
    )
