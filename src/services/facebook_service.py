"""Send messages to Facebook Graph API service."""

import time

import httpx
import logfire

from src.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_BASE_URL,
    FACEBOOK_GRAPH_API_VERSION,
)
from src.models.messenger import OutboundTextMessage


def send_api_url(api_version: str = FACEBOOK_GRAPH_API_VERSION) -> str:
    """Return the Send API endpoint for the given Graph API version."""
    return f"{FACEBOOK_GRAPH_API_BASE_URL}/{api_version}/me/messages"


async def send_message(
    page_access_token: str,
    recipient_id: str,
    text: str,
    *,
    api_version: str = FACEBOOK_GRAPH_API_VERSION,
    timeout: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> None:
    """
    Send message via Facebook Graph API.

    Args:
        page_access_token: Facebook Page access token
        recipient_id: Facebook user ID to send message to
        text: Message text to send
        api_version: Graph API version
        timeout: Request timeout in seconds

    Raises:
        httpx.HTTPStatusError: Facebook answered with a non-2xx status
        httpx.RequestError: The request could not be sent
    """
    start_time = time.time()

    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(text),
        api_version=api_version,
    )

    params = {"access_token": page_access_token}

    payload = OutboundTextMessage(
        recipient_id=recipient_id, text=text
    ).to_send_api_payload()

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                send_api_url(api_version), params=params, json=payload
            )
            elapsed = time.time() - start_time

            if response.status_code == 200:
                response_data = response.json()
                logfire.info(
                    "Facebook message sent successfully",
                    recipient_id=recipient_id,
                    status_code=response.status_code,
                    message_id=response_data.get("message_id"),
                    response_time_ms=elapsed * 1000,
                )
            else:
                logfire.error(
                    "Facebook message send failed",
                    recipient_id=recipient_id,
                    status_code=response.status_code,
                    response_body=response.text[:500],  # Limit response body length
                    response_time_ms=elapsed * 1000,
                )

            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API HTTP error",
            recipient_id=recipient_id,
            status_code=e.response.status_code,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise
