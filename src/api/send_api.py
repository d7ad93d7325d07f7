"""Push send endpoint.

Lets the host bot send asynchronous notifications to a Messenger user.
The caller proves it is allowed to do so by repeating the page access
token in the body.
"""

import hmac
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from pydantic import ValidationError

from src.dependencies import get_adapter_config, get_messaging
from src.logging_config import mask_pii
from src.models.config_models import AdapterConfig
from src.models.messenger import SendMessageRequest
from src.services.messaging_protocol import MessagingService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("")
async def send_message_handler(
    request: Request,
    background_tasks: BackgroundTasks,
    config: AdapterConfig = Depends(get_adapter_config),
    messaging: MessagingService = Depends(get_messaging),
):
    """Relay a message supplied by the host bot to the Send API."""
    body = await request.body()
    if not body:
        logger.warning("Send message received no body")
        return Response(status_code=400)

    try:
        send_request = SendMessageRequest.model_validate_json(body)
    except ValidationError:
        logger.warning("Send message received no valid JSON")
        return Response(status_code=400)

    if not hmac.compare_digest(
        send_request.page_access_token.encode(), config.page_access_token.encode()
    ):
        logger.warning(
            "Passed pageAccessToken does not match: %s",
            mask_pii(send_request.page_access_token),
        )
        return Response(status_code=400)

    background_tasks.add_task(
        messaging.send_message, send_request.recipient_id, send_request.message_text
    )
    return Response(status_code=200)
