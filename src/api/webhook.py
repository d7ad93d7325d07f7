"""Facebook webhook endpoints.

This module handles the Facebook Messenger webhook handshake and incoming
deliveries. All callbacks for Messenger are POST-ed to the same path as
the GET handshake.

A delivery is always acknowledged with 200 once it has been read:
Facebook retries on any other status, so a failure while parsing or
dispatching must never reach the response. Events are dispatched as a
background task so the acknowledgement never waits on the Send API.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from src.constants import PAGE_OBJECT_TYPE, SIGNATURE_HEADER, SUBSCRIBE_MODE
from src.dependencies import get_adapter_config, get_dispatcher
from src.models.config_models import AdapterConfig
from src.models.messenger import MessengerWebhookPayload
from src.services.event_classifier import iter_messaging_events
from src.services.event_dispatcher import MessengerEventDispatcher, process_events
from src.services.signature import verify_signature

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(
    request: Request,
    config: AdapterConfig = Depends(get_adapter_config),
):
    """Facebook webhook verification endpoint."""
    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if mode == SUBSCRIBE_MODE and token == config.validation_token:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.warning("Failed validation. Make sure the validation tokens match.")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    config: AdapterConfig = Depends(get_adapter_config),
    dispatcher: MessengerEventDispatcher = Depends(get_dispatcher),
):
    """Handle incoming Facebook Messenger webhook events."""
    try:
        await ingest_delivery(request, background_tasks, config, dispatcher)
    except Exception as e:
        logger.error("Error ingesting webhook delivery: %s", e, exc_info=True)

    return Response(status_code=200)


async def ingest_delivery(
    request: Request,
    background_tasks: BackgroundTasks,
    config: AdapterConfig,
    dispatcher: MessengerEventDispatcher,
) -> int:
    """Parse a delivery and schedule its events for dispatch.

    Returns:
        Number of events scheduled
    """
    body = await request.body()
    if not body:
        logger.info("Webhook received no body")
        return 0

    if config.verify_signature and config.app_secret:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not verify_signature(config.app_secret, body, signature):
            logger.warning("Webhook signature mismatch, delivery dropped")
            return 0

    try:
        payload = MessengerWebhookPayload.model_validate_json(body)
    except ValidationError as e:
        logger.warning("Webhook received an invalid body: %s", e.error_count())
        return 0

    if payload.object != PAGE_OBJECT_TYPE:
        logger.info("Webhook ignored object type %s", payload.object)
        return 0

    events = list(iter_messaging_events(payload))
    if events:
        background_tasks.add_task(process_events, dispatcher, events)
    logger.info("Webhook scheduled %d messaging events", len(events))
    return len(events)
