"""FastAPI dependencies resolving the adapter objects built in ``create_app``."""

from fastapi import Request

from src.models.config_models import AdapterConfig
from src.services.event_dispatcher import MessengerEventDispatcher
from src.services.messaging_protocol import MessagingService


def get_adapter_config(request: Request) -> AdapterConfig:
    """Return the adapter configuration built at startup."""
    return request.app.state.adapter_config


def get_dispatcher(request: Request) -> MessengerEventDispatcher:
    """Return the messaging event dispatcher."""
    return request.app.state.dispatcher


def get_messaging(request: Request) -> MessagingService:
    """Return the outbound relay used for replies and push messages."""
    return request.app.state.messaging_service
