"""Incoming/outgoing Facebook Messenger models.

Every item of a webhook delivery's ``entry[].messaging[]`` list becomes
exactly one ``WebhookEvent``. The ``kind`` field tags each variant, so handlers can be selected from a table keyed by ``EventKind``.
"""

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Category of a messaging event."""

    AUTHENTICATION = "authentication"
    MESSAGE = "message"
    DELIVERY = "delivery"
    POSTBACK = "postback"
    UNKNOWN = "unknown"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextPayload(_FrozenModel):
    """Text body of an incoming message."""

    text: str
    message_id: str | None = None


class AttachmentPayload(_FrozenModel):
    """Marker for a message that carries attachments instead of text."""

    has_attachment: bool = True


class AuthenticationEvent(_FrozenModel):
    """Opt-in callback, e.g. from the "Send to Messenger" plugin."""

    kind: Literal[EventKind.AUTHENTICATION] = EventKind.AUTHENTICATION
    sender_id: str | None = None
    recipient_id: str | None = None
    timestamp: int | None = None
    # Pass-through param set in the plugin's data-ref attribute
    ref: str | None = None


class MessageEvent(_FrozenModel):
    """A message sent to the page.

    ``payload`` is ``None`` when the message has neither text nor attachments.
    """

    kind: Literal[EventKind.MESSAGE] = EventKind.MESSAGE
    sender_id: str
    recipient_id: str
    timestamp: int
    payload: TextPayload | AttachmentPayload | None = None


class UnparseableMessageEvent(_FrozenModel):
    """A message item missing the sender, recipient or timestamp."""

    kind: Literal[EventKind.MESSAGE] = EventKind.MESSAGE
    reason: str
    raw: dict[str, Any] = Field(default_factory=dict)


class DeliveryConfirmationEvent(_FrozenModel):
    kind: Literal[EventKind.DELIVERY] = EventKind.DELIVERY
    raw: dict[str, Any] = Field(default_factory=dict)


class PostbackEvent(_FrozenModel):
    kind: Literal[EventKind.POSTBACK] = EventKind.POSTBACK
    raw: dict[str, Any] = Field(default_factory=dict)


class UnknownEvent(_FrozenModel):
    kind: Literal[EventKind.UNKNOWN] = EventKind.UNKNOWN
    raw: Any = None


# Parsed and unparseable message items share a kind, so handlers are
# selected by "kind" rather than by a pydantic discriminator.
WebhookEvent = Union[
    AuthenticationEvent,
    MessageEvent,
    UnparseableMessageEvent,
    DeliveryConfirmationEvent,
    PostbackEvent,
    UnknownEvent,
]


class MessengerWebhookPayload(BaseModel):
    """Facebook webhook payload.

    Entries are kept as raw JSON so that one malformed entry cannot
    invalidate the rest of the delivery.
    """

    object: str | None = None
    entry: list[Any] = Field(default_factory=list)


class OutboundTextMessage(_FrozenModel):
    """Text message sent through the Send API."""

    recipient_id: str
    text: str

    def to_send_api_payload(self) -> dict[str, dict[str, str]]:
        """Render the Send API request body."""
        return {"recipient": {"id": self.recipient_id}, "message": {"text": self.text}}


class SendMessageRequest(BaseModel):
    """Body of the push send endpoint."""

    recipient_id: str = Field(..., alias="recipientId")
    message_text: str = Field(..., alias="messageText")
    page_access_token: str = Field(..., alias="pageAccessToken")
