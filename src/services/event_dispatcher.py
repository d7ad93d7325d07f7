"""Messaging event dispatch.

The webhook handler focuses on HTTP concerns while the dispatcher decides,
for each classified event, whether to reply, forward the text to the host
bot, or drop it:

- Authentication: acknowledge the opt-in to the sender
- Message: keyword check, then forward to the host bot and relay its reply
- Delivery confirmation / Postback: not supported yet, logged only
- Unknown: logged and ignored
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from enum import Enum

import logfire

from src.constants import (
    ATTACHMENT_REPLY,
    AUTHENTICATION_REPLY,
    DEFAULT_CHANNEL_NAME,
    RICH_MESSAGE_KEYWORDS,
    UNEXPECTED_MESSAGE_REPLY,
)
from src.models.messenger import (
    AttachmentPayload,
    AuthenticationEvent,
    DeliveryConfirmationEvent,
    EventKind,
    MessageEvent,
    PostbackEvent,
    TextPayload,
    UnknownEvent,
    UnparseableMessageEvent,
    WebhookEvent,
)
from src.services.messaging_protocol import MessagingService
from src.services.notification import (
    MessageNotification,
    echo_notification,
    notify,
)


class DispatchOutcome(str, Enum):
    """What the dispatcher did with an event."""

    REPLIED = "replied"
    FORWARDED = "forwarded"
    UNSUPPORTED = "unsupported"
    IGNORED = "ignored"
    DROPPED = "dropped"


class MessengerEventDispatcher:
    """Route classified messaging events to their handlers.

    Example:
        >>> dispatcher = MessengerEventDispatcher(
        ...     messaging_service=MockMessagingService(),
        ...     message_notification=lambda ch, sid, text, ctx: ("hi", None),
        ... )
        >>> await dispatcher.dispatch(event)
        <DispatchOutcome.REPLIED: 'replied'>
    """

    def __init__(
        self,
        messaging_service: MessagingService,
        message_notification: MessageNotification | None = None,
        channel_name: str = DEFAULT_CHANNEL_NAME,
    ):
        """Initialize the dispatcher.

        Args:
            messaging_service: Outbound relay used for every reply
            message_notification: Host bot callback receiving text messages.
                                  Echoes the text back if not provided.
            channel_name: Channel name passed to the host bot callback
        """
        self._messaging = messaging_service
        self._notification = message_notification or echo_notification
        self._channel_name = channel_name
        self._handlers: dict[
            EventKind, Callable[[WebhookEvent], Awaitable[DispatchOutcome]]
        ] = {
            EventKind.AUTHENTICATION: self._handle_authentication,
            EventKind.MESSAGE: self._handle_message,
            EventKind.DELIVERY: self._handle_delivery_confirmation,
            EventKind.POSTBACK: self._handle_postback,
            EventKind.UNKNOWN: self._handle_unknown,
        }

    @property
    def handled_kinds(self) -> frozenset[EventKind]:
        return frozenset(self._handlers)

    async def dispatch(self, event: WebhookEvent) -> DispatchOutcome:
        """Handle a single event and report the outcome."""
        return await self._handlers[event.kind](event)

    async def _reply(self, recipient_id: str, text: str) -> DispatchOutcome:
        await self._messaging.send_message(recipient_id, text)
        return DispatchOutcome.REPLIED

    async def _handle_authentication(
        self, event: AuthenticationEvent
    ) -> DispatchOutcome:
        if event.sender_id is None:
            logfire.warn("Unable to get sender id from received authentication")
            return DispatchOutcome.DROPPED

        logfire.info(
            "Received authentication",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            ref=event.ref,
            timestamp=event.timestamp,
        )
        return await self._reply(event.sender_id, AUTHENTICATION_REPLY)

    async def _handle_message(
        self, event: MessageEvent | UnparseableMessageEvent
    ) -> DispatchOutcome:
        if isinstance(event, UnparseableMessageEvent):
            logfire.warn("Unable to parse received message", reason=event.reason)
            return DispatchOutcome.DROPPED

        payload = event.payload
        if isinstance(payload, TextPayload):
            logfire.info(
                "Received message",
                message_id=payload.message_id,
                sender_id=event.sender_id,
                recipient_id=event.recipient_id,
                timestamp=event.timestamp,
            )
            return await self._handle_text(event.sender_id, payload.text)

        if isinstance(payload, AttachmentPayload):
            return await self._reply(event.sender_id, ATTACHMENT_REPLY)

        logfire.warn(
            "Received a message with neither text nor attachment",
            sender_id=event.sender_id,
        )
        return await self._reply(event.sender_id, UNEXPECTED_MESSAGE_REPLY)

    async def _handle_text(self, sender_id: str, text: str) -> DispatchOutcome:
        if text in RICH_MESSAGE_KEYWORDS:
            logfire.info(
                "Rich message kind not supported yet",
                keyword=text,
                sender_id=sender_id,
            )
            return DispatchOutcome.UNSUPPORTED

        reply, _context = await notify(
            self._notification, self._channel_name, sender_id, text, None
        )
        if reply:
            return await self._reply(sender_id, reply)
        return DispatchOutcome.FORWARDED

    async def _handle_delivery_confirmation(
        self, event: DeliveryConfirmationEvent
    ) -> DispatchOutcome:
        logfire.info("Delivery confirmation not supported yet")
        return DispatchOutcome.UNSUPPORTED

    async def _handle_postback(self, event: PostbackEvent) -> DispatchOutcome:
        logfire.info("Postback not supported yet")
        return DispatchOutcome.UNSUPPORTED

    async def _handle_unknown(self, event: UnknownEvent) -> DispatchOutcome:
        logfire.info("Webhook received unknown messaging event", event=event.raw)
        return DispatchOutcome.IGNORED


async def process_events(
    dispatcher: MessengerEventDispatcher,
    events: Iterable[WebhookEvent],
) -> list[DispatchOutcome | None]:
    """Dispatch every event, isolating failures per event.

    Returns:
        One outcome per event; None where the handler raised
    """
    outcomes: list[DispatchOutcome | None] = []
    for event in events:
        try:
            outcomes.append(await dispatcher.dispatch(event))
        except Exception as e:
            logfire.error(
                "Error dispatching messaging event",
                kind=event.kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            outcomes.append(None)
    return outcomes
