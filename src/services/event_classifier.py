"""Classify raw Messenger webhook items into typed events.

Facebook batches several messaging events per delivery. Each one is
classified by the first of ``optin``, ``message``, ``delivery`` and
``postback`` that is present, in that order. An item carrying both
``optin`` and ``message`` is therefore an authentication event.
"""

from collections.abc import Iterator
from typing import Any

from src.models.messenger import (
    AttachmentPayload,
    AuthenticationEvent,
    DeliveryConfirmationEvent,
    MessageEvent,
    MessengerWebhookPayload,
    PostbackEvent,
    TextPayload,
    UnknownEvent,
    UnparseableMessageEvent,
    WebhookEvent,
)


def _has(item: dict[str, Any], key: str) -> bool:
    # A key holding null is still present
    return key in item


def _str_at(item: dict[str, Any], *path: str) -> str | None:
    """Return the string found at ``path``, or None."""
    value: Any = item
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value if isinstance(value, str) else None


def _int_at(item: dict[str, Any], key: str) -> int | None:
    value = item.get(key)
    # bool is an int subclass but never a valid timestamp
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _parse_authentication(item: dict[str, Any]) -> AuthenticationEvent:
    return AuthenticationEvent(
        sender_id=_str_at(item, "sender", "id"),
        recipient_id=_str_at(item, "recipient", "id"),
        timestamp=_int_at(item, "timestamp"),
        ref=_str_at(item, "optin", "ref"),
    )


def _parse_message(item: dict[str, Any]) -> MessageEvent | UnparseableMessageEvent:
    sender_id = _str_at(item, "sender", "id")
    recipient_id = _str_at(item, "recipient", "id")
    timestamp = _int_at(item, "timestamp")

    if sender_id is None:
        return UnparseableMessageEvent(reason="missing sender id", raw=item)
    if recipient_id is None:
        return UnparseableMessageEvent(reason="missing recipient id", raw=item)
    if timestamp is None:
        return UnparseableMessageEvent(reason="missing timestamp", raw=item)

    message = item.get("message")
    payload: TextPayload | AttachmentPayload | None = None
    if isinstance(message, dict):
        # A message carries text or attachments, never both
        text = message.get("text")
        attachments = message.get("attachments")
        if isinstance(text, str):
            payload = TextPayload(text=text, message_id=_str_at(message, "mid"))
        elif attachments:
            payload = AttachmentPayload()

    return MessageEvent(
        sender_id=sender_id,
        recipient_id=recipient_id,
        timestamp=timestamp,
        payload=payload,
    )


def classify_event(item: Any) -> WebhookEvent:
    """Classify one ``entry[].messaging[]`` item.

    Args:
        item: Raw JSON value of the messaging item

    Returns:
        The typed event; anything unrecognised becomes ``UnknownEvent``
    """
    if not isinstance(item, dict):
        return UnknownEvent(raw=item)
    if _has(item, "optin"):
        return _parse_authentication(item)
    if _has(item, "message"):
        return _parse_message(item)
    if _has(item, "delivery"):
        return DeliveryConfirmationEvent(raw=item)
    if _has(item, "postback"):
        return PostbackEvent(raw=item)
    return UnknownEvent(raw=item)


def iter_messaging_events(payload: MessengerWebhookPayload) -> Iterator[WebhookEvent]:
    """Yield every messaging event of a delivery, in delivery order.

    A non-object entry, or an entry whose ``messaging`` is not a list, is
    yielded as a single ``UnknownEvent`` and its siblings are still read.
    """
    for entry in payload.entry:
        if not isinstance(entry, dict):
            yield UnknownEvent(raw=entry)
            continue
        messaging = entry.get("messaging", [])
        if not isinstance(messaging, list):
            yield UnknownEvent(raw=entry)
            continue
        for item in messaging:
            yield classify_event(item)
