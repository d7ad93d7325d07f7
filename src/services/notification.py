"""Host bot notification interface.

The adapter forwards every plain text message to a single callable
supplied by the host bot framework. The callable may be sync or async.
"""

import inspect
from typing import Any, Awaitable, Protocol, Union

NotificationContext = dict[str, Any]

# (reply text, updated context)
NotificationReply = tuple[str | None, NotificationContext | None]


class MessageNotification(Protocol):
    """Capability interface implemented by the host bot."""

    def __call__(
        self,
        channel_name: str,
        sender_id: str,
        text: str,
        context: NotificationContext | None,
    ) -> Union[NotificationReply, Awaitable[NotificationReply]]:
        ...


def echo_notification(
    channel_name: str,
    sender_id: str,
    text: str,
    context: NotificationContext | None,
) -> NotificationReply:
    """Default handler: echo the received text back to the sender."""
    return text, context


async def notify(
    handler: MessageNotification,
    channel_name: str,
    sender_id: str,
    text: str,
    context: NotificationContext | None = None,
) -> NotificationReply:
    """Call ``handler`` and await its result if needed."""
    result = handler(channel_name, sender_id, text, context)
    if inspect.isawaitable(result):
        result = await result
    return result
