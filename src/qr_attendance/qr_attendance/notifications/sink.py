from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    success: bool
    recipient: Optional[str] = None
    extra: dict = field(default_factory=dict)


class NotificationSink(Protocol):
    """Fire-and-forget user feedback channel."""

    def notify(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingNotificationSink(NotificationSink):
    def notify(self, notification: Notification) -> None:
        logger.info(
            "[notify %s] %s: %s",
            notification.recipient or "-",
            notification.title,
            notification.description,
        )


def send_quietly(sink: Optional[NotificationSink], notification: Notification) -> None:
    """Deliver a notification without letting sink failures reach the caller."""
    if sink is None:
        return
    try:
        sink.notify(notification)
    except Exception:
        logger.exception("Notification sink failed for %r", notification.title)
