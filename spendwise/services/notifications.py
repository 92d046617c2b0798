"""
Notification Channels

The session reports every accepted or rejected operation as a
Notification. How it is shown is the channel's business.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from spendwise.models.notification import Notification, NotificationVariant


class NotificationChannel(ABC):
    """Abstract interface for user-facing notifications."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver one notification. Must not raise for display problems."""
        pass


class LoggingNotificationChannel(NotificationChannel):
    """Writes notifications to the structured log (headless use)."""

    def __init__(self):
        self._logger = structlog.get_logger(__name__)

    def notify(self, notification: Notification) -> None:
        log = (
            self._logger.warning
            if notification.variant == NotificationVariant.ERROR
            else self._logger.info
        )
        log(
            "notification",
            title=notification.title,
            message=notification.message,
            variant=notification.variant.value,
        )


class CollectingNotificationChannel(NotificationChannel):
    """
    Keeps notifications in memory.

    A UI can drain this after each call; tests use it to assert on
    what the user would have seen.
    """

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def latest(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
