"""Notification sink implementations

LoggingNotificationSink is the default sink when no UI is attached.
CollectingNotificationSink keeps what it was sent, for views that render
feedback later (snackbars, CLI output).
"""
import logging
from typing import List, Optional

from .interface import Notification, NotificationSink

logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the log"""

    def notify(self, notification: Notification) -> None:
        logger.info(f"[{notification.severity.value}] {notification.message}")


class CollectingNotificationSink(NotificationSink):
    """Keeps notifications in order of arrival"""

    def __init__(self, forward_to: Optional[NotificationSink] = None):
        self.notifications: List[Notification] = []
        self.forward_to = forward_to

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)
        if self.forward_to:
            self.forward_to.notify(notification)

    @property
    def latest(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
