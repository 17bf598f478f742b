"""Core notification interface"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

__all__ = [
    'Notification',
    'NotificationSink',
    'Severity',
]


class Severity(str, Enum):
    """Feedback severities shown to the user; failures go to the form error slot instead"""
    SUCCESS = "success"


@dataclass(frozen=True)
class Notification:
    """One piece of user feedback"""
    severity: Severity
    message: str


class NotificationSink(ABC):
    """Interface for surfacing feedback to the user"""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Show a notification

        Args:
            notification: Severity and message to show
        """
        pass

    def success(self, message: str) -> None:
        self.notify(Notification(Severity.SUCCESS, message))
