"""User feedback messaging"""
from .interface import Notification, NotificationSink, Severity
from .service import CollectingNotificationSink, LoggingNotificationSink

__all__ = [
    'CollectingNotificationSink',
    'LoggingNotificationSink',
    'Notification',
    'NotificationSink',
    'Severity',
]
