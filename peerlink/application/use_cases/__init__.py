"""Aggregate application use cases."""

from .messages import send_message
from .notifications import create_notification, mark_notification_read

__all__ = [
    "create_notification",
    "mark_notification_read",
    "send_message",
]
