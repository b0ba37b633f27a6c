"""Public helpers for creating, reading and acknowledging notifications."""

from .create_notification import create_notification
from .events import (
    notify_friend_request,
    notify_friend_request_accepted,
    notify_friend_request_declined,
    notify_new_message,
)
from .mark_read import mark_notification_read
from .queries import count_unread_notifications, list_notifications

__all__ = [
    "create_notification",
    "mark_notification_read",
    "count_unread_notifications",
    "list_notifications",
    "notify_new_message",
    "notify_friend_request",
    "notify_friend_request_accepted",
    "notify_friend_request_declined",
]
