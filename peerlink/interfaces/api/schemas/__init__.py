"""Pydantic schemas exposed by the HTTP interface."""

from .message import (
    ConversationRead,
    Counterpart,
    LatestMessage,
    MessageRead,
    SendMessagePayload,
)
from .notification import NotificationRead, UnreadCount

__all__ = [
    "ConversationRead",
    "Counterpart",
    "LatestMessage",
    "MessageRead",
    "NotificationRead",
    "SendMessagePayload",
    "UnreadCount",
]
