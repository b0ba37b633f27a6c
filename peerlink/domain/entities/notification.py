"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Events that produce a notification."""

    NEW_MESSAGE = "new_message"
    FRIEND_REQUEST = "friend_request"
    FRIEND_REQUEST_ACCEPTED = "friend_request_accepted"
    FRIEND_REQUEST_DECLINED = "friend_request_declined"


@dataclass
class Notification:
    """Information message delivered to a specific user.

    ``read`` only ever moves from ``False`` to ``True``.
    """

    id: str | None
    user_id: str
    type: str
    message: str
    related_id: str | None = None
    read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationType"]
