"""Time-to-live policy applied to notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .entities import Notification

DEFAULT_UNREAD_TTL = timedelta(days=7)
DEFAULT_READ_TTL = timedelta(days=1)


@dataclass(frozen=True)
class NotificationRetentionPolicy:
    """Conditional lifetime of a notification, counted from ``created_at``.

    A notification whose age equals its TTL is already expired.
    """

    unread_ttl: timedelta = DEFAULT_UNREAD_TTL
    read_ttl: timedelta = DEFAULT_READ_TTL

    @classmethod
    def from_settings(cls, settings) -> "NotificationRetentionPolicy":
        return cls(
            unread_ttl=timedelta(seconds=settings.notification_unread_ttl_seconds),
            read_ttl=timedelta(seconds=settings.notification_read_ttl_seconds),
        )

    def ttl_for(self, read: bool) -> timedelta:
        return self.read_ttl if read else self.unread_ttl

    def expires_at(self, notification: Notification) -> datetime:
        if notification.created_at is None:
            raise ValueError("Notification has no creation timestamp")
        return notification.created_at + self.ttl_for(notification.read)

    def is_expired(self, notification: Notification, now: datetime) -> bool:
        return now >= self.expires_at(notification)

    def cutoffs(self, now: datetime) -> tuple[datetime, datetime]:
        """Return ``(unread_cutoff, read_cutoff)``.

        Rows created at or before the cutoff matching their read state are expired.
        """

        return now - self.unread_ttl, now - self.read_ttl


__all__ = [
    "DEFAULT_READ_TTL",
    "DEFAULT_UNREAD_TTL",
    "NotificationRetentionPolicy",
]
