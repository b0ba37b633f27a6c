"""Use case for persisting a notification and announcing it to its owner."""

from __future__ import annotations

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.domain.entities import Notification, NotificationType
from peerlink.domain.exceptions import CollaboratorError, ValidationError
from peerlink.infrastructure.realtime import RealtimePublisher
from peerlink.infrastructure.repositories import NotificationRepository
from peerlink.utils import app_now


async def create_notification(
    session: Session,
    publisher: RealtimePublisher,
    *,
    owner_id: str,
    notification_type: NotificationType | str,
    message: str,
    related_id: str | None = None,
) -> Notification:
    """Store an unread notification for ``owner_id`` and push ``newNotification``.

    The push is best effort: an owner without a live connection simply misses it.
    """

    if not owner_id:
        raise ValidationError("Notification owner is required")
    try:
        resolved_type = NotificationType(notification_type)
    except ValueError as exc:
        raise ValidationError(f"Unsupported notification type '{notification_type}'") from exc
    if not message or not message.strip():
        raise ValidationError("Notification message must not be empty")

    notification = Notification(
        id=None,
        user_id=str(owner_id),
        type=resolved_type.value,
        message=message,
        related_id=str(related_id) if related_id is not None else None,
        read=False,
        created_at=app_now(),
    )
    try:
        saved = await to_thread.run_sync(
            NotificationRepository(session).create, notification
        )
    except SQLAlchemyError as exc:
        await to_thread.run_sync(session.rollback)
        raise CollaboratorError("Could not store the notification") from exc

    await publisher.notification_created(saved)
    return saved
