"""Use case for acknowledging a notification."""

from __future__ import annotations

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.domain.entities import Notification
from peerlink.domain.exceptions import CollaboratorError, NotFoundError, UnauthorizedError
from peerlink.infrastructure.realtime import RealtimePublisher
from peerlink.infrastructure.repositories import NotificationRepository


def _mark_read(session: Session, notification_id: str, user_id: str) -> Notification:
    repository = NotificationRepository(session)
    try:
        notification = repository.get(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise UnauthorizedError("Unauthorized")
        if notification.read:
            return notification
        try:
            return repository.mark_as_read(notification_id)
        except ValueError as exc:
            # Expired between the lookup and the update.
            raise NotFoundError("Notification not found") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise CollaboratorError("Could not update the notification") from exc


async def mark_notification_read(
    session: Session,
    publisher: RealtimePublisher,
    *,
    notification_id: str,
    user_id: str,
) -> Notification:
    """Flag ``notification_id`` as read on behalf of its owner.

    Marking an already read notification succeeds again and re-emits
    ``notificationRead``. Non-owners get :class:`UnauthorizedError` and nothing
    is written or pushed.
    """

    notification = await to_thread.run_sync(
        _mark_read, session, notification_id, str(user_id)
    )
    await publisher.notification_read(notification)
    return notification
