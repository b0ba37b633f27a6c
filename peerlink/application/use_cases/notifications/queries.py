"""Read-only notification queries."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.domain.entities import Notification
from peerlink.domain.exceptions import CollaboratorError
from peerlink.infrastructure.repositories import NotificationRepository


def count_unread_notifications(session: Session, user_id: str) -> int:
    """Return how many notifications owned by ``user_id`` are still unread."""

    try:
        return NotificationRepository(session).count_unread(str(user_id))
    except SQLAlchemyError as exc:
        raise CollaboratorError("Could not count notifications") from exc


def list_notifications(
    session: Session, user_id: str, *, limit: int | None = 50
) -> Sequence[Notification]:
    """Return the notifications of ``user_id``, newest first."""

    try:
        return NotificationRepository(session).list_for_user(str(user_id), limit=limit)
    except SQLAlchemyError as exc:
        raise CollaboratorError("Could not list notifications") from exc
