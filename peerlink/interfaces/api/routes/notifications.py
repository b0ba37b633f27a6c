"""Endpoints for reading and acknowledging notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from peerlink.application.use_cases.notifications import (
    count_unread_notifications,
    list_notifications as list_notifications_uc,
    mark_notification_read,
)
from peerlink.domain.entities import Notification, User
from peerlink.domain.exceptions import PeerLinkError
from peerlink.infrastructure.database import get_db
from peerlink.infrastructure.realtime import RealtimePublisher
from peerlink.interfaces.api.dependencies import get_current_user, get_publisher
from peerlink.interfaces.api.routes_helpers import to_http_exception
from peerlink.interfaces.api.schemas import NotificationRead, UnreadCount

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        user_id=notification.user_id,
        type=notification.type,
        message=notification.message,
        related_id=notification.related_id,
        read=notification.read,
        created_at=notification.created_at,
    )


@router.get("/", response_model=list[NotificationRead], response_model_by_alias=True)
def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    try:
        notifications = list_notifications_uc(db, current_user.id, limit=limit)
    except PeerLinkError as exc:
        raise to_http_exception(exc) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UnreadCount:
    """Return how many notifications are still unread."""

    try:
        count = count_unread_notifications(db, current_user.id)
    except PeerLinkError as exc:
        raise to_http_exception(exc) from exc
    return UnreadCount(count=count)


@router.put(
    "/{notification_id}/read",
    response_model=NotificationRead,
    response_model_by_alias=True,
)
async def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    publisher: RealtimePublisher = Depends(get_publisher),
) -> NotificationRead:
    """Mark a notification owned by the authenticated user as read."""

    try:
        notification = await mark_notification_read(
            db, publisher, notification_id=notification_id, user_id=current_user.id
        )
    except PeerLinkError as exc:
        raise to_http_exception(exc, hide_ownership=True, resource="Notification") from exc
    return _notification_to_schema(notification)
