"""Helpers that turn domain events into notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from peerlink.domain.entities import Notification, NotificationType, User
from peerlink.infrastructure.realtime import RealtimePublisher

from .create_notification import create_notification


async def notify_new_message(
    session: Session,
    publisher: RealtimePublisher,
    *,
    sender: User,
    receiver_id: str,
) -> Notification:
    """Tell ``receiver_id`` that ``sender`` wrote to them."""

    return await create_notification(
        session,
        publisher,
        owner_id=receiver_id,
        notification_type=NotificationType.NEW_MESSAGE,
        message=f"New message from {sender.name}",
        related_id=sender.id,
    )


async def notify_friend_request(
    session: Session,
    publisher: RealtimePublisher,
    *,
    from_user: User,
    to_user_id: str,
    request_id: str,
) -> Notification:
    return await create_notification(
        session,
        publisher,
        owner_id=to_user_id,
        notification_type=NotificationType.FRIEND_REQUEST,
        message=f"{from_user.name} sent you a friend request",
        related_id=request_id,
    )


async def notify_friend_request_accepted(
    session: Session,
    publisher: RealtimePublisher,
    *,
    requester_id: str,
    accepted_by: User,
    request_id: str,
) -> Notification:
    """Inform the requester that ``accepted_by`` accepted the request."""

    return await create_notification(
        session,
        publisher,
        owner_id=requester_id,
        notification_type=NotificationType.FRIEND_REQUEST_ACCEPTED,
        message=f"{accepted_by.name} accepted your friend request",
        related_id=request_id,
    )


async def notify_friend_request_declined(
    session: Session,
    publisher: RealtimePublisher,
    *,
    requester_id: str,
    declined_by: User,
    request_id: str,
) -> Notification:
    """Inform the requester that ``declined_by`` declined the request."""

    return await create_notification(
        session,
        publisher,
        owner_id=requester_id,
        notification_type=NotificationType.FRIEND_REQUEST_DECLINED,
        message=f"{declined_by.name} declined your friend request",
        related_id=request_id,
    )
