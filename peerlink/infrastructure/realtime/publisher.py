"""Serialize domain records and push them as named realtime events."""

from __future__ import annotations

from typing import Any

from peerlink.domain.entities import Message, Notification

from .manager import DeliveryRouter

RECEIVE_MESSAGE = "receiveMessage"
NEW_NOTIFICATION = "newNotification"
NOTIFICATION_READ = "notificationRead"
NOTIFICATION_DELETED = "notificationDeleted"
SEND_MESSAGE_FAILED = "sendMessageFailed"


class RealtimePublisher:
    """Translate domain changes into the outbound event contract."""

    def __init__(self, router: DeliveryRouter) -> None:
        self._router = router

    @property
    def router(self) -> DeliveryRouter:
        return self._router

    async def message_received(self, message: Message) -> None:
        """Push ``message`` to the sender and the receiver rooms."""

        payload = serialize_message(message)
        rooms = [message.sender_id]
        if message.receiver_id != message.sender_id:
            rooms.append(message.receiver_id)
        for room_id in rooms:
            await self._router.push(room_id, RECEIVE_MESSAGE, dict(payload))

    async def notification_created(self, notification: Notification) -> None:
        await self._router.push(
            notification.user_id, NEW_NOTIFICATION, serialize_notification(notification)
        )

    async def notification_read(self, notification: Notification) -> None:
        await self._router.push(
            notification.user_id, NOTIFICATION_READ, {"notificationId": notification.id}
        )

    async def notification_deleted(self, notification_id: str) -> int:
        return await self._router.broadcast(
            NOTIFICATION_DELETED, {"notificationId": notification_id}
        )


def serialize_message(message: Message) -> dict[str, Any]:
    """Return the wire representation of ``message``."""

    return {
        "id": message.id,
        "senderId": message.sender_id,
        "receiverId": message.receiver_id,
        "content": message.content,
        "createdAt": message.created_at.isoformat() if message.created_at else None,
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the wire representation of ``notification``."""

    return {
        "id": notification.id,
        "userId": notification.user_id,
        "type": notification.type,
        "message": notification.message,
        "relatedId": notification.related_id,
        "read": notification.read,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = [
    "NEW_NOTIFICATION",
    "NOTIFICATION_DELETED",
    "NOTIFICATION_READ",
    "RECEIVE_MESSAGE",
    "SEND_MESSAGE_FAILED",
    "RealtimePublisher",
    "serialize_message",
    "serialize_notification",
]
