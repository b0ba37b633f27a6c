"""Realtime delivery helpers for the infrastructure layer."""

from .bridge import ChangeFeedBridge
from .manager import Connection, DeliveryRouter
from .publisher import (
    NEW_NOTIFICATION,
    NOTIFICATION_DELETED,
    NOTIFICATION_READ,
    RECEIVE_MESSAGE,
    SEND_MESSAGE_FAILED,
    RealtimePublisher,
    serialize_message,
    serialize_notification,
)

__all__ = [
    "ChangeFeedBridge",
    "Connection",
    "DeliveryRouter",
    "RealtimePublisher",
    "serialize_message",
    "serialize_notification",
    "NEW_NOTIFICATION",
    "NOTIFICATION_DELETED",
    "NOTIFICATION_READ",
    "RECEIVE_MESSAGE",
    "SEND_MESSAGE_FAILED",
]
