"""Use cases for direct messaging."""

from .history import get_message_history, list_conversations
from .send_message import MessageDeliveryResult, send_message

__all__ = [
    "MessageDeliveryResult",
    "get_message_history",
    "list_conversations",
    "send_message",
]
