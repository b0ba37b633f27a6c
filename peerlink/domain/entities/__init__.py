"""Domain entities exposed by the application."""

from .message import ConversationSummary, Message, MessageView
from .notification import Notification, NotificationType
from .user import User

__all__ = [
    "ConversationSummary",
    "Message",
    "MessageView",
    "Notification",
    "NotificationType",
    "User",
]
