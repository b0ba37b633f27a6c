"""Domain entities describing direct messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Message:
    """Chat message exchanged between two users. Never edited once stored."""

    id: str | None
    sender_id: str
    receiver_id: str
    content: str
    created_at: datetime | None = None


@dataclass
class MessageView:
    """Message joined with the display names of both participants."""

    message: Message
    sender_name: str | None
    receiver_name: str | None


@dataclass
class ConversationSummary:
    """Latest exchanged message between the viewer and one counterpart."""

    counterpart_id: str
    counterpart_name: str | None
    counterpart_email: str | None
    latest_message: MessageView


__all__ = ["Message", "MessageView", "ConversationSummary"]
