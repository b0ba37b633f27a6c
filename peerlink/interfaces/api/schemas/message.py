"""Pydantic models describing messages and conversations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SendMessagePayload(BaseModel):
    """Inbound ``sendMessage`` frame body."""

    model_config = ConfigDict(populate_by_name=True)

    sender_id: str = Field(alias="senderId", min_length=1)
    receiver_id: str = Field(alias="receiverId", min_length=1)
    content: str = Field(min_length=1)


class MessageRead(BaseModel):
    """Message from the point of view of one participant."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender_id: str = Field(alias="senderId")
    receiver_id: str = Field(alias="receiverId")
    content: str
    created_at: datetime = Field(alias="createdAt")
    is_sent_by_me: bool = Field(alias="isSentByMe")


class LatestMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    created_at: datetime = Field(alias="createdAt")
    sender: str | None = Field(description="Display name of the sender")


class Counterpart(BaseModel):
    id: str
    name: str | None
    email: str | None


class ConversationRead(BaseModel):
    """Latest message exchanged with one counterpart."""

    model_config = ConfigDict(populate_by_name=True)

    acquaintance: Counterpart
    latest_message: LatestMessage | None = Field(alias="latestMessage")


__all__ = [
    "ConversationRead",
    "Counterpart",
    "LatestMessage",
    "MessageRead",
    "SendMessagePayload",
]
