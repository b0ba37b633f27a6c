"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    type: str
    message: str
    related_id: str | None = Field(default=None, alias="relatedId")
    read: bool
    created_at: datetime = Field(alias="createdAt")


class UnreadCount(BaseModel):
    """Number of unread notifications of the authenticated user."""

    count: int = Field(..., ge=0)


__all__ = ["NotificationRead", "UnreadCount"]
