"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from peerlink.infrastructure.database import Base
from peerlink.utils import storage_now

from ._ids import new_record_id


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_read_created", "read", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_record_id)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(String(36), nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["NotificationModel"]
