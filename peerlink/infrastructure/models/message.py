"""SQLAlchemy model for direct messages."""

from sqlalchemy import Column, DateTime, Index, String, Text

from peerlink.infrastructure.database import Base
from peerlink.utils import storage_now

from ._ids import new_record_id


class MessageModel(Base):
    """Database representation for chat messages.

    Participants are plain user identifiers; a message may outlive or precede
    the user rows it points at.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_participants_created", "sender_id", "receiver_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_record_id)
    sender_id = Column(String(36), nullable=False, index=True)
    receiver_id = Column(String(36), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["MessageModel"]
