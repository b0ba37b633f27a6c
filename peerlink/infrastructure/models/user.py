"""SQLAlchemy model for users referenced by the messaging core."""

from sqlalchemy import Column, DateTime, String

from peerlink.infrastructure.database import Base
from peerlink.utils import storage_now

from ._ids import new_record_id


class UserModel(Base):
    """Database representation for application users."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=new_record_id)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["UserModel"]
