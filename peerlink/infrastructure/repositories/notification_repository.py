"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from peerlink.domain.entities import Notification
from peerlink.domain.retention import NotificationRetentionPolicy
from peerlink.infrastructure.models import NotificationModel
from peerlink.utils import app_now, from_storage, to_storage


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            user_id=notification.user_id,
            type=notification.type,
            message=notification.message,
            related_id=notification.related_id,
            read=notification.read,
            created_at=to_storage(notification.created_at or app_now()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> Notification:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        model.read = True
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: str) -> bool:
        """Delete one notification; return ``False`` when it did not exist."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def delete_expired(
        self, policy: NotificationRetentionPolicy, now: datetime
    ) -> list[str]:
        """Remove every notification the ``policy`` considers expired at ``now``."""

        models = (
            self.session.query(NotificationModel)
            .filter(self._expired_clause(policy, now))
            .all()
        )
        if not models:
            return []
        deleted_ids = [model.id for model in models]
        for model in models:
            self.session.delete(model)
        self.session.commit()
        return deleted_ids

    @staticmethod
    def _expired_clause(policy: NotificationRetentionPolicy, now: datetime):
        unread_cutoff, read_cutoff = policy.cutoffs(now)
        return or_(
            and_(
                NotificationModel.read.is_(False),
                NotificationModel.created_at <= to_storage(unread_cutoff),
            ),
            and_(
                NotificationModel.read.is_(True),
                NotificationModel.created_at <= to_storage(read_cutoff),
            ),
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            message=model.message,
            related_id=model.related_id,
            read=bool(model.read),
            created_at=from_storage(model.created_at),
        )


__all__ = ["NotificationRepository"]
