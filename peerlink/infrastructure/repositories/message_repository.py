"""Persistence helpers for direct messages."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from peerlink.domain.entities import ConversationSummary, Message, MessageView, User
from peerlink.infrastructure.models import MessageModel
from peerlink.utils import app_now, from_storage, to_storage

from .user_repository import UserRepository


class MessageRepository:
    """Store messages and expose the joined views used by the API."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: Message) -> Message:
        model = MessageModel(
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            created_at=to_storage(message.created_at or app_now()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_between(self, user_id: str, other_user_id: str) -> Sequence[Message]:
        """Return the messages exchanged by both users, oldest first."""

        query = (
            self.session.query(MessageModel)
            .filter(self._between(user_id, other_user_id))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_conversations(self, user_id: str) -> Sequence[ConversationSummary]:
        """Return the latest message per counterpart, most recent conversation first."""

        query = (
            self.session.query(MessageModel)
            .filter(
                or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id)
            )
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        )
        latest: dict[str, Message] = {}
        for model in query.all():
            counterpart_id = (
                model.receiver_id if model.sender_id == user_id else model.sender_id
            )
            if counterpart_id not in latest:
                latest[counterpart_id] = self._to_entity(model)

        views = self._to_views(list(latest.values()))
        users = UserRepository(self.session).get_map_by_ids(list(latest))
        summaries: list[ConversationSummary] = []
        for counterpart_id, view in zip(latest, views):
            counterpart: User | None = users.get(counterpart_id)
            summaries.append(
                ConversationSummary(
                    counterpart_id=counterpart_id,
                    counterpart_name=counterpart.name if counterpart else None,
                    counterpart_email=counterpart.email if counterpart else None,
                    latest_message=view,
                )
            )
        return summaries

    def _to_views(self, messages: Sequence[Message]) -> list[MessageView]:
        user_ids = {message.sender_id for message in messages}
        user_ids.update(message.receiver_id for message in messages)
        users = UserRepository(self.session).get_map_by_ids(list(user_ids))
        views: list[MessageView] = []
        for message in messages:
            sender = users.get(message.sender_id)
            receiver = users.get(message.receiver_id)
            views.append(
                MessageView(
                    message=message,
                    sender_name=sender.name if sender else None,
                    receiver_name=receiver.name if receiver else None,
                )
            )
        return views

    @staticmethod
    def _between(user_id: str, other_user_id: str):
        return or_(
            and_(MessageModel.sender_id == user_id, MessageModel.receiver_id == other_user_id),
            and_(MessageModel.sender_id == other_user_id, MessageModel.receiver_id == user_id),
        )

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            content=model.content,
            created_at=from_storage(model.created_at),
        )


__all__ = ["MessageRepository"]
