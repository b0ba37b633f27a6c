"""Queries over stored conversations."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.domain.entities import ConversationSummary, Message
from peerlink.domain.exceptions import CollaboratorError, NotFoundError
from peerlink.infrastructure.repositories import MessageRepository, UserRepository


def get_message_history(
    session: Session, user_id: str, other_user_id: str
) -> Sequence[Message]:
    """Return the messages exchanged by both users, oldest first."""

    try:
        return MessageRepository(session).list_between(str(user_id), str(other_user_id))
    except SQLAlchemyError as exc:
        raise CollaboratorError("Could not load the message history") from exc


def list_conversations(session: Session, user_id: str) -> Sequence[ConversationSummary]:
    """Return one summary per counterpart of ``user_id``, latest first."""

    try:
        if UserRepository(session).get(str(user_id)) is None:
            raise NotFoundError("User not found")
        return MessageRepository(session).list_conversations(str(user_id))
    except SQLAlchemyError as exc:
        raise CollaboratorError("Could not load conversations") from exc
