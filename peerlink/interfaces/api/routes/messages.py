"""Endpoints exposing stored conversations."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from peerlink.application.use_cases.messages import (
    get_message_history,
    list_conversations as list_conversations_uc,
)
from peerlink.domain.entities import ConversationSummary, Message, User
from peerlink.domain.exceptions import PeerLinkError
from peerlink.infrastructure.database import get_db
from peerlink.interfaces.api.dependencies import get_current_user
from peerlink.interfaces.api.routes_helpers import to_http_exception
from peerlink.interfaces.api.schemas import (
    ConversationRead,
    Counterpart,
    LatestMessage,
    MessageRead,
)

router = APIRouter(prefix="/messages", tags=["messages"])


def _message_to_schema(message: Message, viewer_id: str) -> MessageRead:
    return MessageRead(
        id=message.id or "",
        sender_id=message.sender_id,
        receiver_id=message.receiver_id,
        content=message.content,
        created_at=message.created_at,
        is_sent_by_me=message.sender_id == viewer_id,
    )


def _conversation_to_schema(summary: ConversationSummary) -> ConversationRead:
    latest = summary.latest_message
    return ConversationRead(
        acquaintance=Counterpart(
            id=summary.counterpart_id,
            name=summary.counterpart_name,
            email=summary.counterpart_email,
        ),
        latest_message=LatestMessage(
            content=latest.message.content,
            created_at=latest.message.created_at,
            sender=latest.sender_name,
        ),
    )


@router.get(
    "/conversations",
    response_model=list[ConversationRead],
    response_model_by_alias=True,
)
def list_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ConversationRead]:
    """Return the latest message exchanged with every counterpart."""

    try:
        summaries = list_conversations_uc(db, current_user.id)
    except PeerLinkError as exc:
        raise to_http_exception(exc) from exc
    return [_conversation_to_schema(summary) for summary in summaries]


@router.get(
    "/history/{user_id}",
    response_model=list[MessageRead],
    response_model_by_alias=True,
)
def message_history(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[MessageRead]:
    """Return the messages exchanged with ``user_id``, oldest first."""

    try:
        messages = get_message_history(db, current_user.id, user_id)
    except PeerLinkError as exc:
        raise to_http_exception(exc) from exc
    return [_message_to_schema(message, current_user.id) for message in messages]
