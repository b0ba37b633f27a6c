"""Message pipeline: store a chat message, deliver it and notify the receiver."""

from __future__ import annotations

from dataclasses import dataclass

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.application.use_cases.notifications import notify_new_message
from peerlink.domain.entities import Message, Notification
from peerlink.domain.exceptions import (
    CollaboratorError,
    PeerLinkError,
    SenderNotFoundError,
    ValidationError,
)
from peerlink.infrastructure.realtime import RealtimePublisher
from peerlink.infrastructure.repositories import MessageRepository, UserRepository
from peerlink.utils import app_now


@dataclass
class MessageDeliveryResult:
    """Outcome of :func:`send_message`.

    ``message`` is set as soon as the message was stored, even when a later
    step failed and ``error`` is populated.
    """

    message: Message | None = None
    notification: Notification | None = None
    error: PeerLinkError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _validate(sender_id: object, receiver_id: object, content: object) -> None:
    if not isinstance(sender_id, str) or not sender_id.strip():
        raise ValidationError("senderId is required")
    if not isinstance(receiver_id, str) or not receiver_id.strip():
        raise ValidationError("receiverId is required")
    if not isinstance(content, str) or not content:
        raise ValidationError("content must be a non-empty string")


async def send_message(
    session: Session,
    publisher: RealtimePublisher,
    *,
    sender_id: str,
    receiver_id: str,
    content: str,
) -> MessageDeliveryResult:
    """Run the message pipeline and report the outcome instead of raising.

    Steps run in order and the first failure stops the rest: store the message,
    resolve the sender, push ``receiveMessage`` to both rooms, then create the
    ``new_message`` notification. The message is stored before the sender is
    resolved, so an unknown sender leaves the stored message behind.

    Database work runs in a worker thread; pushes stay on the event loop.
    """

    result = MessageDeliveryResult()
    try:
        _validate(sender_id, receiver_id, content)
    except ValidationError as exc:
        result.error = exc
        return result

    message = Message(
        id=None,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        created_at=app_now(),
    )
    try:
        result.message = await to_thread.run_sync(
            MessageRepository(session).create, message
        )

        sender = await to_thread.run_sync(UserRepository(session).get, sender_id)
        if sender is None:
            raise SenderNotFoundError(f"Sender {sender_id} not found")

        await publisher.message_received(result.message)
        result.notification = await notify_new_message(
            session, publisher, sender=sender, receiver_id=receiver_id
        )
    except SQLAlchemyError as exc:
        await to_thread.run_sync(session.rollback)
        error = CollaboratorError("Could not store the message")
        error.__cause__ = exc
        result.error = error
    except PeerLinkError as exc:
        result.error = exc
    return result
