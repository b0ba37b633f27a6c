"""Tests for the notification pipeline."""

import threading

import pytest

from peerlink.application.use_cases.notifications import (
    count_unread_notifications,
    create_notification,
    list_notifications,
    mark_notification_read,
    notify_friend_request,
    notify_friend_request_accepted,
    notify_friend_request_declined,
)
from peerlink.domain.entities import NotificationType
from peerlink.domain.exceptions import NotFoundError, UnauthorizedError, ValidationError
from peerlink.infrastructure.repositories import NotificationRepository

from conftest import FakeConnection


@pytest.fixture()
def owner(make_user):
    return make_user("a1", "Alice")


@pytest.fixture()
def stranger(make_user):
    return make_user("b1", "Bob")


async def _notification_for(session, publisher, owner_id="a1"):
    return await create_notification(
        session,
        publisher,
        owner_id=owner_id,
        notification_type=NotificationType.NEW_MESSAGE,
        message="New message from Bob",
        related_id="b1",
    )


@pytest.mark.asyncio
async def test_create_notification_stores_unread_and_pushes(
    session, delivery_router, publisher, owner
):
    connection = FakeConnection()
    await delivery_router.join(connection, "a1")

    notification = await _notification_for(session, publisher)

    stored = NotificationRepository(session).get(notification.id)
    assert stored is not None and stored.read is False
    assert stored.created_at is not None
    pushed = connection.events("newNotification")
    assert len(pushed) == 1
    assert pushed[0] == {
        "id": notification.id,
        "userId": "a1",
        "type": "new_message",
        "message": "New message from Bob",
        "relatedId": "b1",
        "read": False,
        "createdAt": notification.created_at.isoformat(),
    }


@pytest.mark.asyncio
async def test_create_notification_without_listener_is_not_an_error(session, publisher, owner):
    notification = await _notification_for(session, publisher)

    assert notification.id is not None


@pytest.mark.asyncio
async def test_create_notification_rejects_unknown_type(session, publisher, owner):
    with pytest.raises(ValidationError):
        await create_notification(
            session, publisher, owner_id="a1", notification_type="poke", message="Poked"
        )


@pytest.mark.asyncio
async def test_mark_read_by_owner(session, delivery_router, publisher, owner):
    connection = FakeConnection()
    await delivery_router.join(connection, "a1")
    notification = await _notification_for(session, publisher)

    updated = await mark_notification_read(
        session, publisher, notification_id=notification.id, user_id="a1"
    )

    assert updated.read is True
    assert NotificationRepository(session).get(notification.id).read is True
    assert connection.events("notificationRead") == [{"notificationId": notification.id}]


@pytest.mark.asyncio
async def test_mark_read_twice_succeeds_and_emits_twice(
    session, delivery_router, publisher, owner
):
    connection = FakeConnection()
    await delivery_router.join(connection, "a1")
    notification = await _notification_for(session, publisher)

    await mark_notification_read(
        session, publisher, notification_id=notification.id, user_id="a1"
    )
    second = await mark_notification_read(
        session, publisher, notification_id=notification.id, user_id="a1"
    )

    assert second.read is True
    assert connection.events("notificationRead") == [
        {"notificationId": notification.id},
        {"notificationId": notification.id},
    ]


@pytest.mark.asyncio
async def test_mark_read_by_non_owner_changes_nothing(
    session, delivery_router, publisher, owner, stranger
):
    owner_conn, stranger_conn = FakeConnection("a1"), FakeConnection("b1")
    await delivery_router.join(owner_conn, "a1")
    await delivery_router.join(stranger_conn, "b1")
    notification = await _notification_for(session, publisher)

    with pytest.raises(UnauthorizedError):
        await mark_notification_read(
            session, publisher, notification_id=notification.id, user_id="b1"
        )

    assert NotificationRepository(session).get(notification.id).read is False
    assert owner_conn.events("notificationRead") == []
    assert stranger_conn.frames == []


@pytest.mark.asyncio
async def test_mark_read_missing_notification(session, publisher, owner):
    with pytest.raises(NotFoundError):
        await mark_notification_read(
            session, publisher, notification_id="missing", user_id="a1"
        )


@pytest.mark.asyncio
async def test_unread_count_only_counts_unread_of_owner(session, publisher, owner, stranger):
    first = await _notification_for(session, publisher)
    await _notification_for(session, publisher)
    await _notification_for(session, publisher, owner_id="b1")

    await mark_notification_read(session, publisher, notification_id=first.id, user_id="a1")

    assert count_unread_notifications(session, "a1") == 1
    assert count_unread_notifications(session, "b1") == 1
    assert count_unread_notifications(session, "nobody") == 0
    assert len(list_notifications(session, "a1")) == 2


@pytest.mark.asyncio
async def test_friend_request_notifications(session, publisher, owner, stranger):
    request = await notify_friend_request(
        session, publisher, from_user=stranger, to_user_id="a1", request_id="r1"
    )
    accepted = await notify_friend_request_accepted(
        session, publisher, requester_id="b1", accepted_by=owner, request_id="r1"
    )
    declined = await notify_friend_request_declined(
        session, publisher, requester_id="b1", declined_by=owner, request_id="r2"
    )

    assert (request.user_id, request.type, request.message) == (
        "a1",
        "friend_request",
        "Bob sent you a friend request",
    )
    assert (accepted.user_id, accepted.type, accepted.message) == (
        "b1",
        "friend_request_accepted",
        "Alice accepted your friend request",
    )
    assert declined.type == "friend_request_declined"
    assert declined.message == "Alice declined your friend request"
    assert declined.related_id == "r2"


@pytest.mark.asyncio
async def test_mark_read_updates_outside_the_event_loop_thread(
    session, publisher, owner, monkeypatch
):
    notification = await _notification_for(session, publisher)
    update_threads = []
    original = NotificationRepository.mark_as_read

    def recording_mark_as_read(self, notification_id):
        update_threads.append(threading.get_ident())
        return original(self, notification_id)

    monkeypatch.setattr(NotificationRepository, "mark_as_read", recording_mark_as_read)

    await mark_notification_read(
        session, publisher, notification_id=notification.id, user_id="a1"
    )

    assert len(update_threads) == 1
    assert update_threads[0] != threading.get_ident()
