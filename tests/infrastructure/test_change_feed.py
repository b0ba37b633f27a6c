"""Tests for the notification change feed, the expiry sweep and the bridge."""

import asyncio
from datetime import timedelta

import pytest

from peerlink.domain.entities import Notification
from peerlink.domain.retention import NotificationRetentionPolicy
from peerlink.infrastructure.change_feed import (
    ChangeFeedClosed,
    NotificationChangeFeed,
    NotificationDeleted,
    notification_change_feed,
)
from peerlink.infrastructure.database import SessionLocal
from peerlink.infrastructure.expiry import NotificationExpirySweeper
from peerlink.infrastructure.models import NotificationModel
from peerlink.infrastructure.realtime import ChangeFeedBridge
from peerlink.infrastructure.repositories import NotificationRepository
from peerlink.utils import app_now

from conftest import FakeConnection, wait_for


def _store(session, *, created_at, read=False, owner="a1") -> Notification:
    return NotificationRepository(session).create(
        Notification(
            id=None,
            user_id=owner,
            type="new_message",
            message="New message from Bob",
            related_id="b1",
            read=read,
            created_at=created_at,
        )
    )


async def _next_event(subscription, timeout=1.0):
    return await asyncio.wait_for(subscription.__anext__(), timeout)


@pytest.fixture()
def owner(make_user):
    return make_user("a1", "Alice")


@pytest.mark.asyncio
async def test_explicit_delete_is_published_once(session, owner):
    notification = _store(session, created_at=app_now())

    async with notification_change_feed.subscribe() as subscription:
        assert NotificationRepository(session).delete(notification.id) is True

        assert await _next_event(subscription) == NotificationDeleted(notification.id)
        with pytest.raises(asyncio.TimeoutError):
            await _next_event(subscription, timeout=0.05)


@pytest.mark.asyncio
async def test_rolled_back_delete_is_not_published(session, owner):
    notification = _store(session, created_at=app_now())

    async with notification_change_feed.subscribe() as subscription:
        model = session.get(NotificationModel, notification.id)
        session.delete(model)
        session.flush()
        session.rollback()

        with pytest.raises(asyncio.TimeoutError):
            await _next_event(subscription, timeout=0.05)
    assert NotificationRepository(session).get(notification.id) is not None


@pytest.mark.asyncio
async def test_every_subscription_receives_the_event():
    feed = NotificationChangeFeed()
    first, second = feed.subscribe(), feed.subscribe()

    feed.publish_delete("n1")

    assert await _next_event(first) == NotificationDeleted("n1")
    assert await _next_event(second) == NotificationDeleted("n1")
    first.close()
    second.close()
    assert feed.subscriber_count == 0


def test_sweep_deletes_only_expired_notifications(session, owner):
    now = app_now()
    unread_expired = _store(session, created_at=now - timedelta(days=7))
    read_expired = _store(session, created_at=now - timedelta(days=1), read=True)
    unread_fresh = _store(session, created_at=now - timedelta(days=6, hours=23))
    read_fresh = _store(session, created_at=now - timedelta(hours=23), read=True)

    sweeper = NotificationExpirySweeper(SessionLocal, NotificationRetentionPolicy())
    deleted = sweeper.sweep_once(now=now)

    assert set(deleted) == {unread_expired.id, read_expired.id}
    remaining = {model.id for model in session.query(NotificationModel).all()}
    assert remaining == {unread_fresh.id, read_fresh.id}


@pytest.mark.asyncio
async def test_expired_notifications_are_broadcast_once_each(session, publisher, owner):
    now = app_now()
    expired = _store(session, created_at=now - timedelta(days=7))
    expired_read = _store(session, created_at=now - timedelta(days=1), read=True)
    _store(session, created_at=now)

    joined, idle = FakeConnection("a1"), FakeConnection("idle")
    await publisher.router.join(joined, "a1")
    await publisher.router.connect(idle)

    baseline = notification_change_feed.subscriber_count
    bridge = ChangeFeedBridge(notification_change_feed.subscribe, publisher)
    bridge.start()
    try:
        await wait_for(lambda: notification_change_feed.subscriber_count > baseline)

        sweeper = NotificationExpirySweeper(SessionLocal, NotificationRetentionPolicy())
        sweeper.sweep_once(now=now)

        await wait_for(lambda: len(idle.frames) == 2)
        await asyncio.sleep(0.05)
    finally:
        await bridge.stop()

    expected = {expired.id, expired_read.id}
    for connection in (joined, idle):
        ids = [data["notificationId"] for data in connection.events("notificationDeleted")]
        assert sorted(ids) == sorted(expected)
    assert notification_change_feed.subscriber_count == baseline


@pytest.mark.asyncio
async def test_closing_the_feed_ends_subscriptions():
    feed = NotificationChangeFeed()
    subscription = feed.subscribe()

    feed.close()

    with pytest.raises(ChangeFeedClosed):
        await _next_event(subscription)
    assert feed.subscriber_count == 0
