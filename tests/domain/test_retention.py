"""Tests for the notification time-to-live policy."""

from datetime import datetime, timedelta, timezone

import pytest

from peerlink.domain.entities import Notification
from peerlink.domain.retention import NotificationRetentionPolicy

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _notification(age: timedelta, *, read: bool) -> Notification:
    return Notification(
        id="n1",
        user_id="a1",
        type="new_message",
        message="New message from Bob",
        read=read,
        created_at=NOW - age,
    )


@pytest.mark.parametrize(
    ("age", "read", "expired"),
    [
        (timedelta(days=7), False, True),
        (timedelta(days=7) - timedelta(seconds=1), False, False),
        (timedelta(days=8), False, True),
        (timedelta(days=1), True, True),
        (timedelta(hours=23, minutes=59), True, False),
        (timedelta(days=2), False, False),
    ],
)
def test_is_expired(age, read, expired):
    policy = NotificationRetentionPolicy()

    assert policy.is_expired(_notification(age, read=read), NOW) is expired


def test_cutoffs_follow_configured_ttls():
    policy = NotificationRetentionPolicy(
        unread_ttl=timedelta(hours=2), read_ttl=timedelta(minutes=30)
    )

    assert policy.cutoffs(NOW) == (NOW - timedelta(hours=2), NOW - timedelta(minutes=30))


def test_from_settings_reads_seconds():
    class _Settings:
        notification_unread_ttl_seconds = 3600
        notification_read_ttl_seconds = 60

    policy = NotificationRetentionPolicy.from_settings(_Settings())

    assert policy.ttl_for(False) == timedelta(hours=1)
    assert policy.ttl_for(True) == timedelta(minutes=1)
