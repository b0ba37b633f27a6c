"""Tests for the resubscription policy of the change feed bridge."""

import asyncio

import pytest

from peerlink.domain.exceptions import CollaboratorError
from peerlink.infrastructure.change_feed import ChangeFeedClosed, NotificationDeleted
from peerlink.infrastructure.realtime import ChangeFeedBridge

from conftest import FakeConnection, wait_for


class ScriptedSubscription:
    """Yields the given events, then fails like a dropped stream."""

    def __init__(self, events, *, block=False):
        self._events = list(events)
        self._block = block

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._events:
            return self._events.pop(0)
        if self._block:
            await asyncio.Event().wait()
        raise ChangeFeedClosed("stream dropped")


class ScriptedFeed:
    def __init__(self, script):
        self._script = list(script)
        self.calls = 0

    def subscribe(self):
        self.calls += 1
        step = self._script.pop(0) if self._script else "fail"
        if step == "fail":
            raise CollaboratorError("feed unavailable")
        return step


@pytest.mark.asyncio
async def test_bridge_resubscribes_with_backoff(publisher):
    connection = FakeConnection()
    await publisher.router.connect(connection)
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    feed = ScriptedFeed(
        [
            "fail",
            "fail",
            ScriptedSubscription([NotificationDeleted("n1")]),
            ScriptedSubscription([], block=True),
        ]
    )
    bridge = ChangeFeedBridge(
        feed.subscribe, publisher, initial_backoff=0.1, max_backoff=1.0, sleep=fake_sleep
    )
    bridge.start()
    try:
        await wait_for(lambda: feed.calls == 4)
    finally:
        await bridge.stop()

    assert connection.events("notificationDeleted") == [{"notificationId": "n1"}]
    # The delivered event resets the backoff.
    assert delays == [0.1, 0.2, 0.1]


@pytest.mark.asyncio
async def test_bridge_gives_up_after_max_retries(publisher):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    feed = ScriptedFeed([])
    bridge = ChangeFeedBridge(
        feed.subscribe,
        publisher,
        initial_backoff=0.1,
        max_backoff=0.15,
        max_retries=3,
        sleep=fake_sleep,
    )

    with pytest.raises(CollaboratorError):
        await bridge.run()

    assert feed.calls == 4
    assert delays == [0.1, 0.15, 0.15]
