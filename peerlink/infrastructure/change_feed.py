"""Change stream of committed deletions on the notification table.

SQLAlchemy session events collect the identifiers of deleted
:class:`NotificationModel` rows while a transaction flushes and publish them
once the transaction commits. Rolled back deletions are discarded, so every
committed deletion is announced exactly once to every live subscription.

Rows removed with bulk ``Query.delete()`` statements bypass the unit of work
and are not observed; repositories delete notifications through
``Session.delete``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from peerlink.domain.exceptions import CollaboratorError
from peerlink.infrastructure.models import NotificationModel

logger = logging.getLogger(__name__)

_PENDING_KEY = "peerlink.deleted_notification_ids"
_CLOSED = object()


@dataclass(frozen=True)
class NotificationDeleted:
    """Delete event emitted by the change feed."""

    notification_id: str


class ChangeFeedClosed(CollaboratorError):
    """The subscription was terminated by the feed."""


class NotificationSubscription:
    """Async iterator over the delete events received since subscribing."""

    def __init__(
        self, feed: "NotificationChangeFeed", loop: asyncio.AbstractEventLoop
    ) -> None:
        self._feed = feed
        self._loop = loop
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.closed = False

    def deliver(self, item: Any) -> bool:
        """Hand ``item`` to the subscriber loop from any thread."""

        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Event loop already closed.
            return False
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed._unsubscribe(self)

    def __aiter__(self) -> "NotificationSubscription":
        return self

    async def __anext__(self) -> NotificationDeleted:
        item = await self._queue.get()
        if item is _CLOSED:
            self.close()
            raise ChangeFeedClosed("Notification change feed closed the subscription")
        return item

    async def __aenter__(self) -> "NotificationSubscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class NotificationChangeFeed:
    """Fan out committed notification deletions to async subscribers."""

    def __init__(self) -> None:
        self._subscriptions: set[NotificationSubscription] = set()
        self._lock = threading.Lock()

    def subscribe(self) -> NotificationSubscription:
        """Open a subscription bound to the running event loop."""

        subscription = NotificationSubscription(self, asyncio.get_running_loop())
        with self._lock:
            self._subscriptions.add(subscription)
        return subscription

    def publish_delete(self, notification_id: str) -> None:
        """Announce that ``notification_id`` was removed."""

        deleted = NotificationDeleted(notification_id=notification_id)
        for subscription in self._snapshot():
            if not subscription.deliver(deleted):
                logger.warning("Dropping change feed subscription bound to a closed loop")
                self._unsubscribe(subscription)

    def close(self) -> None:
        """Terminate every live subscription."""

        for subscription in self._snapshot():
            subscription.deliver(_CLOSED)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def attach(self, target: Any = Session) -> None:
        """Register the session hooks that feed this change stream."""

        for name, handler in (
            ("after_flush", self._collect_deleted),
            ("after_commit", self._publish_pending),
            ("after_rollback", self._discard_pending),
        ):
            if not event.contains(target, name, handler):
                event.listen(target, name, handler)

    def _snapshot(self) -> list[NotificationSubscription]:
        with self._lock:
            return list(self._subscriptions)

    def _unsubscribe(self, subscription: NotificationSubscription) -> None:
        with self._lock:
            self._subscriptions.discard(subscription)

    def _collect_deleted(self, session: Session, flush_context: Any) -> None:
        deleted_ids = []
        for instance in session.deleted:
            if not isinstance(instance, NotificationModel):
                continue
            identity = inspect(instance).identity
            if identity:
                deleted_ids.append(identity[0])
        if deleted_ids:
            session.info.setdefault(_PENDING_KEY, []).extend(deleted_ids)

    def _publish_pending(self, session: Session) -> None:
        for notification_id in session.info.pop(_PENDING_KEY, []):
            self.publish_delete(notification_id)

    def _discard_pending(self, session: Session) -> None:
        session.info.pop(_PENDING_KEY, None)


notification_change_feed = NotificationChangeFeed()
notification_change_feed.attach()


__all__ = [
    "ChangeFeedClosed",
    "NotificationChangeFeed",
    "NotificationDeleted",
    "NotificationSubscription",
    "notification_change_feed",
]
