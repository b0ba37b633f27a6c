"""Relay notification deletions from the change feed to every client."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from peerlink.domain.exceptions import CollaboratorError
from peerlink.infrastructure.change_feed import NotificationSubscription

from .publisher import RealtimePublisher

logger = logging.getLogger(__name__)


class ChangeFeedBridge:
    """Supervised consumer of the notification delete stream.

    Each delete event becomes one ``notificationDeleted`` broadcast. When the
    subscription cannot be opened or is dropped, the bridge resubscribes after an
    exponentially growing delay. ``max_retries`` consecutive failures without a
    single delivered event stop the bridge with :class:`CollaboratorError`.
    """

    def __init__(
        self,
        subscribe: Callable[[], NotificationSubscription],
        publisher: RealtimePublisher,
        *,
        initial_backoff: float = 0.5,
        max_backoff: float = 30.0,
        max_retries: int = 10,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._subscribe = subscribe
        self._publisher = publisher
        self._initial_backoff = initial_backoff
        self._max_backoff = max_backoff
        self._max_retries = max_retries
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self._delivered = 0

    @classmethod
    def from_settings(
        cls,
        subscribe: Callable[[], NotificationSubscription],
        publisher: RealtimePublisher,
        settings,
    ) -> "ChangeFeedBridge":
        return cls(
            subscribe,
            publisher,
            initial_backoff=settings.change_feed_initial_backoff_seconds,
            max_backoff=settings.change_feed_max_backoff_seconds,
            max_retries=settings.change_feed_max_retries,
        )

    async def run(self) -> None:
        failures = 0
        backoff = self._initial_backoff
        while True:
            self._delivered = 0
            try:
                await self._consume()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                error: Exception | None = exc
            else:
                error = None

            if self._delivered:
                failures = 0
                backoff = self._initial_backoff
            failures += 1
            if failures > self._max_retries:
                logger.error(
                    "Notification change feed failed %s times in a row; giving up",
                    failures,
                )
                raise CollaboratorError(
                    "Notification change feed subscription could not be restored"
                ) from error
            logger.warning(
                "Notification change feed interrupted (%s); resubscribing in %.2fs",
                error or "stream ended",
                backoff,
            )
            await self._sleep(backoff)
            backoff = min(backoff * 2, self._max_backoff)

    async def _consume(self) -> None:
        subscription = self._subscribe()
        async with subscription:
            async for deleted in subscription:
                await self._publisher.notification_deleted(deleted.notification_id)
                self._delivered += 1

    def start(self) -> asyncio.Task:
        """Run the bridge as a background task on the current loop."""

        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name="notification-change-feed-bridge"
            )
            self._task.add_done_callback(self._report_exit)
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except CollaboratorError:
            logger.debug("Change feed bridge had already stopped after repeated failures")

    @staticmethod
    def _report_exit(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification change feed bridge stopped", exc_info=exc)


__all__ = ["ChangeFeedBridge"]
