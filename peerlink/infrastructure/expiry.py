"""Background sweep enforcing the notification retention policy."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerlink.domain.retention import NotificationRetentionPolicy
from peerlink.infrastructure.repositories import NotificationRepository
from peerlink.utils import app_now

logger = logging.getLogger(__name__)


class NotificationExpirySweeper:
    """Periodically delete the notifications whose TTL elapsed.

    Deletions go through the ORM so the change feed announces each of them.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        policy: NotificationRetentionPolicy,
        *,
        interval: float = 60.0,
        clock: Callable[[], datetime] = app_now,
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy
        self._interval = interval
        self._clock = clock
        self._task: asyncio.Task | None = None

    @property
    def policy(self) -> NotificationRetentionPolicy:
        return self._policy

    def sweep_once(self, now: datetime | None = None) -> list[str]:
        """Delete every expired notification and return their identifiers."""

        session = self._session_factory()
        try:
            deleted = NotificationRepository(session).delete_expired(
                self._policy, now or self._clock()
            )
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()
        if deleted:
            logger.info("Expired %s notification(s)", len(deleted))
        return deleted

    async def run(self) -> None:
        while True:
            try:
                await to_thread.run_sync(self.sweep_once)
            except SQLAlchemyError:
                logger.exception("Notification expiry sweep failed; retrying next interval")
            await asyncio.sleep(self._interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name="notification-expiry-sweeper"
            )
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


__all__ = ["NotificationExpirySweeper"]
