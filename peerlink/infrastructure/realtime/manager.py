"""Room registry used to address realtime pushes."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Protocol, Set

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Live client handle; satisfied by :class:`fastapi.WebSocket`."""

    async def send_json(self, data: Any) -> None: ...


class DeliveryRouter:
    """Map room identifiers to the live connections joined to them.

    One instance is created per application and shared by every handler. A
    single lock guards the room map; sends happen outside of it on a snapshot,
    so a push never observes a half-applied join or leave, and no send starts
    to a connection once its ``leave`` has returned.
    """

    def __init__(self) -> None:
        self._rooms: DefaultDict[str, Set[Connection]] = defaultdict(set)
        self._memberships: dict[Connection, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, connection: Connection) -> None:
        """Register ``connection`` so it receives broadcasts."""

        async with self._lock:
            self._memberships.setdefault(connection, set())

    async def join(self, connection: Connection, room_id: str) -> None:
        """Add ``connection`` to ``room_id``; joining twice has no effect."""

        room_id = str(room_id)
        async with self._lock:
            self._rooms[room_id].add(connection)
            self._memberships.setdefault(connection, set()).add(room_id)
        logger.info("Connection joined room %s", room_id)

    async def leave(self, connection: Connection) -> None:
        """Drop ``connection`` from every room it joined."""

        async with self._lock:
            rooms = self._memberships.pop(connection, set())
            for room_id in rooms:
                members = self._rooms.get(room_id)
                if members is None:
                    continue
                members.discard(connection)
                if not members:
                    self._rooms.pop(room_id, None)
        if rooms:
            logger.info("Connection left rooms %s", sorted(rooms))

    async def push(self, room_id: str, event: str, payload: Any) -> int:
        """Send ``event`` to every connection in ``room_id``.

        Returns the number of connections reached. An empty room drops the event.
        """

        async with self._lock:
            members = list(self._rooms.get(str(room_id), ()))
        if not members:
            logger.debug("No connection in room %s for %s", room_id, event)
            return 0
        return await self._send_all(members, event, payload, room_id=str(room_id))

    async def broadcast(self, event: str, payload: Any) -> int:
        """Send ``event`` to every registered connection regardless of rooms."""

        async with self._lock:
            members = list(self._memberships)
        return await self._send_all(members, event, payload)

    def room_members(self, room_id: str) -> int:
        return len(self._rooms.get(str(room_id), ()))

    @property
    def connection_count(self) -> int:
        return len(self._memberships)

    async def _send_all(
        self,
        members: list[Connection],
        event: str,
        payload: Any,
        room_id: str | None = None,
    ) -> int:
        message = {"type": event, "data": payload}
        delivered = 0
        for connection in members:
            # Skip connections that left while earlier sends were awaited.
            rooms = self._memberships.get(connection)
            if rooms is None or (room_id is not None and room_id not in rooms):
                continue
            try:
                await connection.send_json(message)
            except Exception:
                logger.warning("Dropping connection after failed %s delivery", event, exc_info=True)
                await self.leave(connection)
            else:
                delivered += 1
        return delivered


__all__ = ["Connection", "DeliveryRouter"]
