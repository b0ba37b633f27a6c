"""Timestamps for PeerLink.

Domain objects carry aware datetimes in the configured ``APP_TIMEZONE``. The
``DateTime`` columns hold the same wall-clock time without ``tzinfo``, so
``to_storage`` and ``from_storage`` convert between the two representations.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from peerlink.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def app_zone() -> tzinfo:
    name = get_settings().app_timezone.strip()
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r, using UTC", name)
        return timezone.utc


def app_now() -> datetime:
    return datetime.now(tz=app_zone())


def to_storage(value: datetime | None) -> datetime | None:
    """Naive wall-clock time in the app zone; naive input is taken as already local."""

    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(app_zone()).replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=app_zone())
    return value.astimezone(app_zone())


def storage_now() -> datetime:
    """Column default."""

    return datetime.now(tz=app_zone()).replace(tzinfo=None)
