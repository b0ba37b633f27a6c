"""Identifier generation for persisted records."""

from uuid import uuid4


def new_record_id() -> str:
    """Return an opaque identifier for a new row."""

    return uuid4().hex
