"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Attributes of a user referenced by messages and notifications."""

    id: str | None
    name: str
    email: str
    created_at: datetime | None = None
