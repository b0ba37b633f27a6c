"""Utility helpers for reusable functionality."""

from .clock import app_now, app_zone, from_storage, storage_now, to_storage

__all__ = [
    "app_now",
    "app_zone",
    "from_storage",
    "storage_now",
    "to_storage",
]
