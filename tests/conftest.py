"""Shared fixtures: an on-disk SQLite database and fake realtime connections."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from peerlink.config import reset_settings_cache  # noqa: E402
from peerlink.domain.entities import User  # noqa: E402
from peerlink.infrastructure import database  # noqa: E402
from peerlink.infrastructure.realtime import DeliveryRouter, RealtimePublisher  # noqa: E402
from peerlink.infrastructure.repositories import UserRepository  # noqa: E402
from peerlink.infrastructure.security import create_user_token  # noqa: E402


@event.listens_for(database.engine, "connect")
def _enforce_foreign_keys(dbapi_connection, connection_record):
    """Run SQLite with foreign keys enforced, like the server backends."""

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeConnection:
    """Collects the frames a websocket would have sent."""

    def __init__(self, name: str = "conn") -> None:
        self.name = name
        self.frames: list[dict] = []

    async def send_json(self, data) -> None:
        self.frames.append(data)

    def events(self, event_type: str) -> list:
        return [frame["data"] for frame in self.frames if frame["type"] == event_type]

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


class BrokenConnection(FakeConnection):
    async def send_json(self, data) -> None:
        raise ConnectionResetError("peer went away")


@pytest.fixture(autouse=True)
def setup_database():
    """Prepare a fresh schema for every test."""

    database.initialize_database()
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


def pytest_sessionfinish(session, exitstatus):
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Return a factory storing a user with a fixed identifier."""

    def _make(user_id: str, name: str, email: str | None = None) -> User:
        return UserRepository(session).create(
            User(id=user_id, name=name, email=email or f"{user_id}@example.com")
        )

    return _make


@pytest.fixture()
def delivery_router() -> DeliveryRouter:
    return DeliveryRouter()


@pytest.fixture()
def publisher(delivery_router) -> RealtimePublisher:
    return RealtimePublisher(delivery_router)


async def wait_for(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until ``predicate()`` holds."""

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


@pytest.fixture()
def client():
    """Return a test client bound to a fresh application instance."""

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(user_id)}"}

    return _headers


@pytest.fixture()
def acknowledge_errors(monkeypatch):
    """Enable ``sendMessageFailed`` frames for the duration of a test."""

    monkeypatch.setenv("REALTIME_ACKNOWLEDGE_ERRORS", "true")
    reset_settings_cache()
    yield
    monkeypatch.delenv("REALTIME_ACKNOWLEDGE_ERRORS")
    reset_settings_cache()
