"""Pytest configuration and shared fixtures for the helpdesk tests.

Settings are read once at import time, so the environment is pinned here
before anything from ``helpdesk`` is imported: an in-memory SQLite
database, no webhook URL and no background watchdog.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["SLA_WATCHDOG_ENABLED"] = "false"
os.environ["TEAMS_WEBHOOK_URL"] = ""
os.environ["JWT_SECRET"] = "test-secret"

from datetime import datetime, timedelta, timezone
from typing import List

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from helpdesk.config import Role
from helpdesk.identity.domain import User
from helpdesk.identity.infrastructure import BcryptPasswordHasher, SQLAlchemyUserRepository
from helpdesk.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    init_database,
)
from helpdesk.shared.infrastructure.notifications import (
    INotificationPublisher,
    NotificationEvent,
    NotificationSink,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret1"

# Minimum bcrypt cost keeps the suite fast
fast_hasher = BcryptPasswordHasher(rounds=4)


class FrozenClock:
    """Controllable clock for services that take a ``clock`` callable."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingPublisher(INotificationPublisher):
    """Keeps every published event in memory."""

    def __init__(self):
        self.events: List[NotificationEvent] = []

    def publish(self, event: NotificationEvent) -> bool:
        self.events.append(event)
        return True


class ExplodingPublisher(INotificationPublisher):
    """Publisher whose every call fails."""

    def publish(self, event: NotificationEvent) -> bool:
        raise RuntimeError("notification channel down")


class RecordingSink(NotificationSink):
    """Sink that records deliveries, optionally failing the first ones."""

    def __init__(self, fail_times: int = 0):
        self.sent: List[NotificationEvent] = []
        self.fail_times = fail_times
        self.closed = False

    async def send(self, event: NotificationEvent) -> bool:
        if self.fail_times > 0:
            self.fail_times -= 1
            raise RuntimeError("sink failure")
        self.sent.append(event)
        return True

    async def close(self) -> None:
        self.closed = True


async def create_user(session, email: str, role: Role = Role.REQUESTER, name: str = None) -> User:
    """Insert a user directly, bypassing registration (which only makes requesters)."""
    repository = SQLAlchemyUserRepository(session)
    return await repository.create(
        email=email,
        name=name or email.split("@")[0],
        password_hash=fast_hasher.hash(TEST_PASSWORD),
        role=role,
    )


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory database and one open session on it."""
    init_database(TEST_DATABASE_URL)
    await create_tables()
    async with get_session_context() as session:
        yield session
    await close_database()


@pytest_asyncio.fixture
async def users(db_session):
    """One user per role plus a second requester."""
    requester = await create_user(db_session, "ana@example.com", Role.REQUESTER, "Ana")
    other = await create_user(db_session, "bruno@example.com", Role.REQUESTER, "Bruno")
    agent = await create_user(db_session, "carla@example.com", Role.AGENT, "Carla")
    admin = await create_user(db_session, "diego@example.com", Role.ADMIN, "Diego")
    return {
        "requester": requester,
        "other": other,
        "agent": agent,
        "admin": admin,
    }


@pytest_asyncio.fixture
async def actors(users):
    return {key: user.to_actor() for key, user in users.items()}


# ========== API fixtures ==========

@pytest.fixture
def client():
    """TestClient with the full lifespan (fresh database per test)."""
    from helpdesk.main import app

    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str, name: str = "A", password: str = TEST_PASSWORD) -> dict:
    """Register through the API and return auth headers."""
    response = client.post("/api/register", json={"email": email, "name": name, "password": password})
    assert response.status_code == 200, response.text
    return login(client, email, password)


def login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict:
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_staff(client: TestClient, email: str, role: Role) -> dict:
    """Create an agent/admin inside the app's event loop and log them in."""

    async def _insert():
        async with get_session_context() as session:
            await create_user(session, email, role)

    client.portal.call(_insert)
    return login(client, email)
