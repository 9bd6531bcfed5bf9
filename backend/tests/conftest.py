"""
Mini Notes Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets fresh in-memory storage and services with a cheap
       bcrypt cost, so tests are isolated and fast.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings with memory storage and bcrypt cost 4
    ├── storage:       StorageBackends of two MemoryKeyValueStores
    ├── clock:         FakeClock shared by SessionStore and NoteService
    ├── auth_service / note_service: services over `storage` and `clock`
    ├── test_client:   HTTPX AsyncClient bound to create_app(...)
    └── register_user: helper that registers through the API, returns a token
"""

import os
from datetime import datetime, timedelta, timezone

# Must be set before mininotes.config creates its settings singleton
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mininotes.config import Settings
from mininotes.services.auth_service import AuthService
from mininotes.services.note_service import NoteService
from mininotes.services.password_hasher import PasswordHasher
from mininotes.services.session_store import SessionStore
from mininotes.storage import MemoryKeyValueStore, StorageBackends


class FakeClock:
    """Deterministic UTC clock; call it like datetime.now(timezone.utc)."""

    def __init__(self, start: datetime = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def test_settings():
    return Settings(
        storage_backend="memory",
        bcrypt_rounds=4,
        token_ttl_seconds=3600,
        rate_limit_requests=1000,
        log_level="WARNING",
    )


@pytest.fixture
def storage():
    return StorageBackends(notes=MemoryKeyValueStore(), users=MemoryKeyValueStore())


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth_service(storage, clock):
    sessions = SessionStore(storage.users, ttl_seconds=3600, clock=clock)
    return AuthService(storage.users, sessions, PasswordHasher(rounds=4), password_min_length=6)


@pytest.fixture
def note_service(storage, clock):
    return NoteService(storage.notes, clock=clock)


@pytest.fixture
def app(test_settings, storage):
    from mininotes.main import create_app
    return create_app(settings=test_settings, storage=storage)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Register `username` through the API and return its bearer token."""

    async def _register(username: str = "alice", password: str = "s3cret-pw") -> str:
        response = await test_client.post(
            "/api/auth/register",
            json={"username": username, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["token"]

    return _register