"""
Pytest fixtures for stores, the application, the HTTP client and tokens.

Every test gets a fresh in-memory SQLite database as the remote store and
Redis disabled, so the calendar is always read through the gateway.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_ENABLED"] = "false"
os.environ["SEED_LOCAL_MESSAGES"] = "false"
os.environ["JWT_SECRET"] = "test-identity-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, time
from typing import AsyncGenerator

import jwt
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from riding_club.core.errors import BackendUnavailable
from riding_club.db.base import Base
from riding_club.db.session import build_engine, build_sessionmaker
from riding_club.gateway import LocalStore, SqlStore
from riding_club.main import create_app, start_services, stop_services
from riding_club.schemas.booking import BookingTemplate
from riding_club.services.projection import BookingProjection
from riding_club.services.recurrence import expand_weekly

TEST_JWT_SECRET = "test-identity-secret"

SUBSCRIPTION_START = date(2025, 1, 6)
SUBSCRIPTION_END = date(2025, 2, 3)


class FlakyStore(LocalStore):
    """
    LocalStore that fails on demand:
    - writes to any id in ``failing_ids``
    - the n-th create_booking call for n in ``failing_creates`` (1-based)
    - list_bookings while ``fail_reads`` is set
    """

    def __init__(self):
        super().__init__()
        self.failing_ids: set[str] = set()
        self.failing_creates: set[int] = set()
        self.fail_reads = False
        self.create_calls = 0

    async def create_booking(self, draft):
        self.create_calls += 1
        if self.create_calls in self.failing_creates:
            raise BackendUnavailable("connection reset by peer")
        return await super().create_booking(draft)

    async def list_bookings(self, owner_id=None, include_deleted=False):
        if self.fail_reads:
            raise BackendUnavailable("connection reset by peer")
        return await super().list_bookings(owner_id=owner_id, include_deleted=include_deleted)

    async def update_booking_status(self, booking_id, status, shared_riding=None):
        if booking_id in self.failing_ids:
            raise RuntimeError("write rejected")
        return await super().update_booking_status(booking_id, status, shared_riding)

    async def soft_delete_booking(self, booking_id):
        if booking_id in self.failing_ids:
            raise RuntimeError("write rejected")
        return await super().soft_delete_booking(booking_id)


def make_template(**overrides) -> BookingTemplate:
    values = {
        "owner_id": "member-1",
        "owner_display_name": "Anna",
        "arena": "indoor",
        "start_time": time(10, 0),
        "end_time": time(11, 0),
    }
    values.update(overrides)
    return BookingTemplate(**values)


def make_token(sub: str, name: str, role: str = "member", **claims) -> str:
    payload = {"sub": sub, "name": name, "role": role, **claims}
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def projection() -> BookingProjection:
    return BookingProjection()


@pytest_asyncio.fixture
async def subscription(store: FlakyStore, projection: BookingProjection):
    """A five-week pending subscription, parent id "sub_1", stored and projected."""
    drafts = expand_weekly(SUBSCRIPTION_START, SUBSCRIPTION_END, make_template(), group_id="sub_1")
    records = [await store.create_booking(d) for d in drafts]
    projection.add(records)
    return records


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlStore, None]:
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlStore(build_sessionmaker(engine))
    await engine.dispose()


@pytest_asyncio.fixture
async def app() -> AsyncGenerator[FastAPI, None]:
    """Application wired to a fresh database; ASGITransport skips the lifespan."""
    application = create_app()
    await start_services(application, create_tables=True)
    yield application
    await stop_services(application)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def member_headers() -> dict:
    return {"Authorization": f"Bearer {make_token('member-1', 'Anna')}"}


@pytest.fixture
def other_member_headers() -> dict:
    return {"Authorization": f"Bearer {make_token('member-2', 'Bea')}"}


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {make_token('admin-1', 'Office', role='admin')}"}
