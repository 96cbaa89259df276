"""
Pytest fixtures for test database, client, seats and bookings.

Uses an in-memory SQLite database (aiosqlite, single shared connection) that is
created and dropped per test for isolation and speed. Redis is disabled so the
analytics cache degrades to always-miss.
"""

import os

os.environ["REDIS_ENABLED"] = "false"
os.environ["ADMIN_PASSWORD"] = ""

import uuid
from datetime import date, datetime, timezone
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from deskbook.main import app
from deskbook.db.base import Base
from deskbook.db.session import get_db
from deskbook.models import Booking, Cancellation, Seat

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seats(db_session: AsyncSession) -> list[Seat]:
    """Two desks: S1 (labelled) and S2."""
    rows = [
        Seat(id="S1", label="Window desk", x=10.0, y=20.0, zone="North"),
        Seat(id="S2", label="S2", x=55.5, y=40.0),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows


@pytest_asyncio.fixture
async def add_booking(db_session: AsyncSession):
    """Insert a booking row directly, bypassing the service."""

    async def _add(
        seat_id: str,
        day: date,
        user_name: str = "alice",
        series_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Booking:
        booking = Booking(
            id=str(uuid.uuid4()),
            seat_id=seat_id,
            date=day,
            user_name=user_name,
            series_id=series_id,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(booking)
        await db_session.commit()
        return booking

    return _add


@pytest_asyncio.fixture
async def add_cancellation(db_session: AsyncSession):
    async def _add(
        seat_id: str,
        day: date,
        user_name: str,
        cancelled_at: datetime,
        source: str = "single",
    ) -> Cancellation:
        row = Cancellation(
            booking_id=str(uuid.uuid4()),
            seat_id=seat_id,
            date=day,
            user_name=user_name,
            source=source,
            cancelled_at=cancelled_at,
        )
        db_session.add(row)
        await db_session.commit()
        return row

    return _add
