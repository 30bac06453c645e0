# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Pytest fixtures for StayBook tests."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


# Set environment variables BEFORE any staybook imports
# This must happen at module load time
def _setup_env() -> None:
    """Set up test environment variables at module load."""
    if "DATABASE_URL" not in os.environ:
        os.environ["DATABASE_URL"] = "sqlite:///./test.db"
    if "LOG_LEVEL" not in os.environ:
        os.environ["LOG_LEVEL"] = "DEBUG"


_setup_env()

# Now safe to import from staybook
from fastapi import FastAPI  # noqa: E402
from staybook.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from staybook.models.listing import Listing  # noqa: E402
from staybook.models.user import User  # noqa: E402
from staybook.services.calendar_service import get_calendar_cache  # noqa: E402
from staybook.services.clock import FixedClock, get_clock  # noqa: E402

# Date every test treats as "today"
TODAY = date(2026, 6, 1)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    # Already set by _setup_env(), just yield and cleanup
    yield
    # Cleanup
    test_db_path = Path("test.db")
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture(autouse=True)
def clear_calendar_cache():
    """Drop cached feeds so listing IDs reused across tests start clean."""
    get_calendar_cache().clear()
    yield
    get_calendar_cache().clear()


@pytest.fixture
async def async_engine():
    """Create an async test database engine with foreign keys enforced."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession]:
    """Create an async test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def lenient_session() -> AsyncGenerator[AsyncSession]:
    """Session on a database without foreign key enforcement.

    Lets tests build dangling references the way a store without
    referential integrity would leave them.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()
    await engine.dispose()


@pytest.fixture
def today() -> date:
    """Date the fixed clock reports."""
    return TODAY


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock pinned to TODAY."""
    return FixedClock(TODAY)


@pytest.fixture
def app(session_factory, fixed_clock) -> FastAPI:
    """Create a test FastAPI application bound to the test database."""
    from staybook.main import create_app

    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_clock] = lambda: fixed_clock
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(async_session) -> Callable[..., Awaitable[User]]:
    """Factory persisting users with unique emails."""
    counter = {"n": 0}

    async def _make_user(session: AsyncSession | None = None, **overrides: Any) -> User:
        counter["n"] += 1
        data: dict[str, Any] = {
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
            "email": f"user{counter['n']}@example.com",
        }
        data.update(overrides)
        target = session or async_session
        user = User(**data)
        target.add(user)
        await target.commit()
        return user

    return _make_user


@pytest.fixture
def make_listing(async_session) -> Callable[..., Awaitable[Listing]]:
    """Factory persisting listings with sensible defaults."""

    async def _make_listing(
        creator: User, session: AsyncSession | None = None, **overrides: Any
    ) -> Listing:
        data: dict[str, Any] = {
            "creator_id": creator.id,
            "title": "Seaside Cottage",
            "category": "Beach",
            "type": "An entire place",
            "city": "Lisbon",
            "country": "Portugal",
            "guest_count": 4,
            "bedroom_count": 2,
            "bed_count": 2,
            "bathroom_count": 1,
            "amenities": ["Wifi", "Kitchen"],
            "price": Decimal("100.00"),
        }
        data.update(overrides)
        target = session or async_session
        listing = Listing(**data)
        target.add(listing)
        await target.commit()
        return listing

    return _make_listing


@pytest.fixture
def sample_listing_payload() -> dict[str, Any]:
    """Sample listing request body for API tests."""
    return {
        "title": "Mountain Cabin",
        "description": "Quiet cabin near the trails",
        "category": "Cabins",
        "type": "An entire place",
        "street_address": "1 Pine Road",
        "city": "Banff",
        "province": "Alberta",
        "country": "Canada",
        "guest_count": 4,
        "bedroom_count": 2,
        "bed_count": 3,
        "bathroom_count": 1,
        "amenities": ["Wifi", "Fireplace"],
        "price": 150,
    }
