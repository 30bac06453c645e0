# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Concurrency tests for booking creation and listing deletion.

Each task uses its own session on a file-backed database, the way
concurrent requests do in the running service.
"""

import asyncio
from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from staybook.database import Base, enable_sqlite_foreign_keys
from staybook.models.listing import Listing
from staybook.models.user import User
from staybook.repositories.booking_repository import BookingRepository
from staybook.repositories.listing_repository import ListingRepository
from staybook.services.booking_service import BookingService
from staybook.services.errors import ConflictError, NotFoundError
from staybook.services.listing_service import ListingService
from staybook.services.locks import ListingLocks


@pytest.fixture
async def file_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Session factory on a temporary SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def seeded(file_factory):
    """Host, listing and three guests; returns their IDs."""
    async with file_factory() as session:
        host = User(first_name="H", last_name="Host", email="host@example.com")
        guests = [
            User(first_name="G", last_name=str(i), email=f"g{i}@example.com")
            for i in range(3)
        ]
        session.add_all([host, *guests])
        await session.flush()
        listing = Listing(
            creator_id=host.id,
            title="Cottage",
            city="Lisbon",
            country="Portugal",
            price=Decimal("100.00"),
        )
        session.add(listing)
        await session.commit()
        return listing.id, host.id, [guest.id for guest in guests]


class TestListingLocks:
    """Tests for the per-listing lock registry."""

    def test_same_listing_same_lock(self):
        """Test callers for one listing share a lock."""
        locks = ListingLocks()
        first = locks.for_listing(1)

        assert locks.for_listing(1) is first
        assert locks.for_listing(2) is not first

    def test_unused_locks_released(self):
        """Test locks nobody holds are dropped."""
        locks = ListingLocks()
        locks.for_listing(1)

        assert len(locks) == 0


class TestConcurrentBookings:
    """Tests for overlapping booking requests racing each other."""

    @pytest.mark.asyncio
    async def test_overlapping_creates_one_wins(
        self, file_factory, seeded, fixed_clock
    ):
        """Test exactly one of several overlapping requests succeeds."""
        listing_id, _host_id, guest_ids = seeded
        locks = ListingLocks()

        async def attempt(guest_id: int, start: str, end: str):
            async with file_factory() as session:
                service = BookingService(
                    session, clock=fixed_clock, listing_locks=locks
                )
                return await service.create_booking(listing_id, guest_id, start, end)

        results = await asyncio.gather(
            attempt(guest_ids[0], "2026-07-01", "2026-07-05"),
            attempt(guest_ids[1], "2026-07-03", "2026-07-08"),
            attempt(guest_ids[2], "2026-07-04", "2026-07-06"),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, BaseException)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(successes) == 1
        assert len(conflicts) == 2

        async with file_factory() as session:
            stored = await BookingRepository(session).get_for_listing(listing_id)
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_disjoint_creates_all_win(self, file_factory, seeded, fixed_clock):
        """Test non-overlapping requests all succeed under the lock."""
        listing_id, _host_id, guest_ids = seeded
        locks = ListingLocks()

        async def attempt(guest_id: int, start: str, end: str):
            async with file_factory() as session:
                service = BookingService(
                    session, clock=fixed_clock, listing_locks=locks
                )
                return await service.create_booking(listing_id, guest_id, start, end)

        results = await asyncio.gather(
            attempt(guest_ids[0], "2026-07-01", "2026-07-03"),
            attempt(guest_ids[1], "2026-07-03", "2026-07-05"),
            attempt(guest_ids[2], "2026-07-05", "2026-07-07"),
        )

        assert len({booking.id for booking in results}) == 3

    @pytest.mark.asyncio
    async def test_create_racing_delete_leaves_no_orphans(
        self, file_factory, seeded, fixed_clock
    ):
        """Test a booking never outlives a listing deleted concurrently."""
        listing_id, host_id, guest_ids = seeded
        locks = ListingLocks()

        async def book():
            async with file_factory() as session:
                service = BookingService(
                    session, clock=fixed_clock, listing_locks=locks
                )
                return await service.create_booking(
                    listing_id, guest_ids[0], "2026-07-01", "2026-07-05"
                )

        async def remove():
            async with file_factory() as session:
                service = ListingService(session, listing_locks=locks)
                return await service.delete_listing(listing_id, host_id)

        book_result, delete_result = await asyncio.gather(
            book(), remove(), return_exceptions=True
        )

        assert not isinstance(delete_result, BaseException)
        if isinstance(book_result, BaseException):
            assert isinstance(book_result, NotFoundError)
            assert delete_result == 0
        else:
            assert delete_result == 1

        async with file_factory() as session:
            assert not await ListingRepository(session).exists(listing_id)
            assert await BookingRepository(session).count_for_listing(listing_id) == 0
