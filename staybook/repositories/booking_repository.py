# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for Booking database operations."""

from collections.abc import Sequence
from datetime import date
from typing import cast

from sqlalchemy import CursorResult, Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from staybook.models.booking import Booking, BookingStatus
from staybook.models.listing import Listing
from staybook.models.user import User
from staybook.services.overlap import OccupiedInterval


class BookingRepository:
    """Repository for Booking CRUD operations.

    Read views join through the listing and both users so that bookings
    with a dangling reference are dropped instead of failing the query.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_by_id(self, booking_id: int) -> Booking | None:
        """Get booking by ID.

        Args:
            booking_id: Booking primary key.

        Returns:
            Booking if found, None otherwise.
        """
        result = await self._session.execute(
            select(Booking).where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_with_details(self, booking_id: int) -> Booking | None:
        """Get booking by ID with listing, customer and host loaded.

        Args:
            booking_id: Booking primary key.

        Returns:
            Booking if found and all references resolve, None otherwise.
        """
        result = await self._session.execute(
            self._resolved_query().where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_for_customer(self, customer_id: int) -> Sequence[Booking]:
        """Get bookings made by a customer (their trips).

        Args:
            customer_id: Customer user ID.

        Returns:
            Sequence of bookings ordered by start date.
        """
        result = await self._session.execute(
            self._resolved_query().where(Booking.customer_id == customer_id)
        )
        return result.scalars().all()

    async def get_for_host(self, host_id: int) -> Sequence[Booking]:
        """Get bookings on a host's listings (their reservations).

        Args:
            host_id: Host user ID, as snapshotted on the booking.

        Returns:
            Sequence of bookings ordered by start date ascending.
        """
        result = await self._session.execute(
            self._resolved_query().where(Booking.host_id == host_id)
        )
        return result.scalars().all()

    async def get_for_listing(self, listing_id: int) -> Sequence[Booking]:
        """Get all bookings for a listing.

        Args:
            listing_id: Listing ID to filter by.

        Returns:
            Sequence of bookings ordered by start date.
        """
        result = await self._session.execute(
            self._resolved_query().where(Booking.listing_id == listing_id)
        )
        return result.scalars().all()

    async def get_active_intervals(
        self, listing_id: int, ending_after: date
    ) -> list[tuple[date, date]]:
        """Get committed intervals for a listing that end after a date.

        Intervals ending on or before ``ending_after`` cannot overlap a
        candidate starting on that date, so they are not fetched.

        Args:
            listing_id: Listing ID.
            ending_after: Exclusive lower bound on end_date.

        Returns:
            List of (start_date, end_date) tuples.
        """
        result = await self._session.execute(
            select(Booking.start_date, Booking.end_date).where(
                Booking.listing_id == listing_id,
                Booking.status != BookingStatus.CANCELLED.value,
                Booking.end_date > ending_after,
            )
        )
        return [(row.start_date, row.end_date) for row in result]

    async def get_occupied_intervals(
        self, listing_id: int, from_date: date
    ) -> list[OccupiedInterval]:
        """Get occupied date ranges of a listing that end on or after a date.

        Args:
            listing_id: Listing ID.
            from_date: Inclusive lower bound on end_date.

        Returns:
            Intervals ordered by start date, without booker identity.
        """
        result = await self._session.execute(
            select(Booking.start_date, Booking.end_date)
            .where(
                Booking.listing_id == listing_id,
                Booking.status != BookingStatus.CANCELLED.value,
                Booking.end_date >= from_date,
            )
            .order_by(Booking.start_date, Booking.id)
        )
        return [OccupiedInterval(row.start_date, row.end_date) for row in result]

    async def count_for_listing(self, listing_id: int) -> int:
        """Count bookings referencing a listing.

        Args:
            listing_id: Listing ID.

        Returns:
            Number of bookings.
        """
        result = await self._session.execute(
            select(func.count(Booking.id)).where(Booking.listing_id == listing_id)
        )
        return int(result.scalar_one())

    async def create(self, booking: Booking) -> Booking:
        """Create a new booking.

        Args:
            booking: Booking entity to create.

        Returns:
            Created booking with ID.
        """
        self._session.add(booking)
        await self._session.flush()
        await self._session.refresh(booking)
        return booking

    async def delete_by_id(self, booking_id: int) -> int:
        """Delete a single booking.

        Args:
            booking_id: Booking primary key.

        Returns:
            Number of rows deleted (0 or 1).
        """
        stmt = delete(Booking).where(Booking.id == booking_id)
        result = cast("CursorResult[tuple[()]]", await self._session.execute(stmt))
        await self._session.flush()
        return result.rowcount or 0

    async def delete_for_listing(self, listing_id: int) -> int:
        """Delete every booking of a listing.

        Args:
            listing_id: Listing ID.

        Returns:
            Number of bookings deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(Booking).where(Booking.listing_id == listing_id)
            ),
        )
        await self._session.flush()
        return result.rowcount or 0

    async def delete_orphans(self) -> int:
        """Delete bookings whose listing no longer exists.

        Returns:
            Number of bookings deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(Booking)
                .where(Booking.listing_id.not_in(select(Listing.id)))
                .execution_options(synchronize_session=False)
            ),
        )
        await self._session.flush()
        return result.rowcount or 0

    @staticmethod
    def _resolved_query() -> Select[tuple[Booking]]:
        """Build a booking query restricted to fully resolvable bookings.

        Returns:
            Select joined to listing, customer and host, with those
            relationships eagerly loaded and rows ordered by start date.
        """
        customer = aliased(User)
        host = aliased(User)
        return (
            select(Booking)
            .join(Listing, Booking.listing_id == Listing.id)
            .join(customer, Booking.customer_id == customer.id)
            .join(host, Booking.host_id == host.id)
            .options(
                selectinload(Booking.listing),
                selectinload(Booking.customer),
                selectinload(Booking.host),
            )
            .order_by(Booking.start_date, Booking.id)
        )
