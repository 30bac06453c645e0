# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking lifecycle: validated creation, cancellation and read views."""

import logging
from collections.abc import Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, cast

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.config import BookingDeletePolicy, get_settings
from staybook.models.booking import Booking, BookingStatus
from staybook.models.listing import Listing
from staybook.repositories.booking_repository import BookingRepository
from staybook.repositories.listing_repository import ListingRepository
from staybook.services.calendar_service import CalendarCache
from staybook.services.clock import Clock, get_clock
from staybook.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StayBookError,
)
from staybook.services.locks import ListingLocks, get_listing_locks
from staybook.services.overlap import (
    OccupiedInterval,
    conflicts_with_any,
    nights,
    validate_interval,
)

logger = logging.getLogger(__name__)

# Prices are stored as Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")
CENTS = Decimal("0.01")


def parse_date(value: Any) -> date:
    """Parse a calendar date from a date, datetime or ISO-8601 string.

    Args:
        value: Raw date value.

    Returns:
        Parsed date.

    Raises:
        InvalidInputError: If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as err:
            raise InvalidInputError("bad dates") from err
    raise InvalidInputError("bad dates")


def parse_price(value: Any) -> Decimal:
    """Parse a positive, finite amount rounded half up to cents.

    Args:
        value: Raw numeric value.

    Returns:
        Amount as Decimal.

    Raises:
        InvalidInputError: If the value is not a positive finite number.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError("invalid price")
    try:
        raw = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as err:
        raise InvalidInputError("invalid price") from err
    if not raw.is_finite() or raw <= 0:
        raise InvalidInputError("invalid price")
    if raw > MAX_PRICE:
        raise InvalidInputError(
            f"invalid price: exceeds the storable maximum of {MAX_PRICE}"
        )
    price = raw.quantize(CENTS, rounding=ROUND_HALF_UP)
    if price == 0:
        raise InvalidInputError("invalid price: amount is below one cent")
    return price


class BookingService:
    """Service for creating, cancelling and listing bookings.

    Creation holds the listing's lock and row lock for the whole
    check-then-insert sequence and commits before releasing them, so two
    overlapping requests for the same listing cannot both succeed.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Clock | None = None,
        calendar_cache: CalendarCache | None = None,
        listing_locks: ListingLocks | None = None,
        delete_policy: BookingDeletePolicy | None = None,
    ) -> None:
        """Initialize BookingService.

        Args:
            session: Async database session.
            clock: Source of today's date. Defaults to the system clock.
            calendar_cache: Optional calendar cache to invalidate on change.
            listing_locks: Per-listing lock registry. Defaults to global.
            delete_policy: Cancellation policy. Defaults to settings value.
        """
        self._session = session
        self._clock = clock or get_clock()
        self._calendar_cache = calendar_cache
        self._locks = listing_locks or get_listing_locks()
        self._delete_policy = delete_policy or get_settings().booking_delete_policy
        self._booking_repo = BookingRepository(session)
        self._listing_repo = ListingRepository(session)

    async def create_booking(
        self,
        listing_id: int,
        customer_id: int,
        start_date: Any,
        end_date: Any,
        expected_total_price: Any = None,
    ) -> Booking:
        """Validate and persist a booking.

        Args:
            listing_id: Listing to book.
            customer_id: Authenticated caller making the booking.
            start_date: First night (date or ISO string).
            end_date: Checkout day, exclusive (date or ISO string).
            expected_total_price: Quoted total. Derived as nights times the
                nightly price when omitted.

        Returns:
            Created booking with listing, customer and host loaded.

        Raises:
            NotFoundError: Listing does not exist.
            ForbiddenError: Customer owns the listing.
            InvalidInputError: Bad dates, non-positive duration or price.
            ConflictError: Dates overlap an existing booking.
        """
        async with self._locks.for_listing(listing_id):
            try:
                booking = await self._create_locked(
                    listing_id, customer_id, start_date, end_date, expected_total_price
                )
                await self._session.commit()
            except StayBookError:
                await self._session.rollback()
                raise
            except IntegrityError as err:
                await self._session.rollback()
                logger.warning(
                    "Booking on listing %s rejected by database constraint: %s",
                    listing_id,
                    err.orig,
                )
                raise InvalidInputError("booking violates a data constraint") from err

        logger.info(
            "Created booking %s on listing %s for customer %s (%s to %s)",
            booking.id,
            listing_id,
            customer_id,
            booking.start_date,
            booking.end_date,
        )
        if self._calendar_cache is not None:
            self._calendar_cache.invalidate_listing(listing_id)

        detailed = await self._booking_repo.get_with_details(booking.id)
        return detailed or booking

    async def _create_locked(
        self,
        listing_id: int,
        customer_id: int,
        start_date: Any,
        end_date: Any,
        expected_total_price: Any,
    ) -> Booking:
        """Run the ordered precondition checks and insert the booking."""
        listing = await self._listing_repo.get_by_id_for_update(listing_id)
        if listing is None:
            raise NotFoundError("listing not found")

        if listing.creator_id == customer_id:
            logger.info(
                "User %s attempted to book own listing %s", customer_id, listing_id
            )
            raise ForbiddenError("cannot book own property")

        start = parse_date(start_date)
        end = parse_date(end_date)
        validate_interval(start, end)

        existing = await self._booking_repo.get_active_intervals(listing_id, start)
        if conflicts_with_any((start, end), existing):
            logger.info(
                "Dates %s to %s unavailable on listing %s", start, end, listing_id
            )
            raise ConflictError("dates unavailable")

        total_price = self._resolve_price(listing, start, end, expected_total_price)

        return await self._booking_repo.create(
            Booking(
                listing_id=listing.id,
                customer_id=customer_id,
                host_id=listing.creator_id,
                start_date=start,
                end_date=end,
                total_price=total_price,
                status=BookingStatus.CONFIRMED.value,
            )
        )

    @staticmethod
    def _resolve_price(
        listing: Listing, start: date, end: date, expected_total_price: Any
    ) -> Decimal:
        """Validate the quoted total or derive it from the nightly price."""
        if expected_total_price is None:
            return parse_price(Decimal(listing.price) * nights(start, end))
        return parse_price(expected_total_price)

    async def delete_booking(self, booking_id: int, acting_user_id: int) -> None:
        """Cancel a booking by deleting it.

        Args:
            booking_id: Booking to delete.
            acting_user_id: Authenticated caller.

        Raises:
            NotFoundError: Booking does not exist (including already deleted).
            ForbiddenError: Caller is not the customer under the
                customer_only policy.
        """
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("booking not found")

        if (
            self._delete_policy == "customer_only"
            and booking.customer_id != acting_user_id
        ):
            logger.warning(
                "User %s attempted to delete booking %s of customer %s",
                acting_user_id,
                booking_id,
                booking.customer_id,
            )
            raise ForbiddenError("not authorized to delete this booking")

        listing_id = booking.listing_id
        deleted = await self._booking_repo.delete_by_id(booking_id)
        await self._session.commit()
        if not deleted:
            raise NotFoundError("booking not found")

        logger.info("Deleted booking %s by user %s", booking_id, acting_user_id)
        if self._calendar_cache is not None:
            self._calendar_cache.invalidate_listing(listing_id)

    async def list_bookings(
        self,
        *,
        customer_id: int | None = None,
        host_id: int | None = None,
        listing_id: int | None = None,
    ) -> Sequence[Booking]:
        """List bookings by exactly one of customer, host or listing.

        Bookings whose listing, customer or host no longer exists are left
        out. Results are ordered by start date ascending.

        Raises:
            InvalidInputError: If not exactly one filter is given.
        """
        filters = [f for f in (customer_id, host_id, listing_id) if f is not None]
        if len(filters) != 1:
            raise InvalidInputError("exactly one booking filter is required")

        if customer_id is not None:
            return await self._booking_repo.get_for_customer(customer_id)
        if host_id is not None:
            return await self._booking_repo.get_for_host(host_id)
        return await self._booking_repo.get_for_listing(cast("int", listing_id))

    async def list_occupied_intervals(
        self, listing_id: int, from_date: date | None = None
    ) -> list[OccupiedInterval]:
        """List occupied date ranges of a listing, without booker identity.

        Args:
            listing_id: Listing ID.
            from_date: Only bookings ending on or after this date are
                included. Defaults to today per the injected clock.

        Returns:
            Occupied intervals ordered by start date.

        Raises:
            NotFoundError: Listing does not exist.
        """
        if not await self._listing_repo.exists(listing_id):
            raise NotFoundError("listing not found")
        since = from_date or self._clock.today()
        return await self._booking_repo.get_occupied_intervals(listing_id, since)
