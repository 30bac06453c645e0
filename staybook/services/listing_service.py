# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Listing management and cascade deletion of dependent bookings."""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.listing import Listing
from staybook.repositories.booking_repository import BookingRepository
from staybook.repositories.listing_repository import ListingRepository
from staybook.repositories.user_repository import UserRepository
from staybook.services.booking_service import parse_price
from staybook.services.calendar_service import CalendarCache
from staybook.services.errors import (
    ForbiddenError,
    NotFoundError,
    PartialFailureError,
)
from staybook.services.locks import ListingLocks, get_listing_locks

logger = logging.getLogger(__name__)


class ListingService:
    """Service for listing CRUD and cascade deletion.

    Deleting a listing removes its bookings and the listing in one
    transaction, under the same per-listing lock that booking creation
    takes, so no booking can be created against a listing mid-deletion.
    """

    def __init__(
        self,
        session: AsyncSession,
        calendar_cache: CalendarCache | None = None,
        listing_locks: ListingLocks | None = None,
    ) -> None:
        """Initialize ListingService.

        Args:
            session: Async database session.
            calendar_cache: Optional calendar cache to invalidate on delete.
            listing_locks: Per-listing lock registry. Defaults to global.
        """
        self._session = session
        self._calendar_cache = calendar_cache
        self._locks = listing_locks or get_listing_locks()
        self._listing_repo = ListingRepository(session)
        self._booking_repo = BookingRepository(session)
        self._user_repo = UserRepository(session)

    async def create_listing(self, creator_id: int, **fields: Any) -> Listing:
        """Create a listing owned by the caller.

        Args:
            creator_id: Host user ID.
            **fields: Listing attributes (title, city, country, price, ...).

        Returns:
            Created listing.

        Raises:
            NotFoundError: Creator does not exist.
            InvalidInputError: Price is not a positive number.
        """
        if await self._user_repo.get_by_id(creator_id) is None:
            raise NotFoundError("user not found")

        fields["price"] = parse_price(fields.get("price"))
        listing = await self._listing_repo.create(
            Listing(creator_id=creator_id, **fields)
        )
        await self._session.commit()
        logger.info("Host %s created listing %s", creator_id, listing.id)
        return listing

    async def get_listing(self, listing_id: int) -> Listing:
        """Get a listing.

        Raises:
            NotFoundError: Listing does not exist.
        """
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None:
            raise NotFoundError("listing not found")
        return listing

    async def list_listings(
        self, category: str | None = None, city: str | None = None
    ) -> Sequence[Listing]:
        """Browse listings with optional category and city filters."""
        return await self._listing_repo.get_all(category=category, city=city)

    async def list_listings_for_host(self, host_id: int) -> Sequence[Listing]:
        """Get the listings a host created."""
        return await self._listing_repo.get_for_creator(host_id)

    async def delete_listing(self, listing_id: int, acting_user_id: int) -> int:
        """Delete a listing and every booking that references it.

        Args:
            listing_id: Listing to delete.
            acting_user_id: Authenticated caller; must be the creator.

        Returns:
            Number of bookings deleted with the listing.

        Raises:
            NotFoundError: Listing does not exist (including already deleted).
            ForbiddenError: Caller is not the listing's creator.
            PartialFailureError: Listing removal failed after its bookings
                were deleted; both steps were rolled back.
        """
        async with self._locks.for_listing(listing_id):
            listing = await self._listing_repo.get_by_id_for_update(listing_id)
            if listing is None:
                await self._session.rollback()
                raise NotFoundError("listing not found")

            creator_id = listing.creator_id
            if creator_id != acting_user_id:
                logger.warning(
                    "User %s attempted to delete listing %s of host %s",
                    acting_user_id,
                    listing_id,
                    creator_id,
                )
                await self._session.rollback()
                raise ForbiddenError("not authorized to delete this listing")

            bookings_deleted = await self._booking_repo.delete_for_listing(listing_id)
            try:
                await self._listing_repo.delete_by_id(listing_id)
                await self._session.commit()
            except SQLAlchemyError as err:
                await self._session.rollback()
                logger.error(
                    "Deleting listing %s failed, %d booking deletes rolled back: %s",
                    listing_id,
                    bookings_deleted,
                    err,
                )
                raise PartialFailureError(
                    "listing deletion rolled back; its bookings were kept",
                    listing_id=listing_id,
                    bookings_rolled_back=bookings_deleted,
                ) from err

        logger.info(
            "Deleted listing %s and %d bookings by host %s",
            listing_id,
            bookings_deleted,
            acting_user_id,
        )
        if self._calendar_cache is not None:
            self._calendar_cache.invalidate_listing(listing_id)
        return bookings_deleted

    async def reconcile_orphans(self) -> int:
        """Delete bookings whose listing no longer exists.

        Recovers from a deletion interrupted between removing the bookings
        and removing the listing on stores without transactions.

        Returns:
            Number of orphaned bookings deleted.
        """
        removed = await self._booking_repo.delete_orphans()
        await self._session.commit()
        if removed:
            logger.warning("Reconciliation removed %d orphaned bookings", removed)
        else:
            logger.debug("Reconciliation found no orphaned bookings")
        return removed
