# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for Listing database operations."""

from collections.abc import Sequence
from typing import cast

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.listing import Listing


class ListingRepository:
    """Repository for Listing CRUD operations.

    Provides async database operations for Listing entities, including
    the row lock used to serialize booking writes per listing.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_by_id(self, listing_id: int) -> Listing | None:
        """Get listing by ID.

        Args:
            listing_id: Listing primary key.

        Returns:
            Listing if found, None otherwise.
        """
        result = await self._session.execute(
            select(Listing).where(Listing.id == listing_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id_for_update(self, listing_id: int) -> Listing | None:
        """Get listing by ID and lock its row until the transaction ends.

        SQLite ignores FOR UPDATE; its single writer lock serializes commits.

        Args:
            listing_id: Listing primary key.

        Returns:
            Listing if found, None otherwise.
        """
        result = await self._session.execute(
            select(Listing)
            .where(Listing.id == listing_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, listing_id: int) -> bool:
        """Check whether a listing exists.

        Args:
            listing_id: Listing primary key.

        Returns:
            True if the listing exists.
        """
        result = await self._session.execute(
            select(Listing.id).where(Listing.id == listing_id)
        )
        return result.scalar_one_or_none() is not None

    async def get_all(
        self,
        category: str | None = None,
        city: str | None = None,
    ) -> Sequence[Listing]:
        """Get listings, newest first.

        Args:
            category: Optional category filter.
            city: Optional city filter (case-insensitive).

        Returns:
            Sequence of matching listings.
        """
        stmt = select(Listing)
        if category:
            stmt = stmt.where(Listing.category == category)
        if city:
            stmt = stmt.where(Listing.city.ilike(city))
        result = await self._session.execute(
            stmt.order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        return result.scalars().all()

    async def get_for_creator(self, creator_id: int) -> Sequence[Listing]:
        """Get all listings created by a host.

        Args:
            creator_id: Host user ID.

        Returns:
            Sequence of the host's listings.
        """
        result = await self._session.execute(
            select(Listing)
            .where(Listing.creator_id == creator_id)
            .order_by(Listing.id)
        )
        return result.scalars().all()

    async def get_many(self, listing_ids: Sequence[int]) -> Sequence[Listing]:
        """Get listings by IDs, silently skipping IDs that do not resolve.

        Args:
            listing_ids: Listing primary keys.

        Returns:
            Sequence of existing listings.
        """
        if not listing_ids:
            return []
        result = await self._session.execute(
            select(Listing).where(Listing.id.in_(listing_ids))
        )
        return result.scalars().all()

    async def create(self, listing: Listing) -> Listing:
        """Create a new listing.

        Args:
            listing: Listing entity to create.

        Returns:
            Created listing with ID.
        """
        self._session.add(listing)
        await self._session.flush()
        await self._session.refresh(listing)
        return listing

    async def delete_by_id(self, listing_id: int) -> int:
        """Delete a listing row.

        Args:
            listing_id: Listing primary key.

        Returns:
            Number of rows deleted (0 or 1).
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(Listing).where(Listing.id == listing_id)
            ),
        )
        await self._session.flush()
        return result.rowcount or 0
