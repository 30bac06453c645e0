# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for wishlist entries."""

from collections.abc import Sequence
from typing import cast

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.wishlist import WishlistItem


class WishlistRepository:
    """Repository for WishlistItem operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_listing_ids(self, user_id: int) -> Sequence[int]:
        """Get IDs of listings saved by a user, oldest first.

        Args:
            user_id: User ID.

        Returns:
            Sequence of listing IDs.
        """
        result = await self._session.execute(
            select(WishlistItem.listing_id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at, WishlistItem.id)
        )
        return result.scalars().all()

    async def contains(self, user_id: int, listing_id: int) -> bool:
        """Check whether a listing is on a user's wishlist.

        Args:
            user_id: User ID.
            listing_id: Listing ID.

        Returns:
            True if saved.
        """
        result = await self._session.execute(
            select(WishlistItem.id).where(
                WishlistItem.user_id == user_id,
                WishlistItem.listing_id == listing_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def add(self, user_id: int, listing_id: int) -> WishlistItem:
        """Save a listing to a user's wishlist.

        Args:
            user_id: User ID.
            listing_id: Listing ID.

        Returns:
            Created wishlist item.
        """
        item = WishlistItem(user_id=user_id, listing_id=listing_id)
        self._session.add(item)
        await self._session.flush()
        return item

    async def remove(self, user_id: int, listing_ids: Sequence[int]) -> int:
        """Remove listings from a user's wishlist.

        Args:
            user_id: User ID.
            listing_ids: Listing IDs to remove.

        Returns:
            Number of entries removed.
        """
        if not listing_ids:
            return 0
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(WishlistItem).where(
                    WishlistItem.user_id == user_id,
                    WishlistItem.listing_id.in_(listing_ids),
                )
            ),
        )
        await self._session.flush()
        return result.rowcount or 0
