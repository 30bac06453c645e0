# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Wishlist toggling and listing with pruning of deleted listings."""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from staybook.models.listing import Listing
from staybook.repositories.listing_repository import ListingRepository
from staybook.repositories.user_repository import UserRepository
from staybook.repositories.wishlist_repository import WishlistRepository
from staybook.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class WishlistService:
    """Service for a user's saved listings."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize WishlistService.

        Args:
            session: Async database session.
        """
        self._session = session
        self._wishlist_repo = WishlistRepository(session)
        self._listing_repo = ListingRepository(session)
        self._user_repo = UserRepository(session)

    async def toggle(
        self, user_id: int, listing_id: int
    ) -> tuple[bool | None, Sequence[Listing]]:
        """Add a listing to the wishlist, or remove it if already saved.

        A listing that no longer exists is removed from the wishlist.

        Args:
            user_id: Wishlist owner.
            listing_id: Listing to toggle.

        Returns:
            Tuple of (added, wishlist). added is True when saved, False when
            removed and None when the listing no longer exists.

        Raises:
            NotFoundError: User does not exist.
        """
        await self._require_user(user_id)

        added: bool | None
        if not await self._listing_repo.exists(listing_id):
            await self._wishlist_repo.remove(user_id, [listing_id])
            added = None
        elif await self._wishlist_repo.contains(user_id, listing_id):
            await self._wishlist_repo.remove(user_id, [listing_id])
            added = False
        else:
            await self._wishlist_repo.add(user_id, listing_id)
            added = True
        await self._session.commit()

        logger.debug(
            "Wishlist toggle user=%s listing=%s added=%s", user_id, listing_id, added
        )
        return added, await self.list_for_user(user_id)

    async def list_for_user(self, user_id: int) -> Sequence[Listing]:
        """Get a user's saved listings, pruning entries for deleted listings.

        Raises:
            NotFoundError: User does not exist.
        """
        await self._require_user(user_id)

        listing_ids = await self._wishlist_repo.get_listing_ids(user_id)
        listings = {
            listing.id: listing
            for listing in await self._listing_repo.get_many(listing_ids)
        }

        dangling = [lid for lid in listing_ids if lid not in listings]
        if dangling:
            await self._wishlist_repo.remove(user_id, dangling)
            await self._session.commit()
            logger.info(
                "Pruned %d deleted listings from wishlist of user %s",
                len(dangling),
                user_id,
            )

        return [listings[lid] for lid in listing_ids if lid in listings]

    async def _require_user(self, user_id: int) -> None:
        if await self._user_repo.get_by_id(user_id) is None:
            raise NotFoundError("user not found")
