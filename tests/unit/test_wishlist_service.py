# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for WishlistService."""

import pytest
from staybook.repositories.wishlist_repository import WishlistRepository
from staybook.services.errors import NotFoundError
from staybook.services.listing_service import ListingService
from staybook.services.wishlist_service import WishlistService


@pytest.fixture
async def host(make_user):
    """Listing owner."""
    return await make_user()


@pytest.fixture
async def saver(make_user):
    """User keeping a wishlist."""
    return await make_user()


class TestToggle:
    """Tests for WishlistService.toggle."""

    @pytest.mark.asyncio
    async def test_add_then_remove(self, async_session, make_listing, host, saver):
        """Test toggling twice returns to an empty wishlist."""
        listing = await make_listing(host)
        service = WishlistService(async_session)

        added, wishlist = await service.toggle(saver.id, listing.id)
        assert added is True
        assert [item.id for item in wishlist] == [listing.id]

        added, wishlist = await service.toggle(saver.id, listing.id)
        assert added is False
        assert list(wishlist) == []

    @pytest.mark.asyncio
    async def test_missing_listing_removed(
        self, async_session, make_listing, host, saver
    ):
        """Test a deleted listing is dropped rather than added."""
        listing = await make_listing(host)
        listing_id = listing.id
        service = WishlistService(async_session)
        await service.toggle(saver.id, listing_id)
        await ListingService(async_session).delete_listing(listing_id, host.id)

        added, wishlist = await service.toggle(saver.id, listing_id)

        assert added is None
        assert list(wishlist) == []
        repo = WishlistRepository(async_session)
        assert not await repo.contains(saver.id, listing_id)

    @pytest.mark.asyncio
    async def test_unknown_user(self, async_session, make_listing, host):
        """Test toggling for a user that does not exist."""
        listing = await make_listing(host)

        with pytest.raises(NotFoundError, match="user not found"):
            await WishlistService(async_session).toggle(999, listing.id)


class TestListForUser:
    """Tests for WishlistService.list_for_user."""

    @pytest.mark.asyncio
    async def test_prunes_deleted_listings(
        self, async_session, make_listing, host, saver
    ):
        """Test entries for deleted listings are pruned on read."""
        kept = await make_listing(host, title="Kept")
        gone = await make_listing(host, title="Gone")
        kept_id, gone_id = kept.id, gone.id
        service = WishlistService(async_session)
        await service.toggle(saver.id, kept_id)
        await service.toggle(saver.id, gone_id)
        await ListingService(async_session).delete_listing(gone_id, host.id)

        wishlist = await service.list_for_user(saver.id)

        assert [item.id for item in wishlist] == [kept_id]
        repo = WishlistRepository(async_session)
        assert list(await repo.get_listing_ids(saver.id)) == [kept_id]

    @pytest.mark.asyncio
    async def test_empty(self, async_session, saver):
        """Test a new user has an empty wishlist."""
        assert list(await WishlistService(async_session).list_for_user(saver.id)) == []
