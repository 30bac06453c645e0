# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository layer for database operations."""

from staybook.repositories.booking_repository import BookingRepository
from staybook.repositories.listing_repository import ListingRepository
from staybook.repositories.user_repository import UserRepository
from staybook.repositories.wishlist_repository import WishlistRepository

__all__ = [
    "BookingRepository",
    "ListingRepository",
    "UserRepository",
    "WishlistRepository",
]
