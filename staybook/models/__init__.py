# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""SQLAlchemy ORM models for StayBook."""

from staybook.models.booking import Booking, BookingStatus
from staybook.models.listing import Listing
from staybook.models.user import User
from staybook.models.wishlist import WishlistItem

__all__ = ["Booking", "BookingStatus", "Listing", "User", "WishlistItem"]
