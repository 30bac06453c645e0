# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Per-listing mutual exclusion for booking writes within one process."""

import asyncio
import weakref


class ListingLocks:
    """Registry of asyncio locks keyed by listing ID.

    Booking creation's check-then-insert and the cascade delete of a listing
    must not interleave for the same listing. Locks are held weakly and
    disappear once no coroutine holds or waits on them.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_listing(self, listing_id: int) -> asyncio.Lock:
        """Get the lock guarding a listing's bookings.

        Args:
            listing_id: Listing ID.

        Returns:
            Lock shared by every caller for that listing.
        """
        lock = self._locks.get(listing_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[listing_id] = lock
        return lock

    def __len__(self) -> int:
        """Return the number of live locks."""
        return len(self._locks)


# Global registry shared by every request in the process
_listing_locks = ListingLocks()


def get_listing_locks() -> ListingLocks:
    """Get the global listing lock registry.

    Returns:
        ListingLocks singleton.
    """
    return _listing_locks
