# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Calendar service for occupancy iCal feed generation."""

import hashlib
import logging
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import cast

from icalendar import Calendar, Event

from staybook.models.listing import Listing
from staybook.services.overlap import OccupiedInterval

logger = logging.getLogger(__name__)

# Cache TTL in seconds (5 minutes)
CACHE_TTL_SECONDS = 300

EVENT_SUMMARY = "Reserved"


def calendar_cache_key(listing_id: int) -> str:
    """Build the cache key for a listing's feed."""
    return f"listing-{listing_id}"


class CalendarCache:
    """Simple in-memory cache for generated iCal strings."""

    def __init__(self, ttl_seconds: int = CACHE_TTL_SECONDS) -> None:
        """Initialize cache with TTL.

        Args:
            ttl_seconds: Time-to-live for cache entries.
        """
        self._cache: dict[str, tuple[str, datetime]] = {}
        self._ttl = timedelta(seconds=ttl_seconds)

    def get(self, key: str) -> str | None:
        """Get cached value if not expired.

        Args:
            key: Cache key.

        Returns:
            Cached iCal string or None if expired/missing.
        """
        if key not in self._cache:
            return None

        value, timestamp = self._cache[key]
        if datetime.now(UTC) - timestamp > self._ttl:
            del self._cache[key]
            return None

        return value

    def set(self, key: str, value: str) -> None:
        """Store value in cache.

        Args:
            key: Cache key.
            value: iCal string to cache.
        """
        self._cache[key] = (value, datetime.now(UTC))

    def invalidate(self, key: str) -> None:
        """Remove entry from cache.

        Args:
            key: Cache key to invalidate.
        """
        self._cache.pop(key, None)

    def invalidate_listing(self, listing_id: int) -> None:
        """Drop the cached feed of a listing after its bookings changed."""
        self.invalidate(calendar_cache_key(listing_id))

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()


# Global cache instance
_calendar_cache = CalendarCache()


def get_calendar_cache() -> CalendarCache:
    """Get the global calendar cache instance.

    Returns:
        CalendarCache singleton.
    """
    return _calendar_cache


class CalendarService:
    """Service for generating occupancy iCal feeds.

    Each occupied interval becomes an all-day event. iCal treats DTEND of
    an all-day event as exclusive, which matches the booking convention,
    so checkout days show as free.
    """

    def __init__(self, cache: CalendarCache | None = None) -> None:
        """Initialize calendar service.

        Args:
            cache: Optional cache instance. Uses global cache if not provided.
        """
        self._cache = cache or get_calendar_cache()

    def generate_occupancy_ical(
        self,
        listing: Listing,
        intervals: Sequence[OccupiedInterval],
    ) -> str:
        """Generate iCal feed for a listing's occupied dates.

        Args:
            listing: Listing to generate calendar for.
            intervals: Occupied intervals ordered by start date.

        Returns:
            iCal string (text/calendar format).
        """
        cache_key = calendar_cache_key(listing.id)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for %s", cache_key)
            return cached

        cal = self._create_calendar(listing)
        for interval in intervals:
            cal.add_component(self._create_event(listing.id, interval))

        ical_bytes = cal.to_ical()
        ical_string = cast("bytes", ical_bytes).decode("utf-8")

        self._cache.set(cache_key, ical_string)
        logger.debug("Generated and cached iCal for %s", cache_key)

        return ical_string

    def _create_calendar(self, listing: Listing) -> Calendar:
        """Create iCal calendar object with metadata.

        Args:
            listing: Listing for calendar metadata.

        Returns:
            Configured Calendar object.
        """
        cal = Calendar()
        cal.add("prodid", "-//StayBook//staybook//EN")
        cal.add("version", "2.0")
        cal.add("calscale", "GREGORIAN")
        cal.add("method", "PUBLISH")
        cal.add("x-wr-calname", listing.title)
        return cal

    def _create_event(self, listing_id: int, interval: OccupiedInterval) -> Event:
        """Create an all-day event covering one occupied interval.

        Args:
            listing_id: Listing the interval belongs to.
            interval: Occupied interval.

        Returns:
            Configured Event object.
        """
        event = Event()
        event.add("uid", self._generate_uid(listing_id, interval))
        event.add("summary", EVENT_SUMMARY)
        event.add("dtstart", interval.start)
        event.add("dtend", interval.end)
        event.add("dtstamp", datetime.now(UTC))
        event.add("status", "CONFIRMED")
        event.add("transp", "OPAQUE")
        return event

    @staticmethod
    def _generate_uid(listing_id: int, interval: OccupiedInterval) -> str:
        """Generate a stable event ID that does not reveal the booking.

        Args:
            listing_id: Listing ID.
            interval: Occupied interval.

        Returns:
            Unique identifier string.
        """
        start, end = interval.start.isoformat(), interval.end.isoformat()
        unique_str = f"{listing_id}-{start}-{end}"
        hash_hex = hashlib.sha256(unique_str.encode()).hexdigest()[:16]
        return f"{hash_hex}@staybook"
