# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Half-open date interval arithmetic for booking availability.

An interval ``[start, end)`` covers the nights from ``start`` up to but not
including ``end``. A stay ending on day D and another starting on day D do
not conflict, which allows same-day checkout and checkin.
"""

from collections.abc import Iterable
from datetime import date
from typing import NamedTuple

from staybook.services.errors import InvalidInputError


class OccupiedInterval(NamedTuple):
    """Committed stay on a listing, without booker identity."""

    start: date
    end: date


def validate_interval(start: date, end: date) -> None:
    """Reject zero-length and inverted intervals.

    Args:
        start: First night.
        end: Checkout day (exclusive).

    Raises:
        InvalidInputError: If end is not after start.
    """
    if end <= start:
        raise InvalidInputError("non-positive duration")


def nights(start: date, end: date) -> int:
    """Count the nights in ``[start, end)``."""
    return (end - start).days


def intervals_overlap(first: tuple[date, date], second: tuple[date, date]) -> bool:
    """Check whether two half-open intervals share at least one night.

    Covers the start-inside, end-inside and enclosing cases with one
    inequality pair.

    Args:
        first: (start, end) of the first interval.
        second: (start, end) of the second interval.

    Returns:
        True if the intervals conflict.
    """
    first_start, first_end = first
    second_start, second_end = second
    return first_start < second_end and second_start < first_end


def conflicts_with_any(
    candidate: tuple[date, date],
    existing: Iterable[tuple[date, date]],
) -> bool:
    """Check a candidate interval against committed intervals.

    Args:
        candidate: (start, end) being requested.
        existing: Committed (start, end) intervals for the same listing.

    Returns:
        True if the candidate overlaps any committed interval.
    """
    return any(intervals_overlap(candidate, interval) for interval in existing)
