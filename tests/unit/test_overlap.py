# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for half-open interval arithmetic."""

from datetime import date

import pytest
from staybook.services.errors import InvalidInputError
from staybook.services.overlap import (
    OccupiedInterval,
    conflicts_with_any,
    intervals_overlap,
    nights,
    validate_interval,
)

EXISTING = (date(2026, 7, 10), date(2026, 7, 15))


class TestIntervalsOverlap:
    """Tests for intervals_overlap."""

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            # start falls inside existing stay
            ((date(2026, 7, 12), date(2026, 7, 18)), True),
            # end falls inside existing stay
            ((date(2026, 7, 8), date(2026, 7, 11)), True),
            # candidate encloses existing stay
            ((date(2026, 7, 1), date(2026, 7, 31)), True),
            # existing stay encloses candidate
            ((date(2026, 7, 11), date(2026, 7, 12)), True),
            # identical dates
            (EXISTING, True),
            # checkin on existing checkout day
            ((date(2026, 7, 15), date(2026, 7, 20)), False),
            # checkout on existing checkin day
            ((date(2026, 7, 5), date(2026, 7, 10)), False),
            # entirely before
            ((date(2026, 7, 1), date(2026, 7, 3)), False),
            # entirely after
            ((date(2026, 8, 1), date(2026, 8, 3)), False),
        ],
    )
    def test_overlap_cases(self, candidate, expected):
        """Test conflict detection against a committed stay."""
        assert intervals_overlap(candidate, EXISTING) is expected

    def test_overlap_is_symmetric(self):
        """Test order of arguments does not matter."""
        other = (date(2026, 7, 14), date(2026, 7, 16))
        assert intervals_overlap(other, EXISTING) == intervals_overlap(
            EXISTING, other
        )


class TestConflictsWithAny:
    """Tests for conflicts_with_any."""

    def test_no_existing_intervals(self):
        """Test empty listing never conflicts."""
        assert conflicts_with_any(EXISTING, []) is False

    def test_fits_between_stays(self):
        """Test a stay filling the gap between two bookings exactly."""
        existing = [
            OccupiedInterval(date(2026, 7, 1), date(2026, 7, 5)),
            OccupiedInterval(date(2026, 7, 8), date(2026, 7, 12)),
        ]
        candidate = (date(2026, 7, 5), date(2026, 7, 8))
        assert conflicts_with_any(candidate, existing) is False

    def test_conflicts_with_one_of_many(self):
        """Test conflict with the second of several stays."""
        existing = [
            OccupiedInterval(date(2026, 7, 1), date(2026, 7, 5)),
            OccupiedInterval(date(2026, 7, 8), date(2026, 7, 12)),
        ]
        candidate = (date(2026, 7, 6), date(2026, 7, 9))
        assert conflicts_with_any(candidate, existing) is True


class TestValidateInterval:
    """Tests for validate_interval and nights."""

    def test_valid_interval(self):
        """Test one-night stay is accepted."""
        validate_interval(date(2026, 7, 1), date(2026, 7, 2))

    def test_same_day_rejected(self):
        """Test zero-night stay is rejected."""
        with pytest.raises(InvalidInputError, match="non-positive duration"):
            validate_interval(date(2026, 7, 1), date(2026, 7, 1))

    def test_inverted_rejected(self):
        """Test end before start is rejected."""
        with pytest.raises(InvalidInputError, match="non-positive duration"):
            validate_interval(date(2026, 7, 5), date(2026, 7, 1))

    def test_nights(self):
        """Test night count excludes checkout day."""
        assert nights(date(2026, 7, 1), date(2026, 7, 4)) == 3
        assert nights(date(2026, 2, 27), date(2026, 3, 1)) == 2
