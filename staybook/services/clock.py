# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Injectable source of the current date."""

from datetime import UTC, date, datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell today's date."""

    def today(self) -> date:
        """Return the current calendar date."""
        ...


class SystemClock:
    """Clock backed by the system time in UTC."""

    def today(self) -> date:
        """Return today's UTC date."""
        return datetime.now(UTC).date()


class FixedClock:
    """Clock pinned to a given date."""

    def __init__(self, current: date) -> None:
        """Initialize clock.

        Args:
            current: Date returned by today().
        """
        self.current = current

    def today(self) -> date:
        """Return the pinned date."""
        return self.current


_system_clock = SystemClock()


def get_clock() -> Clock:
    """Get the application clock.

    FastAPI dependency; tests override it with a FixedClock.

    Returns:
        Clock instance.
    """
    return _system_clock
