# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Domain errors raised by the booking services."""

from fastapi import status


class StayBookError(Exception):
    """Base class for errors reported synchronously to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "error"

    def __init__(self, message: str) -> None:
        """Initialize error.

        Args:
            message: User-facing error message.
        """
        super().__init__(message)
        self.message = message


class NotFoundError(StayBookError):
    """Referenced listing, booking or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class ForbiddenError(StayBookError):
    """Caller is not allowed to act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    error_type = "forbidden"


class InvalidInputError(StayBookError):
    """Malformed dates, non-positive duration or invalid price."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "invalid_input"


class ConflictError(StayBookError):
    """Requested dates overlap an existing booking."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "conflict"


class PartialFailureError(StayBookError):
    """A multi-step deletion failed midway and was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "partial_failure"

    def __init__(
        self, message: str, listing_id: int, bookings_rolled_back: int
    ) -> None:
        """Initialize error.

        Args:
            message: User-facing error message.
            listing_id: Listing whose deletion failed.
            bookings_rolled_back: Bookings whose removal was undone by the
                rollback.
        """
        super().__init__(message)
        self.listing_id = listing_id
        self.bookings_rolled_back = bookings_rolled_back
