# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.schemas import (
    BookingResponse,
    BookingsResponse,
    booking_to_response,
    bookings_to_response,
)
from staybook.database import get_db
from staybook.middleware.auth import require_user_id
from staybook.services.booking_service import BookingService
from staybook.services.calendar_service import get_calendar_cache
from staybook.services.clock import Clock, get_clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


class BookingCreateRequest(BaseModel):
    """Request model for creating a booking.

    Dates and price are accepted as sent, missing or not, and validated by
    the booking service so that errors are reported in a fixed order after
    the listing checks.
    """

    listing_id: int = Field(description="Listing to book")
    start_date: Any = Field(default=None, description="First night (YYYY-MM-DD)")
    end_date: Any = Field(
        default=None, description="Checkout day, exclusive (YYYY-MM-DD)"
    )
    total_price: Any = Field(
        default=None,
        description="Quoted total price; derived from the nightly price if omitted",
    )


class MessageResponse(BaseModel):
    """Response model for acknowledgements."""

    message: str = Field(description="Status message")


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    request: BookingCreateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Book a listing for the authenticated customer.

    Returns:
        Created booking with listing, customer and host details.
    """
    service = BookingService(db, clock=clock, calendar_cache=get_calendar_cache())
    booking = await service.create_booking(
        listing_id=request.listing_id,
        customer_id=user_id,
        start_date=request.start_date,
        end_date=request.end_date,
        expected_total_price=request.total_price,
    )
    return booking_to_response(booking)


@router.get("", response_model=BookingsResponse)
async def list_my_trips(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get bookings made by the authenticated user."""
    bookings = await BookingService(db).list_bookings(customer_id=user_id)
    return bookings_to_response(bookings)


@router.get("/reservations", response_model=BookingsResponse)
async def list_my_reservations(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get bookings on the authenticated host's listings, by start date."""
    bookings = await BookingService(db).list_bookings(host_id=user_id)
    return bookings_to_response(bookings)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Cancel a booking.

    Raises:
        NotFoundError: 404 if the booking does not exist.
        ForbiddenError: 403 if the caller may not cancel it.
    """
    service = BookingService(db, calendar_cache=get_calendar_cache())
    await service.delete_booking(booking_id, user_id)
    return {"message": "Booking deleted successfully"}
