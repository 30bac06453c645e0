# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Listings API endpoints."""

import logging
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.schemas import (
    BookingsResponse,
    ListingResponse,
    ListingsResponse,
    bookings_to_response,
    listing_to_response,
    listings_to_response,
)
from staybook.database import get_db
from staybook.middleware.auth import require_user_id
from staybook.services.booking_service import BookingService
from staybook.services.calendar_service import get_calendar_cache
from staybook.services.clock import Clock, get_clock
from staybook.services.errors import ForbiddenError
from staybook.services.listing_service import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/listings", tags=["Listings"])


class ListingCreateRequest(BaseModel):
    """Request model for creating a listing."""

    title: str = Field(min_length=1, max_length=255, description="Listing title")
    description: str | None = Field(default=None, description="Description")
    category: str | None = Field(default=None, max_length=100, description="Category")
    type: str | None = Field(default=None, max_length=100, description="Place type")
    street_address: str | None = Field(default=None, max_length=255)
    apt_suite: str | None = Field(default=None, max_length=100)
    city: str = Field(min_length=1, max_length=100, description="City")
    province: str | None = Field(default=None, max_length=100)
    country: str = Field(min_length=1, max_length=100, description="Country")
    guest_count: int = Field(default=1, ge=1, description="Maximum guests")
    bedroom_count: int = Field(default=1, ge=0, description="Bedrooms")
    bed_count: int = Field(default=1, ge=1, description="Beds")
    bathroom_count: int = Field(default=1, ge=0, description="Bathrooms")
    amenities: list[str] = Field(default_factory=list, description="Amenities")
    photo_paths: list[str] = Field(default_factory=list, description="Photo paths")
    highlight: str | None = Field(default=None, max_length=255)
    highlight_description: str | None = Field(default=None)
    price: float = Field(gt=0, description="Nightly price")


class DeleteListingResponse(BaseModel):
    """Response model for cascade deletion."""

    message: str = Field(description="Status message")
    bookings_deleted: int = Field(description="Bookings removed with the listing")


class OccupiedRange(BaseModel):
    """One occupied date range."""

    start_date: str = Field(description="First occupied night (ISO date)")
    end_date: str = Field(description="Checkout day, exclusive (ISO date)")


class OccupiedDatesResponse(BaseModel):
    """Response model for a listing's occupied dates."""

    listing_id: int = Field(description="Listing ID")
    from_date: str = Field(description="Bookings ending before this are omitted")
    occupied: list[OccupiedRange] = Field(description="Occupied date ranges")


@router.get("", response_model=ListingsResponse)
async def list_listings(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: Annotated[str | None, Query()] = None,
    city: Annotated[str | None, Query()] = None,
) -> dict[str, Any]:
    """Browse listings, optionally filtered by category and city."""
    listings = await ListingService(db).list_listings(category=category, city=city)
    return listings_to_response(listings)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    request: ListingCreateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Create a listing hosted by the authenticated user."""
    service = ListingService(db)
    listing = await service.create_listing(user_id, **request.model_dump())
    return listing_to_response(listing)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any]:
    """Get a specific listing.

    Raises:
        NotFoundError: 404 if listing not found.
    """
    listing = await ListingService(db).get_listing(listing_id)
    return listing_to_response(listing)


@router.delete("/{listing_id}", response_model=DeleteListingResponse)
async def delete_listing(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Delete a listing together with all of its bookings.

    Raises:
        NotFoundError: 404 if listing not found.
        ForbiddenError: 403 if the caller is not the host.
        PartialFailureError: 500 if the deletion failed midway.
    """
    service = ListingService(db, calendar_cache=get_calendar_cache())
    bookings_deleted = await service.delete_listing(listing_id, user_id)
    return {
        "message": "Listing and associated bookings deleted successfully",
        "bookings_deleted": bookings_deleted,
    }


@router.get("/{listing_id}/occupied-dates", response_model=OccupiedDatesResponse)
async def get_occupied_dates(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    from_date: Annotated[date | None, Query(alias="from")] = None,
) -> dict[str, Any]:
    """Get date ranges already booked on a listing.

    Only bookings ending on or after ``from`` (default today) are returned,
    and no booker identity is exposed.
    """
    since = from_date or clock.today()
    intervals = await BookingService(db, clock=clock).list_occupied_intervals(
        listing_id, since
    )
    return {
        "listing_id": listing_id,
        "from_date": since.isoformat(),
        "occupied": [
            {"start_date": start.isoformat(), "end_date": end.isoformat()}
            for start, end in intervals
        ],
    }


@router.get("/{listing_id}/bookings", response_model=BookingsResponse)
async def list_listing_bookings(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get all bookings on a listing; only its host may see them.

    Raises:
        NotFoundError: 404 if listing not found.
        ForbiddenError: 403 if the caller is not the host.
    """
    listing = await ListingService(db).get_listing(listing_id)
    if listing.creator_id != user_id:
        raise ForbiddenError("only the host can view bookings for this listing")
    bookings = await BookingService(db).list_bookings(listing_id=listing_id)
    return bookings_to_response(bookings)
