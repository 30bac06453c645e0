# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Response models and converters shared by the API routers."""

from datetime import UTC
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy import inspect

from staybook.models.booking import Booking
from staybook.models.listing import Listing
from staybook.models.user import User


class UserSummary(BaseModel):
    """Public profile of a user."""

    id: int = Field(description="User ID")
    first_name: str = Field(description="First name")
    last_name: str = Field(description="Last name")
    email: str = Field(description="Email address")
    profile_image_path: str | None = Field(default=None, description="Avatar path")


class ListingResponse(BaseModel):
    """Response model for a listing."""

    id: int = Field(description="Listing ID")
    creator_id: int = Field(description="Host user ID")
    creator: UserSummary | None = Field(default=None, description="Host profile")
    title: str = Field(description="Listing title")
    description: str | None = Field(default=None, description="Description")
    category: str | None = Field(default=None, description="Category")
    type: str | None = Field(default=None, description="Place type")
    street_address: str | None = Field(default=None, description="Street address")
    apt_suite: str | None = Field(default=None, description="Apartment or suite")
    city: str = Field(description="City")
    province: str | None = Field(default=None, description="Province or state")
    country: str = Field(description="Country")
    guest_count: int = Field(description="Maximum guests")
    bedroom_count: int = Field(description="Bedrooms")
    bed_count: int = Field(description="Beds")
    bathroom_count: int = Field(description="Bathrooms")
    amenities: list[str] = Field(default_factory=list, description="Amenities")
    photo_paths: list[str] = Field(default_factory=list, description="Photo paths")
    highlight: str | None = Field(default=None, description="Highlight title")
    highlight_description: str | None = Field(
        default=None, description="Highlight description"
    )
    price: float = Field(description="Nightly price")
    created_at: str | None = Field(default=None, description="Creation timestamp")


class BookingResponse(BaseModel):
    """Response model for a booking."""

    id: int = Field(description="Booking ID")
    listing_id: int = Field(description="Booked listing ID")
    customer_id: int = Field(description="Customer user ID")
    host_id: int = Field(description="Host user ID at booking time")
    start_date: str = Field(description="First night (ISO date)")
    end_date: str = Field(description="Checkout day, exclusive (ISO date)")
    nights: int = Field(description="Number of nights")
    total_price: float = Field(description="Total price fixed at booking time")
    status: str = Field(description="Booking status")
    created_at: str | None = Field(default=None, description="Creation timestamp")
    listing: ListingResponse | None = Field(default=None, description="Listing")
    customer: UserSummary | None = Field(default=None, description="Customer")
    host: UserSummary | None = Field(default=None, description="Host")


class BookingsResponse(BaseModel):
    """Response model for bookings collection."""

    bookings: list[BookingResponse] = Field(description="List of bookings")
    total: int = Field(description="Total count")


class ListingsResponse(BaseModel):
    """Response model for listing collection."""

    listings: list[ListingResponse] = Field(description="List of listings")
    total: int = Field(description="Total count")


def _format_datetime(dt: Any) -> str | None:
    """Format datetime to ISO string with UTC timezone."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return str(dt.isoformat())


def _loaded(instance: Any, attribute: str) -> Any:
    """Return a relationship value only if already loaded.

    Touching an unloaded relationship would emit lazy IO, which async
    sessions forbid.
    """
    if attribute in inspect(instance).unloaded:
        return None
    return getattr(instance, attribute)


def user_to_summary(user: User | None) -> dict[str, Any] | None:
    """Convert user model to public profile dict."""
    if user is None:
        return None
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "profile_image_path": user.profile_image_path,
    }


def listing_to_response(listing: Listing) -> dict[str, Any]:
    """Convert listing model to response dict."""
    return {
        "id": listing.id,
        "creator_id": listing.creator_id,
        "creator": user_to_summary(_loaded(listing, "creator")),
        "title": listing.title,
        "description": listing.description,
        "category": listing.category,
        "type": listing.type,
        "street_address": listing.street_address,
        "apt_suite": listing.apt_suite,
        "city": listing.city,
        "province": listing.province,
        "country": listing.country,
        "guest_count": listing.guest_count,
        "bedroom_count": listing.bedroom_count,
        "bed_count": listing.bed_count,
        "bathroom_count": listing.bathroom_count,
        "amenities": list(listing.amenities or []),
        "photo_paths": list(listing.photo_paths or []),
        "highlight": listing.highlight,
        "highlight_description": listing.highlight_description,
        "price": float(listing.price),
        "created_at": _format_datetime(listing.created_at),
    }


def booking_to_response(booking: Booking) -> dict[str, Any]:
    """Convert booking model to response dict with any loaded details."""
    listing = _loaded(booking, "listing")
    return {
        "id": booking.id,
        "listing_id": booking.listing_id,
        "customer_id": booking.customer_id,
        "host_id": booking.host_id,
        "start_date": booking.start_date.isoformat(),
        "end_date": booking.end_date.isoformat(),
        "nights": booking.nights,
        "total_price": float(booking.total_price),
        "status": booking.status,
        "created_at": _format_datetime(booking.created_at),
        "listing": listing_to_response(listing) if listing is not None else None,
        "customer": user_to_summary(_loaded(booking, "customer")),
        "host": user_to_summary(_loaded(booking, "host")),
    }


def bookings_to_response(bookings: Any) -> dict[str, Any]:
    """Convert a booking sequence to the collection response dict."""
    items = [booking_to_response(booking) for booking in bookings]
    return {"bookings": items, "total": len(items)}


def listings_to_response(listings: Any) -> dict[str, Any]:
    """Convert a listing sequence to the collection response dict."""
    items = [listing_to_response(listing) for listing in listings]
    return {"listings": items, "total": len(items)}
