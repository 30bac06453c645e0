# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""User profile, trip, reservation and wishlist endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.api.schemas import (
    BookingsResponse,
    ListingResponse,
    ListingsResponse,
    UserSummary,
    bookings_to_response,
    listing_to_response,
    listings_to_response,
    user_to_summary,
)
from staybook.database import get_db
from staybook.middleware.auth import require_user_id
from staybook.models.user import User
from staybook.repositories.user_repository import UserRepository
from staybook.services.booking_service import BookingService
from staybook.services.errors import ForbiddenError
from staybook.services.listing_service import ListingService
from staybook.services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


class UserCreateRequest(BaseModel):
    """Request model for registering a user profile."""

    first_name: str = Field(min_length=1, max_length=100, description="First name")
    last_name: str = Field(min_length=1, max_length=100, description="Last name")
    email: str = Field(
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Email address",
    )
    profile_image_path: str | None = Field(
        default=None, max_length=500, description="Avatar path"
    )


class WishlistResponse(BaseModel):
    """Response model for a wishlist."""

    wishlist: list[ListingResponse] = Field(description="Saved listings")
    total: int = Field(description="Total count")


class WishlistToggleResponse(WishlistResponse):
    """Response model for a wishlist toggle."""

    message: str = Field(description="What the toggle did")


def _require_self(user_id: int, caller_id: int) -> None:
    """Reject access to another user's private views."""
    if user_id != caller_id:
        raise ForbiddenError("not authorized to access another user's data")


def _wishlist_to_response(listings: Any) -> dict[str, Any]:
    items = [listing_to_response(listing) for listing in listings]
    return {"wishlist": items, "total": len(items)}


@router.post("", response_model=UserSummary, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any] | None:
    """Register a user profile.

    Raises:
        HTTPException: 409 if the email is already registered.
    """
    repo = UserRepository(db)
    if await repo.get_by_email(request.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    try:
        user = await repo.create(User(**request.model_dump()))
        await db.commit()
    except IntegrityError as err:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered (conflict during create)",
        ) from err

    logger.info("Registered user %s", user.id)
    return user_to_summary(user)


@router.get("/{user_id}/trips", response_model=BookingsResponse)
async def list_trips(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get bookings the user made as a customer."""
    _require_self(user_id, caller_id)
    bookings = await BookingService(db).list_bookings(customer_id=user_id)
    return bookings_to_response(bookings)


@router.get("/{user_id}/reservations", response_model=BookingsResponse)
async def list_reservations(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get bookings on the user's listings, by start date."""
    _require_self(user_id, caller_id)
    bookings = await BookingService(db).list_bookings(host_id=user_id)
    return bookings_to_response(bookings)


@router.get("/{user_id}/properties", response_model=ListingsResponse)
async def list_properties(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any]:
    """Get the listings a user hosts."""
    listings = await ListingService(db).list_listings_for_host(user_id)
    return listings_to_response(listings)


@router.get("/{user_id}/wishlist", response_model=WishlistResponse)
async def get_wishlist(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Get the user's saved listings."""
    _require_self(user_id, caller_id)
    listings = await WishlistService(db).list_for_user(user_id)
    return _wishlist_to_response(listings)


@router.patch("/{user_id}/wishlist/{listing_id}", response_model=WishlistToggleResponse)
async def toggle_wishlist(
    user_id: int,
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller_id: Annotated[int, Depends(require_user_id)],
) -> dict[str, Any]:
    """Add a listing to the wishlist, or remove it if already saved."""
    _require_self(user_id, caller_id)
    added, listings = await WishlistService(db).toggle(user_id, listing_id)

    if added is None:
        message = "Listing not found, removed from wishlist"
    elif added:
        message = "Added to wishlist"
    else:
        message = "Removed from wishlist"

    return {"message": message, **_wishlist_to_response(listings)}
