# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Occupancy iCal feed API endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.database import get_db
from staybook.services.booking_service import BookingService
from staybook.services.calendar_service import CalendarService, get_calendar_cache
from staybook.services.clock import Clock, get_clock
from staybook.services.listing_service import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["iCal"])


def get_calendar_service() -> CalendarService:
    """Get calendar service with shared cache.

    Returns:
        CalendarService instance with cache.
    """
    return CalendarService(cache=get_calendar_cache())


@router.get(
    "/ical/{listing_id}.ics",
    response_class=Response,
    responses={
        200: {
            "content": {"text/calendar": {}},
            "description": "iCal calendar feed",
        },
        404: {"description": "Listing not found"},
    },
)
async def get_ical_feed(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    clock: Annotated[Clock, Depends(get_clock)],
    calendar_service: Annotated[CalendarService, Depends(get_calendar_service)],
) -> Response:
    """Get the occupancy feed of a listing for external calendars.

    Returns:
        iCal calendar as text/calendar response.

    Raises:
        NotFoundError: 404 if listing not found.
    """
    listing = await ListingService(db).get_listing(listing_id)
    intervals = await BookingService(db, clock=clock).list_occupied_intervals(
        listing_id
    )

    ical_content = calendar_service.generate_occupancy_ical(listing, intervals)

    return Response(
        content=ical_content,
        media_type="text/calendar",
        headers={
            "Content-Disposition": f'attachment; filename="listing-{listing_id}.ics"',
        },
    )
