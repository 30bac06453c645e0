# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking model for reserved date ranges on a listing."""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybook.database import Base

if TYPE_CHECKING:
    from staybook.models.listing import Listing
    from staybook.models.user import User


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class BookingStatus(StrEnum):
    """Lifecycle states of a booking."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    """Reservation of the half-open interval [start_date, end_date) on a listing.

    host_id is a snapshot of the listing's creator at booking time and is
    never recomputed. total_price is likewise fixed at creation.
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    listing_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
    )
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    host_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.CONFIRMED.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing")
    customer: Mapped["User"] = relationship("User", foreign_keys=[customer_id])
    host: Mapped["User"] = relationship("User", foreign_keys=[host_id])

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_booking_positive_stay"),
        CheckConstraint("total_price > 0", name="ck_booking_price_positive"),
        CheckConstraint("customer_id <> host_id", name="ck_booking_not_own_listing"),
        Index("idx_booking_dates", "listing_id", "start_date", "end_date"),
        Index("idx_booking_customer", "customer_id"),
        Index("idx_booking_host", "host_id"),
        Index("idx_booking_status", "status"),
    )

    @property
    def nights(self) -> int:
        """Number of nights covered by the booking."""
        return (self.end_date - self.start_date).days

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Booking(id={self.id}, listing_id={self.listing_id}, "
            f"start={self.start_date}, end={self.end_date}, status={self.status})>"
        )
