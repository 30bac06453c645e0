# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Listing model for rentable properties."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staybook.database import Base

if TYPE_CHECKING:
    from staybook.models.user import User


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class Listing(Base):
    """Property offered for nightly rental by its creator (the host).

    Bookings reference listings; deleting a listing goes through
    ListingService so that its bookings are removed in the same transaction.
    """

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    apt_suite: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    province: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    guest_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bedroom_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bathroom_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    photo_paths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    highlight: Mapped[str | None] = mapped_column(String(255), nullable=True)
    highlight_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Nightly price
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    creator: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_listing_price_positive"),
        Index("idx_listing_creator", "creator_id"),
        Index("idx_listing_city", "city"),
        Index("idx_listing_category", "category"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Listing(id={self.id}, title={self.title}, price={self.price})>"
