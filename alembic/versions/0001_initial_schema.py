# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Create users, listings, bookings and wishlist tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("profile_image_path", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "creator_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("street_address", sa.String(length=255), nullable=True),
        sa.Column("apt_suite", sa.String(length=100), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("province", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("bedroom_count", sa.Integer(), nullable=False),
        sa.Column("bed_count", sa.Integer(), nullable=False),
        sa.Column("bathroom_count", sa.Integer(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("photo_paths", sa.JSON(), nullable=False),
        sa.Column("highlight", sa.String(length=255), nullable=True),
        sa.Column("highlight_description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("price > 0", name="ck_listing_price_positive"),
    )
    op.create_index("idx_listing_creator", "listings", ["creator_id"])
    op.create_index("idx_listing_city", "listings", ["city"])
    op.create_index("idx_listing_category", "listings", ["category"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "host_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("end_date > start_date", name="ck_booking_positive_stay"),
        sa.CheckConstraint("total_price > 0", name="ck_booking_price_positive"),
        sa.CheckConstraint(
            "customer_id <> host_id", name="ck_booking_not_own_listing"
        ),
    )
    op.create_index(
        "idx_booking_dates", "bookings", ["listing_id", "start_date", "end_date"]
    )
    op.create_index("idx_booking_customer", "bookings", ["customer_id"])
    op.create_index("idx_booking_host", "bookings", ["host_id"])
    op.create_index("idx_booking_status", "bookings", ["status"])

    op.create_table(
        "wishlist_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("listing_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "listing_id", name="uq_wishlist_user_listing"
        ),
    )
    op.create_index("idx_wishlist_user", "wishlist_items", ["user_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("wishlist_items")
    op.drop_table("bookings")
    op.drop_table("listings")
    op.drop_table("users")
