# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for the maintenance scheduler."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import async_sessionmaker
from staybook.models.booking import Booking
from staybook.models.listing import Listing
from staybook.repositories.booking_repository import BookingRepository
from staybook.services.listing_service import ListingService
from staybook.services.scheduler import (
    RECONCILE_JOB_ID,
    MaintenanceScheduler,
    get_scheduler,
    init_scheduler,
)


class TestMaintenanceScheduler:
    """Tests for MaintenanceScheduler."""

    @pytest.fixture
    def mock_session_factory(self):
        """Create mock session factory."""
        return MagicMock(spec=async_sessionmaker)

    def test_start_scheduler(self, mock_session_factory):
        """Test starting the scheduler registers the sweep."""
        scheduler = MaintenanceScheduler(mock_session_factory, interval_minutes=15)

        with (
            patch.object(scheduler._scheduler, "add_job") as mock_add_job,
            patch.object(scheduler._scheduler, "start") as mock_start,
        ):
            scheduler.start()

        mock_add_job.assert_called_once()
        kwargs = mock_add_job.call_args.kwargs
        assert kwargs["id"] == RECONCILE_JOB_ID
        assert kwargs["max_instances"] == 1
        assert isinstance(kwargs["trigger"], IntervalTrigger)
        assert kwargs["trigger"].interval.total_seconds() == 15 * 60
        mock_start.assert_called_once()
        assert scheduler.is_running is True

    def test_start_already_running(self, mock_session_factory):
        """Test starting already running scheduler logs warning."""
        scheduler = MaintenanceScheduler(mock_session_factory, interval_minutes=60)
        scheduler._running = True

        with patch.object(scheduler._scheduler, "add_job") as mock_add_job:
            scheduler.start()

        mock_add_job.assert_not_called()

    def test_stop_scheduler(self, mock_session_factory):
        """Test stopping the scheduler."""
        scheduler = MaintenanceScheduler(mock_session_factory, interval_minutes=60)
        scheduler._running = True

        with patch.object(scheduler._scheduler, "shutdown") as mock_shutdown:
            scheduler.stop()

        mock_shutdown.assert_called_once_with(wait=False)
        assert scheduler.is_running is False

    def test_stop_not_running(self, mock_session_factory):
        """Test stopping non-running scheduler does nothing."""
        scheduler = MaintenanceScheduler(mock_session_factory, interval_minutes=60)

        with patch.object(scheduler._scheduler, "shutdown") as mock_shutdown:
            scheduler.stop()

        mock_shutdown.assert_not_called()


class TestReconcileJob:
    """Tests for the scheduled reconciliation sweep."""

    @pytest.mark.asyncio
    async def test_sweep_removes_orphans(
        self, lenient_session, make_user, make_listing
    ):
        """Test the job deletes bookings of a vanished listing."""
        host = await make_user(session=lenient_session)
        guest = await make_user(session=lenient_session)
        listing = await make_listing(host, session=lenient_session)
        listing_id = listing.id
        lenient_session.add(
            Booking(
                listing_id=listing_id,
                customer_id=guest.id,
                host_id=host.id,
                start_date=date(2026, 7, 1),
                end_date=date(2026, 7, 3),
                total_price=Decimal("200.00"),
            )
        )
        await lenient_session.commit()
        # Interrupted deletion: the listing row is gone, its booking is not
        await lenient_session.execute(delete(Listing).where(Listing.id == listing_id))
        await lenient_session.commit()

        factory = async_sessionmaker(lenient_session.bind, expire_on_commit=False)
        scheduler = MaintenanceScheduler(factory, interval_minutes=60)
        removed = await scheduler.reconcile_orphans()

        assert removed == 1
        repo = BookingRepository(lenient_session)
        assert await repo.count_for_listing(listing_id) == 0

    @pytest.mark.asyncio
    async def test_sweep_failure_returns_zero(self, session_factory):
        """Test errors during the sweep are logged and swallowed."""
        scheduler = MaintenanceScheduler(session_factory, interval_minutes=60)

        with patch.object(
            ListingService,
            "reconcile_orphans",
            AsyncMock(side_effect=RuntimeError("store offline")),
        ):
            assert await scheduler.reconcile_orphans() == 0


class TestSchedulerGlobals:
    """Tests for global scheduler functions."""

    def test_get_scheduler_returns_none_initially(self):
        """Test get_scheduler returns None when not initialized."""
        import staybook.services.scheduler as scheduler_module

        scheduler_module._scheduler = None

        result = get_scheduler()
        assert result is None

    def test_init_scheduler(self):
        """Test init_scheduler creates and registers the scheduler."""
        mock_factory = MagicMock(spec=async_sessionmaker)

        scheduler = init_scheduler(mock_factory, interval_minutes=30)

        assert isinstance(scheduler, MaintenanceScheduler)
        assert get_scheduler() is scheduler
        assert scheduler._interval_minutes == 30
