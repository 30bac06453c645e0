# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Background scheduler for booking store maintenance."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from staybook.services.listing_service import ListingService

logger = logging.getLogger(__name__)

RECONCILE_JOB_ID = "reconcile_orphaned_bookings"


class MaintenanceScheduler:
    """Scheduler for the orphaned booking reconciliation sweep.

    Uses APScheduler to run the sweep at the configured interval.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_minutes: int,
    ) -> None:
        """Initialize scheduler.

        Args:
            session_factory: Factory for creating database sessions.
            interval_minutes: Minutes between reconciliation sweeps.
        """
        self._session_factory = session_factory
        self._interval_minutes = interval_minutes
        self._scheduler = AsyncIOScheduler()
        self._running = False

    def start(self) -> None:
        """Start the scheduler."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._scheduler.add_job(
            self.reconcile_orphans,
            trigger=IntervalTrigger(minutes=self._interval_minutes),
            id=RECONCILE_JOB_ID,
            replace_existing=True,
            max_instances=1,
        )

        self._scheduler.start()
        self._running = True
        logger.info(
            "Reconciliation sweep scheduled every %d minutes", self._interval_minutes
        )

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=False)
        self._running = False
        logger.info("Maintenance scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running.

        Returns:
            True if scheduler is running.
        """
        return self._running

    async def reconcile_orphans(self) -> int:
        """Delete bookings left behind by interrupted listing deletions.

        Returns:
            Number of bookings removed, 0 if the sweep failed.
        """
        logger.debug("Starting orphaned booking reconciliation")

        async with self._session_factory() as session:
            try:
                service = ListingService(session)
                return await service.reconcile_orphans()
            except Exception:
                logger.exception("Error during orphaned booking reconciliation")
                await session.rollback()
                return 0


# Global scheduler instance
_scheduler: MaintenanceScheduler | None = None


def get_scheduler() -> MaintenanceScheduler | None:
    """Get the global scheduler instance.

    Returns:
        MaintenanceScheduler instance or None if not initialized.
    """
    return _scheduler


def init_scheduler(
    session_factory: async_sessionmaker[AsyncSession],
    interval_minutes: int,
) -> MaintenanceScheduler:
    """Initialize the global scheduler.

    Args:
        session_factory: Factory for creating database sessions.
        interval_minutes: Minutes between reconciliation sweeps.

    Returns:
        Initialized MaintenanceScheduler.
    """
    global _scheduler  # noqa: PLW0603
    _scheduler = MaintenanceScheduler(session_factory, interval_minutes)
    return _scheduler
