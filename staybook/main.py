# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""FastAPI application entry point for StayBook."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staybook import __version__
from staybook.api import bookings, health, ical, listings, users
from staybook.config import get_settings
from staybook.database import get_session_factory
from staybook.middleware.auth import AuthenticationMiddleware
from staybook.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from staybook.services.scheduler import init_scheduler
from staybook.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan handler for startup/shutdown events.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    # Startup
    setup_logging()

    settings = get_settings()
    app.state.settings = settings

    scheduler = init_scheduler(
        get_session_factory(), settings.orphan_sweep_interval_minutes
    )
    scheduler.start()

    yield

    # Shutdown
    scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title="StayBook",
        description="Short-term rental marketplace: listings, bookings, wishlists",
        version=__version__,
        docs_url="/docs" if settings.expose_docs else None,
        redoc_url="/redoc" if settings.expose_docs else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - last added is outermost)
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(ical.router)
    app.include_router(users.router)
    app.include_router(listings.router)
    app.include_router(bookings.router)

    return app


# Application instance
app = create_app()
