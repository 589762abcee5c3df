from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (collaborators, middleware, handlers, routers)
so tests can build an app around fake collaborators.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from space_booking.adapters.launch_feed.base import AbstractLaunchFeed
from space_booking.adapters.launch_feed.http_feed import HttpLaunchFeed
from space_booking.adapters.persistence.base import (
    AbstractBookingRepository,
    AbstractDestinationStore,
)
from space_booking.adapters.persistence.database import Database
from space_booking.adapters.persistence.sqlalchemy_store import (
    SqlBookingRepository,
    SqlDestinationStore,
)
from space_booking.adapters.rate_limit.base import AbstractRateLimiter
from space_booking.api.routes import bookings_router, health_router
from space_booking.core.config import settings
from space_booking.core.exception_handlers import setup_exception_handlers
from space_booking.core.logging import configure_logging
from space_booking.core.middleware import request_id_middleware
from space_booking.core.rate_limit import build_rate_limiter, rate_limit_middleware
from space_booking.services.booking_service import BookingService
from space_booking.services.conflict_resolver import ConflictResolver

logger = logging.getLogger(__name__)


def create_app(
    *,
    database: Database | None = None,
    launch_feed: AbstractLaunchFeed | None = None,
    destination_store: AbstractDestinationStore | None = None,
    booking_repository: AbstractBookingRepository | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Any collaborator left as None is built from settings. A database is only
    created when a SQL-backed store or repository is needed.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    owns_database = False
    if database is None and (destination_store is None or booking_repository is None):
        database = Database(settings.db.url, echo=settings.db.echo)
        owns_database = True

    launch_feed = launch_feed or HttpLaunchFeed(
        settings.feed.url,
        timeout_seconds=settings.feed.timeout_seconds,
    )
    destination_store = destination_store or SqlDestinationStore(database)
    booking_repository = booking_repository or SqlBookingRepository(database)
    rate_limiter = rate_limiter or build_rate_limiter(settings.app)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if database is not None:
            database.create_schema()
            if settings.db.seed_destinations:
                database.seed_destinations()
        logger.info("app.started", extra={"app_env": settings.app_env})
        try:
            yield
        finally:
            await launch_feed.aclose()
            if owns_database:
                database.dispose()
            logger.info("app.stopped")

    app = FastAPI(
        title="Space Booking API",
        description=(
            "Books passenger launches from a launchpad to a destination. A "
            "booking is rejected when the launchpad is already used by a "
            "scheduled launch that day or when the destination does not match "
            "the weekday rotation. Every client is rate limited."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.database = database
    app.state.rate_limiter = rate_limiter
    app.state.launch_feed = launch_feed
    app.state.booking_service = BookingService(
        resolver=ConflictResolver(launch_feed, destination_store),
        repository=booking_repository,
    )

    # Middleware (last registered runs first, so throttled responses still
    # carry a request id)
    app.middleware("http")(rate_limit_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(bookings_router)
    app.include_router(health_router)

    return app
