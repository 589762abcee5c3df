from __future__ import annotations

from space_booking.api.routes.bookings import router as bookings_router
from space_booking.api.routes.health import router as health_router

__all__ = ["bookings_router", "health_router"]
