"""Request-scoped accessors for the services built by the app factory."""

from __future__ import annotations

from fastapi import Request

from space_booking.adapters.persistence.database import Database
from space_booking.services.booking_service import BookingService


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_database(request: Request) -> Database | None:
    return getattr(request.app.state, "database", None)
