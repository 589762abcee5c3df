"""Persistence adapters for destinations and bookings."""

from space_booking.adapters.persistence.base import (
    AbstractBookingRepository,
    AbstractDestinationStore,
)
from space_booking.adapters.persistence.database import Database
from space_booking.adapters.persistence.sqlalchemy_store import (
    SqlBookingRepository,
    SqlDestinationStore,
)

__all__ = [
    "AbstractBookingRepository",
    "AbstractDestinationStore",
    "Database",
    "SqlBookingRepository",
    "SqlDestinationStore",
]
