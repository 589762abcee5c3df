"""SQLAlchemy-backed destination store and booking repository."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from space_booking.adapters.persistence.base import (
    AbstractBookingRepository,
    AbstractDestinationStore,
)
from space_booking.adapters.persistence.database import Database
from space_booking.adapters.persistence.models import Booking, Destination
from space_booking.core.errors import UpstreamAppError
from space_booking.schemas.booking import BookingRequest, BookingResponse

logger = logging.getLogger(__name__)


def _storage_error(exc: SQLAlchemyError, operation: str) -> UpstreamAppError:
    logger.error(
        "db.query_failed",
        extra={
            "operation": operation,
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
        },
    )
    return UpstreamAppError(
        code="storage_unavailable",
        message="Booking storage is unavailable",
        details={"upstream": "database", "reason": operation},
    )


class SqlDestinationStore(AbstractDestinationStore):
    def __init__(self, database: Database) -> None:
        self.database = database

    def list_destination_ids(self) -> list[int]:
        try:
            with self.database.session() as session:
                ids = list(session.scalars(select(Destination.id).order_by(Destination.id)))
        except SQLAlchemyError as exc:
            raise _storage_error(exc, "list_destination_ids") from exc

        logger.debug("db.destination_ids", extra={"destination_ids": ids})
        return ids


class SqlBookingRepository(AbstractBookingRepository):
    def __init__(self, database: Database) -> None:
        self.database = database

    def create(self, booking: BookingRequest) -> BookingResponse:
        row = Booking(**booking.model_dump())
        try:
            with self.database.session() as session, session.begin():
                session.add(row)
                session.flush()
                stored = BookingResponse.model_validate(row)
        except SQLAlchemyError as exc:
            raise _storage_error(exc, "create_booking") from exc
        return stored

    def list_all(self) -> list[BookingResponse]:
        try:
            with self.database.session() as session:
                rows = session.scalars(select(Booking).order_by(Booking.id)).all()
                return [BookingResponse.model_validate(row) for row in rows]
        except SQLAlchemyError as exc:
            raise _storage_error(exc, "list_bookings") from exc
