"""Booking workflow: validate against the schedule, then persist.

Validation outcomes from the ConflictResolver are translated here into the
application error types the HTTP layer renders.

No lock is held between validation and the insert; two concurrent requests
for the same launchpad and day can both be accepted.
"""

from __future__ import annotations

import asyncio
import logging

from space_booking.adapters.persistence.base import AbstractBookingRepository
from space_booking.core.errors import (
    AppError,
    ConflictAppError,
    UpstreamAppError,
    ValidationAppError,
)
from space_booking.schemas.booking import BookingRequest, BookingResponse
from space_booking.services.conflict_resolver import (
    ConflictResolver,
    RejectionReason,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def rejection_to_error(booking: BookingRequest, result: ValidationResult) -> AppError:
    """Build the application error describing a rejected validation."""
    if result.reason is RejectionReason.MISSING_FIELDS:
        return ValidationAppError(
            code="missing_fields",
            message=result.message,
            details={"missing_fields": list(result.missing_fields)},
        )

    if result.reason is RejectionReason.LAUNCH_SITE_CONFLICT:
        return ConflictAppError(
            code="launchpad_unavailable",
            message=result.message,
            details={
                "launchpad_id": booking.launchpad_id,
                "launch_date": booking.launch_date.isoformat(),
            },
        )

    if result.reason is RejectionReason.DESTINATION_ROTATION_MISMATCH:
        return ConflictAppError(
            code="destination_not_scheduled",
            message=result.message,
            details={
                "destination_id": booking.destination_id,
                "expected_destination_id": result.expected_destination_id,
                "launch_date": booking.launch_date.isoformat(),
            },
        )

    if result.upstream_error is not None:
        return result.upstream_error
    return UpstreamAppError(code="upstream_error", message=result.message)


class BookingService:
    """Creates and lists bookings.

    Attributes:
        resolver: Conflict checks run before every insert.
        repository: Persistence sink for accepted bookings.
    """

    def __init__(self, resolver: ConflictResolver, repository: AbstractBookingRepository) -> None:
        self.resolver = resolver
        self.repository = repository

    async def create_booking(self, booking: BookingRequest) -> BookingResponse:
        """Validate a booking and store it.

        Returns:
            The stored booking with its assigned id.

        Raises:
            ValidationAppError: Required dates are missing.
            ConflictAppError: The launchpad is taken or the destination is off-rotation.
            UpstreamAppError: The feed or the database failed.
        """
        result = await self.resolver.validate(booking)
        if not result.accepted:
            logger.info(
                "booking.rejected",
                extra={
                    "reason": result.reason.value,
                    "launchpad_id": booking.launchpad_id,
                    "destination_id": booking.destination_id,
                },
            )
            raise rejection_to_error(booking, result)

        loop = asyncio.get_running_loop()
        stored = await loop.run_in_executor(None, self.repository.create, booking)

        logger.info(
            "booking.created",
            extra={
                "booking_id": stored.id,
                "launchpad_id": stored.launchpad_id,
                "destination_id": stored.destination_id,
                "launch_date": stored.launch_date.isoformat(),
            },
        )
        return stored

    async def list_bookings(self) -> list[BookingResponse]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.repository.list_all)
