"""Storage interfaces consumed by the booking services.

Implementations are synchronous; async callers dispatch them to an executor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from space_booking.schemas.booking import BookingRequest, BookingResponse


class AbstractDestinationStore(ABC):
    """Read-only access to the known destinations."""

    @abstractmethod
    def list_destination_ids(self) -> list[int]:
        """Return every destination id in ascending order.

        Raises:
            UpstreamAppError: If the store cannot be queried.
        """
        raise NotImplementedError


class AbstractBookingRepository(ABC):
    """Persistence sink for accepted bookings."""

    @abstractmethod
    def create(self, booking: BookingRequest) -> BookingResponse:
        """Insert a booking and return it with its assigned id.

        Raises:
            UpstreamAppError: If the insert fails.
        """
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[BookingResponse]:
        """Return all stored bookings ordered by id."""
        raise NotImplementedError
