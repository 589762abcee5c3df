from typing import Annotated

from fastapi import APIRouter, Depends, status

from space_booking.api.dependencies import get_booking_service
from space_booking.schemas.booking import BookingRequest, BookingResponse
from space_booking.services.booking_service import BookingService

router = APIRouter(tags=["Bookings"])


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    booking: BookingRequest,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingResponse:
    """Book a launch.

    The booking is accepted only when the launchpad is free in the external
    launch schedule on that day and the destination matches the weekday
    rotation.

    Returns:
        BookingResponse: The stored booking with its id.

    Raises:
        ValidationAppError: 400 when launch date or birthday is missing.
        ConflictAppError: 409 when the booking conflicts with the schedule.
        UpstreamAppError: 502 when the launch feed or database is unavailable.
    """
    return await service.create_booking(booking)


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> list[BookingResponse]:
    """List every stored booking."""
    return await service.list_bookings()
