"""Pydantic schemas for booking requests and stored bookings."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_calendar_date(value: Any) -> Any:
    """Reduce RFC 3339 timestamps to their calendar date.

    The date is taken in the timestamp's own offset. Plain ``YYYY-MM-DD``
    strings and ``date`` objects are left for pydantic to validate. The
    all-zero timestamp some clients send for "unset" is treated as missing.
    """
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        value = value.date()
    if value == date.min:
        return None
    return value


class BookingRequest(BaseModel):
    """Incoming booking request, not yet validated against the schedule."""

    first_name: str = Field(..., max_length=50, description="Passenger first name.")
    last_name: str = Field(..., max_length=50, description="Passenger last name.")
    gender: str | None = Field(default=None, max_length=10, description="Passenger gender.")
    birthday: date | None = Field(
        default=None,
        description="Passenger birth date (YYYY-MM-DD or RFC 3339 timestamp).",
    )
    launchpad_id: str = Field(
        ...,
        max_length=50,
        description="Opaque launchpad identifier as used by the launch feed.",
    )
    destination_id: int = Field(..., description="Identifier of an existing destination.")
    launch_date: date | None = Field(
        default=None,
        description="Requested launch day (YYYY-MM-DD or RFC 3339 timestamp).",
    )

    @field_validator("birthday", "launch_date", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return _coerce_calendar_date(value)


class BookingResponse(BaseModel):
    """A persisted booking."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    gender: str | None = None
    birthday: date | None = None
    launchpad_id: str
    destination_id: int
    launch_date: date
