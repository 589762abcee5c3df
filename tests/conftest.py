"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before the application settings are imported
so no local .env file or database is touched.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("FEED_URL", "http://feed.test/v4/launches")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")

import pytest

from space_booking.adapters.launch_feed.base import AbstractLaunchFeed
from space_booking.adapters.persistence.base import (
    AbstractBookingRepository,
    AbstractDestinationStore,
)
from space_booking.adapters.rate_limit.in_memory import InMemoryTokenBucketRateLimiter
from space_booking.core.errors import UpstreamAppError
from space_booking.schemas.booking import BookingRequest, BookingResponse
from space_booking.schemas.launch import ExternalLaunchRecord


class FakeLaunchFeed(AbstractLaunchFeed):
    """Launch feed returning canned records or raising a canned error."""

    def __init__(
        self,
        records: list[ExternalLaunchRecord] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.records = list(records or [])
        self.error = error
        self.calls = 0
        self.closed = False

    async def fetch_launches(self) -> list[ExternalLaunchRecord]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)

    async def aclose(self) -> None:
        self.closed = True


class FakeDestinationStore(AbstractDestinationStore):
    def __init__(self, ids: list[int] | None = None, error: Exception | None = None) -> None:
        self.ids = list(range(1, 8)) if ids is None else list(ids)
        self.error = error
        self.calls = 0

    def list_destination_ids(self) -> list[int]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.ids)


class InMemoryBookingRepository(AbstractBookingRepository):
    def __init__(self, error: Exception | None = None) -> None:
        self.bookings: list[BookingResponse] = []
        self.error = error

    def create(self, booking: BookingRequest) -> BookingResponse:
        if self.error is not None:
            raise self.error
        stored = BookingResponse(id=len(self.bookings) + 1, **booking.model_dump())
        self.bookings.append(stored)
        return stored

    def list_all(self) -> list[BookingResponse]:
        return list(self.bookings)


def make_launch(
    site_id: str,
    timestamp: str | None,
    record_id: str = "launch-1",
    name: str = "Test Mission",
) -> ExternalLaunchRecord:
    return ExternalLaunchRecord(
        site_id=site_id,
        timestamp_local=timestamp,
        record_id=record_id,
        name=name,
    )


def make_booking(**overrides) -> BookingRequest:
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "gender": "female",
        "birthday": "1990-12-10",
        "launchpad_id": "5e9e4501f509094ba4566f84",
        "destination_id": 6,
        # Saturday: rotation slot 5 -> destination 6 with ids 1..7
        "launch_date": "2049-12-25",
    }
    payload.update(overrides)
    return BookingRequest(**payload)


def feed_unavailable() -> UpstreamAppError:
    return UpstreamAppError(
        code="launch_feed_unavailable",
        message="Launch schedule feed could not be reached",
        details={"upstream": "launch_feed"},
    )


@pytest.fixture
def launch_feed() -> FakeLaunchFeed:
    return FakeLaunchFeed()


@pytest.fixture
def destination_store() -> FakeDestinationStore:
    return FakeDestinationStore()


@pytest.fixture
def booking_repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def generous_rate_limiter() -> InMemoryTokenBucketRateLimiter:
    """Limiter that never gets in the way of functional route tests."""
    return InMemoryTokenBucketRateLimiter(capacity=1000, refill_per_second=1000.0)
