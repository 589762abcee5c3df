"""Booking conflict resolution against the launch schedule and destination rotation.

A booking is accepted only when all of the following hold, checked in order:

1. launch date and birthday are present;
2. no launch in the external feed occupies the requested launchpad on the
   requested day;
3. the destination matches the day's slot in the weekly rotation, where the
   ascending list of destination ids is assigned to weekdays starting on
   Monday and wrapping around when there are fewer than seven.

The resolver keeps no state between calls: the feed and the destination list
are re-read every time, so schedule and destination changes apply at once.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from space_booking.adapters.launch_feed.base import AbstractLaunchFeed
from space_booking.adapters.persistence.base import AbstractDestinationStore
from space_booking.core.errors import UpstreamAppError
from space_booking.schemas.booking import BookingRequest
from space_booking.schemas.launch import ExternalLaunchRecord

logger = logging.getLogger(__name__)

# RFC 3339: zero-padded fields, optional fraction of up to nine digits and a
# mandatory offset written as Z or +HH:MM
FEED_TIMESTAMP_PATTERN = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


class RejectionReason(str, Enum):
    MISSING_FIELDS = "missing_fields"
    LAUNCH_SITE_CONFLICT = "launch_site_conflict"
    DESTINATION_ROTATION_MISMATCH = "destination_rotation_mismatch"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a booking validation.

    Attributes:
        reason: None when accepted, otherwise why the booking was rejected.
        message: Human-readable explanation for rejections.
        missing_fields: Required fields absent from the request.
        expected_destination_id: Destination scheduled for the launch day,
            when the rotation check got far enough to compute it.
        upstream_error: The collaborator failure behind an UPSTREAM_ERROR.
    """

    reason: RejectionReason | None = None
    message: str = ""
    missing_fields: tuple[str, ...] = ()
    expected_destination_id: int | None = None
    upstream_error: UpstreamAppError | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None

    @classmethod
    def accept(cls, *, expected_destination_id: int | None = None) -> ValidationResult:
        return cls(expected_destination_id=expected_destination_id)

    @classmethod
    def reject(
        cls,
        reason: RejectionReason,
        message: str,
        **kwargs,
    ) -> ValidationResult:
        return cls(reason=reason, message=message, **kwargs)


def parse_feed_timestamp(value: str | None) -> datetime | None:
    """Parse a feed timestamp strictly, returning None when it is malformed.

    Fractions beyond microseconds are truncated; out-of-range fields such as
    month 13 or hour 25 are treated as malformed.
    """
    if not value:
        return None
    match = FEED_TIMESTAMP_PATTERN.fullmatch(value)
    if match is None:
        return None

    fraction = (match["fraction"] or "0")[:6].ljust(6, "0")
    offset = "+00:00" if match["offset"] == "Z" else match["offset"]
    try:
        return datetime.fromisoformat(f"{match['base']}.{fraction}{offset}")
    except ValueError:
        return None


def iso_weekday_index(day: date) -> int:
    """Zero-based ISO weekday: Monday is 0, Sunday is 6."""
    return day.weekday()


def expected_destination_for(day: date, destination_ids: list[int]) -> int:
    """Destination assigned to ``day`` by the weekday rotation.

    Raises:
        ValueError: If ``destination_ids`` is empty.
    """
    if not destination_ids:
        raise ValueError("rotation requires at least one destination")
    return destination_ids[iso_weekday_index(day) % len(destination_ids)]


def find_launchpad_conflict(
    launches: list[ExternalLaunchRecord],
    launchpad_id: str,
    launch_date: date,
) -> ExternalLaunchRecord | None:
    """Return the first feed record occupying ``launchpad_id`` on ``launch_date``.

    Records with a malformed timestamp are skipped: they can neither block
    the booking nor abort the scan.
    """
    skipped = 0
    for launch in launches:
        launched_at = parse_feed_timestamp(launch.timestamp_local)
        if launched_at is None:
            skipped += 1
            logger.warning(
                "feed.record_skipped",
                extra={
                    "record_id": launch.record_id,
                    "reason": "unparseable_timestamp",
                    "raw_timestamp": launch.timestamp_local,
                },
            )
            continue

        # Calendar day in the launch site's own offset
        if launch.site_id == launchpad_id and launched_at.date() == launch_date:
            return launch

    if skipped:
        logger.info(
            "feed.scan_completed",
            extra={"record_count": len(launches), "skipped_count": skipped},
        )
    return None


class ConflictResolver:
    """Decides whether a booking request fits the launch schedule.

    Attributes:
        launch_feed: Source of the external launch schedule.
        destination_store: Source of the ordered destination ids.
    """

    def __init__(
        self,
        launch_feed: AbstractLaunchFeed,
        destination_store: AbstractDestinationStore,
    ) -> None:
        self.launch_feed = launch_feed
        self.destination_store = destination_store

    async def check_launchpad_availability(self, launchpad_id: str, launch_date: date) -> bool:
        """Return True when no feed launch occupies the launchpad that day.

        Raises:
            UpstreamAppError: If the feed cannot be fetched or decoded.
        """
        launches = await self.launch_feed.fetch_launches()
        conflict = find_launchpad_conflict(launches, launchpad_id, launch_date)
        if conflict is None:
            return True

        logger.info(
            "conflict.launchpad_unavailable",
            extra={
                "launchpad_id": launchpad_id,
                "launch_date": launch_date.isoformat(),
                "record_id": conflict.record_id,
                "mission": conflict.name,
            },
        )
        return False

    async def _load_destination_ids(self) -> list[int]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.destination_store.list_destination_ids)

    async def expected_destination(self, launch_date: date) -> int:
        """Destination the rotation assigns to ``launch_date``.

        Raises:
            UpstreamAppError: If the store fails or holds no destinations.
        """
        destination_ids = await self._load_destination_ids()
        if not destination_ids:
            logger.error("rotation.no_destinations")
            raise UpstreamAppError(
                code="no_destinations",
                message="No destinations are available to build the launch rotation",
                details={"upstream": "database"},
            )

        expected = expected_destination_for(launch_date, destination_ids)
        logger.debug(
            "rotation.resolved",
            extra={
                "weekday": iso_weekday_index(launch_date),
                "destination_count": len(destination_ids),
                "expected_destination_id": expected,
            },
        )
        return expected

    async def validate(self, booking: BookingRequest) -> ValidationResult:
        """Run every check in order and report the first failure.

        Collaborator failures are returned as UPSTREAM_ERROR results rather
        than raised, so availability is never assumed when a source is down.
        """
        missing = [
            field
            for field in ("launch_date", "birthday")
            if getattr(booking, field) is None
        ]
        if missing:
            return ValidationResult.reject(
                RejectionReason.MISSING_FIELDS,
                "Launch date and birthday must be provided",
                missing_fields=tuple(missing),
            )

        launch_date = booking.launch_date
        try:
            available = await self.check_launchpad_availability(booking.launchpad_id, launch_date)
            if not available:
                return ValidationResult.reject(
                    RejectionReason.LAUNCH_SITE_CONFLICT,
                    "The launchpad is already booked for a launch on that day",
                )

            expected = await self.expected_destination(launch_date)
        except UpstreamAppError as exc:
            return ValidationResult.reject(
                RejectionReason.UPSTREAM_ERROR,
                exc.message,
                upstream_error=exc,
            )

        if booking.destination_id != expected:
            logger.info(
                "conflict.destination_mismatch",
                extra={
                    "launch_date": launch_date.isoformat(),
                    "destination_id": booking.destination_id,
                    "expected_destination_id": expected,
                },
            )
            return ValidationResult.reject(
                RejectionReason.DESTINATION_ROTATION_MISMATCH,
                "The destination is not scheduled for launches on that weekday",
                expected_destination_id=expected,
            )

        return ValidationResult.accept(expected_destination_id=expected)
