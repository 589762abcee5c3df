"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error can carry only what applies to it.
    """

    code: str
    message: str
    hint: str
    reason: str
    launchpad_id: str
    launch_date: str
    destination_id: int
    expected_destination_id: int
    missing_fields: list[str]
    upstream: str
    http_status: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when caller input is incomplete or malformed."""


class ConflictAppError(AppError):
    """Raised when a booking is rejected by a scheduling rule."""


class UpstreamAppError(AppError):
    """Raised when the launch feed or the database cannot be used."""
