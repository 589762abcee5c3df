"""Rate limiting adapters.

This package keeps admission control behind a small interface so the
in-memory token bucket can later be replaced by a shared store (e.g. Redis)
without touching the HTTP layer.
"""

from space_booking.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from space_booking.adapters.rate_limit.in_memory import InMemoryTokenBucketRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryTokenBucketRateLimiter",
    "RateLimitResult",
]
