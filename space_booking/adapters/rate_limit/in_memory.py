"""In-memory token-bucket rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: a single lock guards the bucket registry and every bucket.
- Bounded: least recently used buckets are evicted past ``max_keys`` and
  idle buckets are swept periodically.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from space_booking.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class InMemoryTokenBucketRateLimiter(AbstractRateLimiter):
    """Rate limiter keeping one token bucket per client key.

    Each bucket starts full with ``capacity`` tokens and refills continuously
    at ``refill_per_second`` tokens per second, never exceeding capacity. A
    request consumes one token; when less than one whole token is available
    the request is denied and the bucket is left untouched.

    Buckets idle for at least ``idle_ttl_seconds`` are dropped by a sweep
    that runs at most once per ``sweep_interval_seconds``. With the default
    TTL (time to refill an empty bucket) a swept bucket would have been full
    anyway, so sweeping is invisible to clients.
    """

    def __init__(
        self,
        *,
        capacity: int = 3,
        refill_per_second: float = 1.0,
        max_keys: int | None = 10_000,
        idle_ttl_seconds: float | None = None,
        sweep_interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            capacity: Maximum tokens per bucket (burst size).
            refill_per_second: Continuous refill rate.
            max_keys: Maximum number of tracked keys (None for unlimited).
            idle_ttl_seconds: Idle time after which a bucket may be swept.
                Defaults to ``capacity / refill_per_second``.
            sweep_interval_seconds: Minimum time between two sweeps.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If any limit is invalid.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if refill_per_second <= 0:
            raise ValueError("refill_per_second must be > 0")
        if max_keys is not None and max_keys < 1:
            raise ValueError("max_keys must be >= 1")
        if idle_ttl_seconds is not None and idle_ttl_seconds <= 0:
            raise ValueError("idle_ttl_seconds must be > 0")
        if sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be > 0")

        self._capacity = capacity
        self._rate = refill_per_second
        self._max_keys = max_keys
        self._idle_ttl = (
            idle_ttl_seconds if idle_ttl_seconds is not None else capacity / refill_per_second
        )
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: OrderedDict[str, _Bucket] = OrderedDict()
        self._last_sweep = clock()
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def _refill_locked(self, bucket: _Bucket, now: float) -> None:
        # A clock stepping backwards must not drain tokens
        elapsed = max(0.0, now - bucket.updated_at)
        bucket.tokens = min(float(self._capacity), bucket.tokens + elapsed * self._rate)
        bucket.updated_at = now

    def _get_or_create_locked(self, key: str, now: float) -> _Bucket:
        bucket = self._buckets.get(key)
        if bucket is not None:
            self._buckets.move_to_end(key)
            return bucket

        bucket = _Bucket(tokens=float(self._capacity), updated_at=now)
        self._buckets[key] = bucket
        self._evict_over_capacity_locked()
        return bucket

    def _evict_over_capacity_locked(self) -> None:
        if self._max_keys is None:
            return

        while len(self._buckets) > self._max_keys:
            # popitem(last=False) removes the least recently used bucket
            self._buckets.popitem(last=False)
            self._evictions += 1

    def _sweep_idle_locked(self, now: float) -> None:
        if now - self._last_sweep < self._sweep_interval:
            return
        self._last_sweep = now

        idle_keys = [
            key for key, bucket in self._buckets.items() if now - bucket.updated_at >= self._idle_ttl
        ]
        for key in idle_keys:
            del self._buckets[key]
        self._evictions += len(idle_keys)

        if idle_keys:
            logger.debug(
                "rate_limit.sweep",
                extra={"evicted": len(idle_keys), "tracked": len(self._buckets)},
            )

    def _build_result(self, *, allowed: bool, bucket: _Bucket, now: float, cost: int) -> RateLimitResult:
        missing = self._capacity - bucket.tokens
        reset_at = int(math.ceil(now + missing / self._rate))

        retry_after: int | None = None
        if not allowed:
            retry_after = max(1, int(math.ceil((cost - bucket.tokens) / self._rate)))

        return RateLimitResult(
            allowed=allowed,
            limit=self._capacity,
            remaining=int(bucket.tokens),
            reset_at=reset_at,
            retry_after_seconds=retry_after,
        )

    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Take ``cost`` tokens from the bucket for ``key`` if available.

        Lookup-or-create, refill and consume happen under one lock, so
        concurrent callers never spend more tokens than have accrued and a
        bucket is created at most once per key.

        Args:
            key: Client identity.
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        with self._lock:
            now = self._clock()
            self._sweep_idle_locked(now)
            bucket = self._get_or_create_locked(key, now)
            self._refill_locked(bucket, now)

            if bucket.tokens >= cost:
                bucket.tokens -= cost
                return self._build_result(allowed=True, bucket=bucket, now=now, cost=cost)

            return self._build_result(allowed=False, bucket=bucket, now=now, cost=cost)

    def stats(self) -> dict[str, int | float | None]:
        """Return registry metrics without exposing client keys."""

        with self._lock:
            return {
                "capacity": self._capacity,
                "refill_per_second": self._rate,
                "max_keys": self._max_keys,
                "idle_ttl_seconds": self._idle_ttl,
                "tracked_keys": len(self._buckets),
                "evictions": self._evictions,
            }
