"""Rate limiting middleware for the FastAPI app.

This module wires the rate limiting adapter into the HTTP layer. The limiter
itself is built once per application (see ``build_rate_limiter``) and kept on
``app.state``; the middleware only derives the client key and asks it.

Client identity is the remote address exactly as the server sees it,
``host:port`` by default. Two connections from the same host on different
ports are different clients; ``APP_RATE_LIMIT_KEY_MODE=host`` drops the port.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from space_booking.adapters.rate_limit.base import AbstractRateLimiter
from space_booking.adapters.rate_limit.in_memory import InMemoryTokenBucketRateLimiter
from space_booking.core.config import AppSettings, settings

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Create the limiter described by the application settings."""

    cfg = app_settings or settings.app
    return InMemoryTokenBucketRateLimiter(
        capacity=cfg.rate_limit_capacity,
        refill_per_second=cfg.rate_limit_refill_per_second,
        max_keys=cfg.rate_limit_max_keys,
        idle_ttl_seconds=cfg.rate_limit_idle_ttl_seconds,
        sweep_interval_seconds=cfg.rate_limit_sweep_interval_seconds,
    )


def client_identity(request: Request, key_mode: str = "address") -> str:
    """Derive the limiter key for the current request.

    Args:
        request: FastAPI request.
        key_mode: "address" for host:port, "host" for the host alone.

    Returns:
        str: Limiter key.
    """

    if request.client is None:
        return "unknown"
    if key_mode == "host":
        return request.client.host
    return f"{request.client.host}:{request.client.port}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def rate_limit_middleware(request: Request, call_next) -> Response:
    """Per-client admission control in front of every route.

    Consumes one token from the caller's bucket before the request is routed,
    so unknown paths are throttled too. An empty bucket short-circuits with
    HTTP 429 Too Many Requests.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response, or a 429 response when throttled.
    """

    if not settings.app.rate_limit_enabled:
        return await call_next(request)

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    key = client_identity(request, settings.app.rate_limit_key_mode)

    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return await call_next(request)

    retry_after = result.retry_after_seconds or 1
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too Many Requests"},
        headers=headers or None,
    )
