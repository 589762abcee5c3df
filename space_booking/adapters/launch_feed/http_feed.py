"""HTTP launch feed adapter (SpaceX API compatible)."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from space_booking.adapters.launch_feed.base import AbstractLaunchFeed
from space_booking.core.errors import UpstreamAppError
from space_booking.schemas.launch import ExternalLaunchRecord, LaunchFeedPayload

logger = logging.getLogger(__name__)


class HttpLaunchFeed(AbstractLaunchFeed):
    """Fetches the launch list with a single unauthenticated GET.

    Uses one shared ``httpx.AsyncClient`` so connections are pooled across
    requests. Nothing is cached: every call re-downloads the full feed.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the feed client.

        Args:
            url: Endpoint returning a JSON array of launches.
            timeout_seconds: Timeout applied to the whole request.
            client: Optional preconfigured client (tests pass a mock transport).
        """
        self.url = url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def fetch_launches(self) -> list[ExternalLaunchRecord]:
        """Download and decode the launch list.

        Raises:
            UpstreamAppError: On transport errors, HTTP error statuses, or a
                payload that is not a JSON list of launch objects.
        """
        try:
            response = await self.client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "feed.http_error",
                extra={"url": self.url, "http_status": exc.response.status_code},
            )
            raise UpstreamAppError(
                code="launch_feed_unavailable",
                message="Launch schedule feed returned an error status",
                details={"upstream": "launch_feed", "http_status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "feed.unreachable",
                extra={"url": self.url, "error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise UpstreamAppError(
                code="launch_feed_unavailable",
                message="Launch schedule feed could not be reached",
                details={"upstream": "launch_feed"},
            ) from exc

        try:
            records = LaunchFeedPayload.validate_json(response.content)
        except ValidationError as exc:
            logger.error(
                "feed.invalid_payload",
                extra={"url": self.url, "error_count": exc.error_count()},
            )
            raise UpstreamAppError(
                code="launch_feed_invalid",
                message="Launch schedule feed returned an unreadable payload",
                details={"upstream": "launch_feed"},
            ) from exc

        logger.info("feed.fetched", extra={"url": self.url, "record_count": len(records)})
        return records

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
