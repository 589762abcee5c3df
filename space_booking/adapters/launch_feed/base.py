from abc import ABC, abstractmethod

from space_booking.schemas.launch import ExternalLaunchRecord


class AbstractLaunchFeed(ABC):
    """Interface for read-only sources of the external launch schedule."""

    @abstractmethod
    async def fetch_launches(self) -> list[ExternalLaunchRecord]:
        """Fetch every launch record known to the feed.

        The feed is not filterable; callers receive all sites and dates.

        Returns:
            list[ExternalLaunchRecord]: Records as published, timestamps unparsed.

        Raises:
            UpstreamAppError: If the feed cannot be reached or its payload is
                not a list of launch records.
        """
        ...

    async def aclose(self) -> None:
        """Release any held connections."""
        return None
