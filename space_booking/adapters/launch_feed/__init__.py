"""Launch schedule feed adapters - abstract over where launches come from."""

from space_booking.adapters.launch_feed.base import AbstractLaunchFeed
from space_booking.adapters.launch_feed.http_feed import HttpLaunchFeed

__all__ = [
    "AbstractLaunchFeed",
    "HttpLaunchFeed",
]
