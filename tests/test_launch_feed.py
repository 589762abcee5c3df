"""Tests for the HTTP launch feed adapter."""

import json

import httpx
import pytest

from space_booking.adapters.launch_feed.http_feed import HttpLaunchFeed
from space_booking.core.errors import UpstreamAppError

FEED_URL = "http://feed.test/v4/launches"

SPACEX_LAUNCHES = [
    {
        "launchpad": "5e9e4501f509094ba4566f84",
        "name": "CRS-20",
        "date_local": "2020-03-06T23:50:00-05:00",
        "date_utc": "2020-03-07T04:50:00.000Z",
        "id": "5eb87d42ffd86e000604b384",
        "success": True,
        "rocket": "5e9d0d95eda69973a809d1ec",
    },
    {
        "launchpad": "5e9e4502f509092b78566f87",
        "name": "Starlink-4",
        "date_local": None,
        "id": "5eb87d43ffd86e000604b385",
    },
]


def _feed(handler) -> HttpLaunchFeed:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpLaunchFeed(FEED_URL, client=client)


@pytest.mark.asyncio
async def test_fetch_decodes_launch_records() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=SPACEX_LAUNCHES)

    records = await _feed(handler).fetch_launches()

    assert len(requests) == 1
    assert requests[0].method == "GET"
    assert str(requests[0].url) == FEED_URL
    assert records[0].site_id == "5e9e4501f509094ba4566f84"
    assert records[0].name == "CRS-20"
    assert records[0].timestamp_local == "2020-03-06T23:50:00-05:00"
    assert records[0].record_id == "5eb87d42ffd86e000604b384"
    # Null timestamps survive decoding; the resolver skips them later
    assert records[1].timestamp_local is None


@pytest.mark.asyncio
async def test_empty_feed_is_valid() -> None:
    records = await _feed(lambda request: httpx.Response(200, json=[])).fetch_launches()
    assert records == []


@pytest.mark.asyncio
async def test_error_status_raises_upstream_error() -> None:
    feed = _feed(lambda request: httpx.Response(503, text="maintenance"))

    with pytest.raises(UpstreamAppError) as exc_info:
        await feed.fetch_launches()

    assert exc_info.value.code == "launch_feed_unavailable"
    assert exc_info.value.details["http_status"] == 503


@pytest.mark.asyncio
async def test_transport_error_raises_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamAppError) as exc_info:
        await _feed(handler).fetch_launches()

    assert exc_info.value.code == "launch_feed_unavailable"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b"<html>not json</html>",
        json.dumps({"launches": []}).encode(),
        json.dumps(["not-an-object"]).encode(),
        json.dumps([{"launchpad": 42, "date_local": "2020-03-06T23:50:00-05:00"}]).encode(),
    ],
)
async def test_unreadable_payload_raises_upstream_error(body: bytes) -> None:
    feed = _feed(lambda request: httpx.Response(200, content=body))

    with pytest.raises(UpstreamAppError) as exc_info:
        await feed.fetch_launches()

    assert exc_info.value.code == "launch_feed_invalid"


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
    feed = HttpLaunchFeed(FEED_URL, client=client)

    await feed.aclose()

    assert client.is_closed is False
    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_client() -> None:
    feed = HttpLaunchFeed(FEED_URL, timeout_seconds=1.0)

    await feed.aclose()

    assert feed.client.is_closed is True
