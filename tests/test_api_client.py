import asyncio
import os
import sys
from typing import List

import httpx
import pytest
from cachetools import TTLCache

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from salonbook.clients.api import BookingApiClient
from salonbook.services.exceptions import DownstreamServiceError


BASE_URL = "https://booking.example.test/api"


def _client_with_transport(handler, *, cache_enabled: bool = True) -> BookingApiClient:
    client = BookingApiClient(BASE_URL, use_mock_data=False, token="secret", cache_enabled=cache_enabled)
    client._client = httpx.AsyncClient(
        base_url=BASE_URL,
        headers=client._headers,
        transport=httpx.MockTransport(handler),
    )
    return client


def test_get_responses_are_cached_until_invalidated() -> None:
    seen: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(200, json=[{"id": len(seen)}])

    async def scenario() -> None:
        client = _client_with_transport(handler)
        first = await client.get("/shifts", params={"month": "2026-01-01", "branch_id": 10})
        second = await client.get("/shifts", params={"branch_id": 10, "month": "2026-01-01"})
        assert first == second
        assert len(seen) == 1

        await client.get("/appointments", params={"employee_ids": "1", "date": "2026-01-30"})
        assert client.invalidate("/shifts") == 1
        refreshed = await client.get("/shifts", params={"branch_id": 10, "month": "2026-01-01"})
        assert refreshed == [{"id": 3}]
        assert len(seen) == 3

        assert client.invalidate() == 2
        await client.close()

    asyncio.run(scenario())


def test_cache_can_be_disabled() -> None:
    calls: List[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(200, json=[])

    async def scenario() -> None:
        client = _client_with_transport(handler, cache_enabled=False)
        await client.get("/companies")
        await client.get("/companies")
        await client.close()

    asyncio.run(scenario())
    assert len(calls) == 2


def test_expired_cache_entry_is_fetched_again() -> None:
    calls: List[int] = []
    now = [0.0]

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(200, json=[{"call": len(calls)}])

    async def scenario() -> None:
        client = _client_with_transport(handler)
        client._cache = TTLCache(maxsize=8, ttl=30, timer=lambda: now[0])
        assert await client.get("/employees") == [{"call": 1}]
        now[0] = 29.0
        assert await client.get("/employees") == [{"call": 1}]
        now[0] = 31.0
        assert await client.get("/employees") == [{"call": 2}]
        await client.close()

    asyncio.run(scenario())
    assert len(calls) == 2


def test_cache_is_bounded() -> None:
    calls: List[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(200, json=[])

    async def scenario() -> None:
        client = BookingApiClient(BASE_URL, use_mock_data=False, cache_maxsize=2)
        client._client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        for day in ("2026-01-30", "2026-01-31", "2026-02-01"):
            await client.get("/appointments", params={"date": day})
        assert len(client._cache) == 2
        await client.close()

    asyncio.run(scenario())
    assert len(calls) == 3


def test_non_json_success_body_is_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    async def scenario() -> None:
        client = _client_with_transport(handler)
        try:
            await client.get("/companies")
        finally:
            await client.close()

    with pytest.raises(DownstreamServiceError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 200
    assert str(exc_info.value) == "Booking API returned an unreadable response"


def test_error_response_uses_server_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "Slot already taken"})

    async def scenario() -> None:
        client = _client_with_transport(handler)
        try:
            await client.post("/bookings", {"employee_id": 1})
        finally:
            await client.close()

    with pytest.raises(DownstreamServiceError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 409
    assert str(exc_info.value) == "Slot already taken"


def test_error_response_without_message_uses_fallback() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"code": 17})

    async def scenario() -> None:
        client = _client_with_transport(handler)
        try:
            await client.get("/employees")
        finally:
            await client.close()

    with pytest.raises(DownstreamServiceError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "Booking API returned an error response"


def test_transport_failure_is_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario() -> None:
        client = _client_with_transport(handler)
        try:
            await client.get("/companies")
        finally:
            await client.close()

    with pytest.raises(DownstreamServiceError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code is None


def test_mock_mode_never_sends_requests() -> None:
    client = BookingApiClient(None)

    assert client.use_mock_data is True
    with pytest.raises(RuntimeError):
        asyncio.run(client.get("/companies"))
