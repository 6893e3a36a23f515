from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Hashable, Optional, Tuple

import httpx
from cachetools import TTLCache

from salonbook.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[Tuple[str, Hashable], ...]]
_MISSING = object()


def _cache_key(path: str, params: Dict[str, Any] | None) -> CacheKey:
    items = tuple(sorted((key, str(value)) for key, value in (params or {}).items()))
    return path, items


def _server_message(response: httpx.Response) -> Optional[str]:
    """Error text the booking API put in the body, if any."""

    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        for field in ("error", "detail", "message"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value
    return None


class BookingApiClient:
    """Async HTTP client for the remote booking REST API.

    GET responses are cached per request key (path plus sorted params) for
    ``cache_ttl`` seconds, at most ``cache_maxsize`` of them, so the same shift
    or appointment list is not fetched twice. Mutations invalidate the
    prefixes they touch.
    """

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        token: str | None = None,
        cache_enabled: bool = True,
        cache_ttl: float = 30.0,
        cache_maxsize: int = 512,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._cache_enabled = cache_enabled
        self._cache: TTLCache = TTLCache(maxsize=cache_maxsize, ttl=cache_ttl)
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def invalidate(self, *prefixes: str) -> int:
        """Drop cached GET responses whose path starts with any prefix."""

        if not prefixes:
            dropped = len(self._cache)
            self._cache.clear()
            return dropped
        self._cache.expire()
        stale = [key for key in list(self._cache.keys()) if key[0].startswith(prefixes)]
        for key in stale:
            self._cache.pop(key, None)
        if stale:
            logger.debug("Invalidated %s cached responses for %s", len(stale), prefixes)
        return len(stale)

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        if self.use_mock_data:
            raise RuntimeError("Real HTTP call requested while mock mode is enabled")
        client = await self._ensure_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            message = _server_message(exc.response) or "Booking API returned an error response"
            logger.exception("Booking API returned error %s for %s %s", status_code, method, path)
            raise DownstreamServiceError(message, status_code=status_code, cause=exc) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach booking API: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach booking API", status_code=None, cause=exc
            ) from exc

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.exception("Booking API sent a non-JSON body for %s %s", method, path)
            raise DownstreamServiceError(
                "Booking API returned an unreadable response",
                status_code=response.status_code,
                cause=exc,
            ) from exc

    async def get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        key = _cache_key(path, params)
        if self._cache_enabled:
            cached = self._cache.get(key, _MISSING)
            if cached is not _MISSING:
                logger.debug("Cache hit for %s %s", path, params)
                return cached
        data = await self._send("GET", path, params=params)
        if self._cache_enabled:
            self._cache[key] = data
        return data

    async def post(self, path: str, payload: Any) -> Any:
        logger.info("POST %s", path)
        return await self._send("POST", path, json=payload)

    async def patch(self, path: str, payload: Dict[str, Any]) -> Any:
        logger.info("PATCH %s", path)
        return await self._send("PATCH", path, json=payload)

    async def simulate_latency(self) -> None:
        """Allow services to await for latency even when mocking responses."""

        await asyncio.sleep(0)
