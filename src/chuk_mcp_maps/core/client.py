"""
Low-level async HTTP client shared by the map providers.

Handles optional rate limiting, caching of GET responses, and retries.
"""

import asyncio
import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

import httpx

from ..constants import ApiClientConfig, ErrorMessages

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached API response with timestamp."""

    data: Any
    timestamp: float


class ApiClient:
    """Async HTTP client for one upstream web service.

    Features:
    - Optional minimum interval between requests (Nominatim asks for 1/s)
    - LRU cache with TTL for GET requests
    - Retry with exponential backoff on 429/503
    - Automatic User-Agent and default headers
    """

    def __init__(
        self,
        base_url: str,
        service_name: str,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        min_interval: float = 0.0,
        user_agent: str = ApiClientConfig.USER_AGENT,
        cache_enabled: bool = True,
    ):
        self._base_url = base_url.rstrip("/")
        self._service_name = service_name
        self._headers = {"User-Agent": user_agent, **(headers or {})}
        self._params = dict(params or {})
        self._min_interval = min_interval
        self._cache_enabled = cache_enabled
        self._last_request_time: float = 0.0
        self._rate_lock = asyncio.Lock()
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazily create httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self._headers,
                timeout=ApiClientConfig.TIMEOUT_SECONDS,
            )
        return self._client

    async def _rate_limit(self) -> None:
        """Enforce minimum delay between requests."""
        if self._min_interval <= 0:
            return
        async with self._rate_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    def _cache_key(self, path: str, params: dict) -> str:
        """Generate cache key from path + normalized sorted params."""
        normalized = {}
        for k, v in params.items():
            if isinstance(v, str):
                v = " ".join(v.lower().split())
            normalized[k] = v
        raw = f"{path}:{json.dumps(normalized, sort_keys=True, default=str)}"
        return hashlib.md5(raw.encode(), usedforsecurity=False).hexdigest()  # noqa: S324

    def _cache_get(self, key: str) -> Any | None:
        """Get from cache if not expired."""
        if key not in self._cache:
            return None
        entry = self._cache[key]
        if time.time() - entry.timestamp > ApiClientConfig.CACHE_TTL_SECONDS:
            del self._cache[key]
            return None
        self._cache.move_to_end(key)
        return entry.data

    def _cache_put(self, key: str, data: Any) -> None:
        """Put into cache, evicting oldest if over max size."""
        if key in self._cache:
            self._cache.move_to_end(key)
        elif len(self._cache) >= ApiClientConfig.CACHE_MAX_SIZE:
            self._cache.popitem(last=False)
        self._cache[key] = CacheEntry(data=data, timestamp=time.time())

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying on retryable status codes."""
        client = await self._get_client()

        for attempt in range(ApiClientConfig.MAX_RETRIES + 1):
            await self._rate_limit()
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.ConnectError as e:
                raise ConnectionError(
                    ErrorMessages.NETWORK_ERROR.format(self._service_name, e)
                ) from e
            except httpx.TimeoutException as e:
                raise ConnectionError(
                    ErrorMessages.NETWORK_ERROR.format(self._service_name, e)
                ) from e

            if (
                response.status_code in ApiClientConfig.RETRYABLE_STATUS_CODES
                and attempt < ApiClientConfig.MAX_RETRIES
            ):
                delay = ApiClientConfig.RETRY_BASE_DELAY * (2**attempt)
                logger.warning(
                    "%s %d, retrying in %.1fs (attempt %d/%d)",
                    self._service_name,
                    response.status_code,
                    delay,
                    attempt + 1,
                    ApiClientConfig.MAX_RETRIES,
                )
                await asyncio.sleep(delay)
                continue
            break

        if response.status_code == 429:
            raise RuntimeError(ErrorMessages.RATE_LIMITED.format(self._service_name))
        if response.status_code >= 400:
            raise RuntimeError(
                ErrorMessages.API_ERROR.format(
                    self._service_name, response.status_code, response.text[:200]
                )
            )
        return response

    async def get(self, path: str, params: dict | None = None) -> Any:
        """Make a cached GET request and return the decoded JSON body."""
        params = {**self._params, **(params or {})}
        cache_key = self._cache_key(path, params)
        if self._cache_enabled:
            cached = self._cache_get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s %s", self._service_name, path)
                return cached

        response = await self._send("GET", f"{self._base_url}{path}", params=params)
        data = response.json()
        if self._cache_enabled:
            self._cache_put(cache_key, data)
        return data

    async def post(
        self,
        path: str,
        json_body: Any = None,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make an uncached POST request and return the decoded JSON body."""
        kwargs: dict[str, Any] = {"params": self._params or None, "headers": headers}
        if content is not None:
            kwargs["content"] = content
        else:
            kwargs["json"] = json_body
        response = await self._send("POST", f"{self._base_url}{path}", **kwargs)
        return response.json()

    @property
    def cache_entries(self) -> int:
        """Number of entries in the response cache."""
        return len(self._cache)

    async def close(self) -> None:
        """Close the httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
