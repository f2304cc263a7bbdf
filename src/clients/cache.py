"""
Response caches for provider requests.

Two tiers, both optional for correctness:
- run cache: per-resolution-run memo keyed by exact URL
- global cache: longer-lived, TTL-bound, explicitly clearable

CachingTransport writes only complete 2xx GET responses, so a failed or
cancelled request never leaves an entry behind.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from src.clients.http import HttpResponse, TransportProtocol
from src.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class CacheProtocol(Protocol):
    """Protocol for cache implementations."""

    def get(self, key: str) -> Any | None:
        """Return the cached value or None."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store a value, optionally expiring after ttl_seconds."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...


# =============================================================================
# Implementations
# =============================================================================


class MemoryCache:
    """In-process dict cache with optional per-entry TTL.

    Attributes:
        default_ttl: TTL applied when set() gets none; None never expires
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that stores nothing."""

    def get(self, key: str) -> Any | None:  # noqa: ARG002
        return None

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:  # noqa: ARG002
        return None

    def clear(self) -> None:
        return None


# =============================================================================
# Caching decorator for transports
# =============================================================================


class CachingTransport:
    """Transport decorator memoizing successful GET responses by URL.

    Lookup order is run cache, then global cache. Entries are keyed by URL
    only, so a transport shared between credentials must not be cached.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        run_cache: CacheProtocol | None = None,
        global_cache: CacheProtocol | None = None,
        ttl_seconds: float | None = None,
    ) -> None:
        self._transport = transport
        self._run_cache = run_cache if run_cache is not None else NullCache()
        self._global_cache = global_cache if global_cache is not None else NullCache()
        self._ttl_seconds = ttl_seconds

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        if method.upper() != "GET":
            return await self._transport.request(method, url, headers=headers, body=body)

        cached = self._run_cache.get(url)
        if cached is None:
            cached = self._global_cache.get(url)
            if cached is not None:
                self._run_cache.set(url, cached)
        if cached is not None:
            logger.debug("http_cache_hit", url=url)
            return cached

        response = await self._transport.request(method, url, headers=headers, body=body)
        if response.ok:
            self._run_cache.set(url, response)
            self._global_cache.set(url, response, self._ttl_seconds)
        return response

    def clear(self) -> None:
        """Clear both cache tiers."""
        self._run_cache.clear()
        self._global_cache.clear()

    async def close(self) -> None:
        """Close the wrapped transport when it holds resources."""
        closer = getattr(self._transport, "close", None)
        if closer is not None:
            await closer()
