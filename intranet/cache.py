import json
import logging
from typing import Awaitable, Callable

import redis.asyncio as redis

from intranet.config import settings

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[dict | list | None]]


class CacheManager:
    """
    Redis-backed cache for read-mostly lookups (organizations, event options).

    When Redis is not connected every read is a miss and every write is a
    no-op, so services always have the database as the source of truth.
    Values are stored as JSON.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits = 0
        self._misses = 0

    @property
    def connected(self) -> bool:
        return self._redis is not None

    async def connect(self) -> None:
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis at %s unreachable, caching off: %s", settings.REDIS_URL, exc)
            await client.aclose()
            return
        self._redis = client
        logger.info("Redis connected: %s", settings.REDIS_URL)

    async def disconnect(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        raw = None
        if self._redis is not None:
            try:
                raw = await self._redis.get(key)
            except Exception as exc:
                logger.debug("cache read failed key=%r: %s", key, exc)
        if raw is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(raw)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("cache write failed key=%r: %s", key, exc)

    async def get_or_load(self, key: str, loader: Loader, ttl: int | None = None) -> dict | list | None:
        """
        Return the cached value for *key*, calling *loader* on a miss.

        A loader result of None (nothing found) is returned but not cached.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await loader()
        if value is not None:
            await self.set(key, value, ttl=ttl)
        return value

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching *pattern* (SCAN based); returns the count."""
        if self._redis is None:
            return 0
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
        except Exception as exc:
            logger.debug("cache invalidation failed pattern=%r: %s", pattern, exc)
            return 0
        logger.debug("cache invalidated %d key(s) for %r", len(keys), pattern)
        return len(keys)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    @staticmethod
    def organization_key(organization_id: int) -> str:
        return f"organizations:detail:{organization_id}"

    @staticmethod
    def event_options_key(event_id: str, organization_id: int) -> str:
        return f"events:options:{event_id}:{organization_id}"

    async def invalidate_event(self, event_id: str) -> None:
        await self.delete_pattern(f"events:options:{event_id}:*")

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "connected": self.connected,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total else 0.0,
        }


cache = CacheManager()
