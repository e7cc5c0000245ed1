from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from app.integrations.billing import RemoteStatusClient, StatusResult, StatusSource
from app.services.status_cache import StatusCache

logger = logging.getLogger(__name__)


class SubscriptionResolver:
    """Cache-aside lookup of subscription status with stale fallback.

    This is the only place a BillingError may be suppressed, and only by
    substituting the last stored value for the same user.
    """

    def __init__(self, client: RemoteStatusClient, cache: StatusCache, ttl_seconds: float):
        self.client = client
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}
        # bumped on invalidation; fetches begun under an older value must not
        # refill the cache or satisfy a lookup made after the invalidation
        self._generations: Dict[int, int] = {}

    async def resolve(self, user_id: int) -> StatusResult:
        cached = self._cached(user_id)
        if cached is not None:
            return cached

        logger.info("Cache miss for user %s, calling billing service", user_id)
        generation = self._generation(user_id)
        async with self._key_lock(user_id):
            # another task may have filled the entry while we waited
            if self._generation(user_id) == generation:
                cached = self._cached(user_id)
                if cached is not None:
                    return cached
            return await self._fetch_and_store(user_id)

    async def force_refresh(self, user_id: int) -> StatusResult:
        logger.info("Forced refresh of subscription status for user %s", user_id)
        return await self._fetch_and_store(user_id)

    def invalidate_cache(self, user_id: int) -> bool:
        self._generations[user_id] = self._generation(user_id) + 1
        cleared = self.cache.invalidate(user_id)
        logger.info("Subscription cache cleared for user %s (had entry: %s)", user_id, cleared)
        return cleared

    def _cached(self, user_id: int) -> StatusResult | None:
        value = self.cache.read(user_id)
        if value is None:
            return None
        logger.info("Using cached subscription status for user %s", user_id)
        return StatusResult.success(value, source=StatusSource.CACHE)

    def _generation(self, user_id: int) -> int:
        return self._generations.get(user_id, 0)

    async def _fetch_and_store(self, user_id: int) -> StatusResult:
        generation = self._generation(user_id)
        result = await self.client.fetch(user_id)

        if result.ok:
            if self._generation(user_id) != generation:
                logger.info("Cache cleared for user %s during fetch, not caching result", user_id)
                return result
            self.cache.write(user_id, result.status, self.ttl_seconds)
            logger.info("Cached fresh subscription status for user %s", user_id)
            return result

        error = result.error
        logger.error(
            "Billing service error for user %s: [%s] %s",
            user_id,
            error.kind.value,
            error.message,
        )
        stale = self.cache.read_stale(user_id)
        if stale is None:
            return result

        logger.warning("Serving stale subscription status for user %s", user_id)
        return StatusResult.success(stale, source=StatusSource.STALE)

    @asynccontextmanager
    async def _key_lock(self, user_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]
