"""Redis cache service for provider offer snapshots."""

import hashlib
import json
import logging
from typing import Any

import redis.asyncio as redis

from truefare.config import settings
from truefare.schemas.search import SearchParams

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_SEARCH_OFFERS = settings.search_cache_ttl   # provider prices are volatile
TTL_EXPLANATION = 30 * 60                       # 30 minutes — LLM deal explanations


class CacheService:
    """Redis-backed cache with typed TTLs. Every failure degrades to a miss."""

    def __init__(self, url: str | None = None):
        self._url = url or settings.redis_url
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    self._url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.debug(f"Cache get failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = TTL_SEARCH_OFFERS) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception as e:
            logger.debug(f"Cache set failed for {key}: {e}")
            return False

    # Typed helpers

    def search_key(self, params: SearchParams) -> str:
        return f"offers:{params.cache_key()}"

    def explanation_key(self, bundle_payload: dict) -> str:
        digest = hashlib.sha256(json.dumps(bundle_payload, sort_keys=True, default=str).encode("utf-8")).hexdigest()
        return f"explain:{digest}"

    async def get_offers(self, params: SearchParams) -> dict | None:
        return await self.get(self.search_key(params))

    async def set_offers(self, params: SearchParams, snapshot: dict):
        await self.set(self.search_key(params), snapshot, TTL_SEARCH_OFFERS)

    async def get_explanation(self, bundle_payload: dict) -> str | None:
        return await self.get(self.explanation_key(bundle_payload))

    async def set_explanation(self, bundle_payload: dict, text: str):
        await self.set(self.explanation_key(bundle_payload), text, TTL_EXPLANATION)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
