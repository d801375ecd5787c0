"""
Redis client - caching for the item catalog.
Challenge: Connection pooling, fail gracefully when Redis is down.
Design: Single client instance, dependency injection for testability.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from auction_house.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    """Lazily create the shared client; connections open on first command."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis


async def close_redis() -> None:
    """Release the pool on shutdown."""
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


async def cache_get(key: str) -> str | None:
    """Get value from cache. Returns None if miss or error (graceful degradation)."""
    try:
        client = await get_redis()
        return await client.get(key)
    except Exception as e:
        logger.debug("cache_get failed: key=%s error=%s", key, e)
        return None


async def cache_set(key: str, value: str | dict[str, Any], ttl_seconds: int | None = None) -> bool:
    """Set value in cache with TTL (defaults to the catalog TTL). Dict is JSON-serialized."""
    try:
        client = await get_redis()
        if isinstance(value, dict):
            value = json.dumps(value)
        await client.setex(key, ttl_seconds or settings.item_cache_ttl_seconds, value)
        return True
    except Exception as e:
        logger.debug("cache_set failed: key=%s error=%s", key, e)
        return False


async def cache_delete(key: str) -> bool:
    """Invalidate cache key (e.g. after item deletion)."""
    try:
        client = await get_redis()
        await client.delete(key)
        return True
    except Exception as e:
        logger.debug("cache_delete failed: key=%s error=%s", key, e)
        return False
