"""
Redis caching for calendar listings.

CACHING STRATEGY
================

What we cache:
  - Calendar responses (approved, live bookings in a date range), JSON-serialized
  - Cache key pattern: "calendar:start={start}&end={end}"

Invalidation:
  - Any booking write (submission, approval, rejection, deletion) deletes
    every "calendar:*" key
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Redis is optional. When it is disabled or unreachable every function here
degrades to a no-op and the calendar is read from the gateway.
"""

import json
from datetime import date
from typing import Optional

import redis.asyncio as redis
from riding_club.core.config import get_settings
from riding_club.core.logging import get_logger
from riding_club.core.metrics import record_cache_operation

logger = get_logger(__name__)

CALENDAR_PREFIX = "calendar:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client
    settings = get_settings()

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_calendar_key(start: Optional[date], end: Optional[date]) -> str:
    start_part = start.isoformat() if start else "*"
    end_part = end.isoformat() if end else "*"
    return f"{CALENDAR_PREFIX}start={start_part}&end={end_part}"


async def get_cached_calendar(start: Optional[date], end: Optional[date]) -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

    key = _make_calendar_key(start, end)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_calendar(start: Optional[date], end: Optional[date], data: list) -> None:
    client = await get_redis()
    if not client:
        return

    ttl = get_settings().REDIS_CACHE_TTL
    key = _make_calendar_key(start, end)
    try:
        await client.setex(key, ttl, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=ttl)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_calendar_cache() -> None:
    """Delete every cached calendar range."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{CALENDAR_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
