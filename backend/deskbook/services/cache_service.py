"""
Redis caching service for analytics summaries.

CACHING STRATEGY
================

What we cache:
  - Analytics summary responses (JSON-serialized, camelCase payload)
  - Key pattern: "analytics:summary:from={from|auto}&to={to|auto}"

Why:
  - A summary scans every booking and cancellation ever recorded
  - Dashboards poll it; the underlying data only changes on booking writes

Invalidation strategy:
  - Any booking creation or cancellation deletes every "analytics:*" key
  - TTL-based expiry as safety net; it also covers "auto" ranges that depend
    on today's date when there is no data yet

Redis is advisory: when it is disabled or unreachable every call degrades to
a cache miss and the summary is computed from the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from deskbook.core.config import get_settings
from deskbook.core.logging import get_logger
from deskbook.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

ANALYTICS_PREFIX = "analytics:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

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


def make_summary_key(date_from: Optional[str], date_to: Optional[str]) -> str:
    return f"{ANALYTICS_PREFIX}summary:from={date_from or 'auto'}&to={date_to or 'auto'}"


async def get_cached_summary(date_from: Optional[str], date_to: Optional[str]) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    key = make_summary_key(date_from, date_to)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=bool(data))
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_summary(
    date_from: Optional[str],
    date_to: Optional[str],
    data: dict,
) -> None:
    client = await get_redis()
    if not client:
        return

    key = make_summary_key(date_from, date_to)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_analytics_cache() -> None:
    """Drop every cached summary after bookings change."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{ANALYTICS_PREFIX}*", count=100):
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
