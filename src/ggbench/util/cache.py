"""
Caching utilities for GGBench.

The cache is best-effort: every failure is logged and treated as a miss so
that callers never depend on it for correctness.
"""

import json
from typing import Any, Optional

from redis import RedisError, StrictRedis

from .logging import get_logger
from .redis import RedisDatabase, get_redis_client, redis_configured

logger = get_logger(__name__)


class Cache:
    """TTL-aware JSON cache interface."""

    def get_json(self, key: str) -> Optional[Any]:
        raise NotImplementedError()

    def set_json(self, key: str, value: Any, ttl_seconds: Optional[int] = None):
        raise NotImplementedError()

    def delete(self, *keys: str):
        raise NotImplementedError()

    def close(self):
        pass


class RedisCache(Cache):
    def __init__(self, client: StrictRedis):
        self.client = client

    def get_json(self, key):
        try:
            value = self.client.get(key)
        except RedisError:
            logger.warning("Cache read failed", key=key, exc_info=True)
            return None

        if value is None:
            return None

        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Discarding undecodable cache entry", key=key)
            return None

    def set_json(self, key, value, ttl_seconds=None):
        payload = json.dumps(value, default=str)
        try:
            if ttl_seconds and ttl_seconds > 0:
                self.client.set(key, payload, ex=ttl_seconds)
            else:
                self.client.set(key, payload)
        except RedisError:
            logger.warning("Cache write failed", key=key, exc_info=True)

    def delete(self, *keys):
        if not keys:
            return
        try:
            self.client.delete(*keys)
        except RedisError:
            logger.warning("Cache invalidation failed", keys=keys, exc_info=True)

    def close(self):
        self.client.close()


def build_cache() -> Optional[Cache]:
    """Construct the process-wide cache, or None when Redis is not configured."""
    if not redis_configured():
        logger.info("Redis not configured, caching disabled")
        return None

    logger.info("Redis cache enabled")
    return RedisCache(get_redis_client(RedisDatabase.CACHE))


def cached_json(cache: Optional[Cache], key: str, ttl_seconds: int, producer):
    """Read-through helper: return the cached value or produce and store it."""
    if cache is not None:
        cached = cache.get_json(key)
        if cached is not None:
            return cached

    value = producer()

    if cache is not None:
        cache.set_json(key, value, ttl_seconds)

    return value
