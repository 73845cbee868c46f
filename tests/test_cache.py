from redis.exceptions import ConnectionError as RedisConnectionError

from ggbench.util.cache import RedisCache, build_cache, cached_json
from ggbench.util.redis import get_redis_pool


class BrokenRedis:
    def get(self, key):
        raise RedisConnectionError("connection refused")

    def set(self, key, value, ex=None):
        raise RedisConnectionError("connection refused")

    def delete(self, *keys):
        raise RedisConnectionError("connection refused")


class DictRedis:
    def __init__(self):
        self.values = {}
        self.expiry = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None):
        self.values[key] = value
        self.expiry[key] = ex

    def delete(self, *keys):
        for key in keys:
            self.values.pop(key, None)


def test_redis_failures_are_misses():
    cache = RedisCache(BrokenRedis())

    assert cache.get_json("leaderboard:p5js:*") is None
    cache.set_json("leaderboard:p5js:*", [1, 2, 3], 60)
    cache.delete("leaderboard:p5js:*")


def test_cached_json_survives_broken_cache():
    cache = RedisCache(BrokenRedis())
    calls = []

    def producer():
        calls.append(1)
        return {"ok": True}

    assert cached_json(cache, "key", 60, producer) == {"ok": True}
    assert cached_json(cache, "key", 60, producer) == {"ok": True}
    assert len(calls) == 2


def test_redis_cache_stores_with_ttl():
    client = DictRedis()
    cache = RedisCache(client)

    cache.set_json("key", {"entries": [1]}, ttl_seconds=45)

    assert client.expiry["key"] == 45
    assert cache.get_json("key") == {"entries": [1]}

    cache.delete("key")
    assert cache.get_json("key") is None


def test_undecodable_entry_is_a_miss():
    client = DictRedis()
    client.values["key"] = b"not json{"

    assert RedisCache(client).get_json("key") is None


def test_cached_json_without_cache_always_produces():
    calls = []

    def producer():
        calls.append(1)
        return len(calls)

    assert cached_json(None, "key", 60, producer) == 1
    assert cached_json(None, "key", 60, producer) == 2


def test_build_cache_disabled_without_redis_host(monkeypatch):
    monkeypatch.delenv("REDIS_HOST", raising=False)
    assert build_cache() is None


def test_build_cache_with_redis_host(monkeypatch):
    host = "redis.internal"
    monkeypatch.setenv("REDIS_HOST", host)
    get_redis_pool.cache_clear()

    cache = build_cache()
    get_redis_pool.cache_clear()

    assert isinstance(cache, RedisCache)
    assert cache.client.connection_pool.connection_kwargs["host"] == host
