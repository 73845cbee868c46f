import os
from functools import lru_cache

from redis import ConnectionPool, SSLConnection, StrictRedis


class RedisDatabase:
    CACHE = 1


def redis_configured():
    return bool(os.environ.get("REDIS_HOST"))


@lru_cache
def get_redis_pool(database: int, **kwargs) -> ConnectionPool:
    kwargs["host"] = kwargs.get("host", os.environ.get("REDIS_HOST", "localhost"))
    kwargs["port"] = int(kwargs.get("port", os.environ.get("REDIS_PORT", 6379)))

    kwargs["db"] = database

    kwargs.setdefault("socket_timeout", 2)
    kwargs.setdefault("socket_connect_timeout", 2)

    if os.environ.get("REDIS_USE_AUTH", "false") == "true":
        kwargs["password"] = os.environ["REDIS_PASSWORD"]
        kwargs["username"] = os.environ["REDIS_USERNAME"]

    if os.environ.get("REDIS_USE_SSL", "false") == "true":
        kwargs["connection_class"] = SSLConnection
        kwargs["ssl_cert_reqs"] = "none"

    return ConnectionPool(**kwargs)


def get_redis_client(database: int = RedisDatabase.CACHE, **kwargs) -> StrictRedis:
    pool = get_redis_pool(database, **kwargs)
    return StrictRedis(connection_pool=pool)
