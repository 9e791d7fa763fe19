"""Redis-backed store holding vessel positions."""

from aishub_ws.cache.redis_client import (
    RedisClient,
    close_redis_client,
    get_redis_client,
    get_self_position,
    init_redis_client,
    set_self_position,
)

__all__ = [
    "RedisClient",
    "close_redis_client",
    "get_redis_client",
    "get_self_position",
    "init_redis_client",
    "set_self_position",
]
