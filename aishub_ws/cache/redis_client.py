"""Redis position store.

Holds the latest ``navigation.position`` of Signal K vessel contexts in
the same ``{"value": ..., "timestamp": ...}`` shape Signal K uses for
path values. The AisHub poller reads the own vessel position from here.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from aishub_ws.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

POSITION_KEY_PREFIX = "signalk:position:"

# Positions older than this are treated as unknown
POSITION_TTL = 300


def position_key(context: str) -> str:
    return f"{POSITION_KEY_PREFIX}{context}"


class RedisClient:
    """Redis client with connection pooling for position lookups."""

    def __init__(self, redis_url: str):
        """Initialize Redis client.

        Args:
            redis_url: Redis connection URL
        """
        self.redis_url = redis_url
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._is_connected = False

    async def connect(self) -> None:
        """Connect and verify the server answers."""
        if self._is_connected:
            return

        try:
            self._pool = ConnectionPool.from_url(
                self.redis_url,
                max_connections=10,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)

            await self._client.ping()
            self._is_connected = True
            logger.info(f"Connected to Redis position store at {self.redis_url}")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

        if self._pool:
            await self._pool.disconnect()
            self._pool = None

        self._is_connected = False
        logger.info("Redis position store disconnected")

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    async def health_check(self) -> bool:
        """Ping Redis.

        Returns:
            True if healthy, False otherwise
        """
        if not self._client:
            return False

        try:
            await self._client.ping()
            return True
        except Exception:
            return False

    async def set_position(
        self,
        context: str,
        latitude: float,
        longitude: float,
        timestamp: Optional[datetime] = None,
        ttl: int = POSITION_TTL,
    ) -> bool:
        """Store the position of a vessel context.

        Args:
            context: Signal K context (e.g. ``vessels.urn:mrn:imo:mmsi:123456789``)
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            timestamp: Time of the fix (default: now)
            ttl: Seconds until the position expires

        Returns:
            True if stored
        """
        if not self._client:
            return False

        fix_time = timestamp or datetime.utcnow()
        data = {
            "value": {"latitude": latitude, "longitude": longitude},
            "timestamp": fix_time.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        }

        try:
            await self._client.setex(position_key(context), ttl, json.dumps(data))
            return True
        except Exception as e:
            logger.error(f"Failed to store position of {context}: {e}")
            return False

    async def get_position(self, context: str) -> Optional[dict[str, Any]]:
        """Get the stored position of a vessel context.

        Returns:
            ``{"value": {...}, "timestamp": ...}`` or None if unknown
        """
        if not self._client:
            return None

        try:
            data = await self._client.get(position_key(context))
            return json.loads(data) if data else None
        except Exception as e:
            logger.error(f"Failed to read position of {context}: {e}")
            return None

    async def get_stats(self) -> dict[str, Any]:
        if not self._client:
            return {"status": "disconnected"}

        try:
            info = await self._client.info()
            return {
                "status": "connected",
                "used_memory": info.get("used_memory_human"),
                "connected_clients": info.get("connected_clients"),
            }
        except Exception as e:
            return {"status": "error", "error": str(e)}


# Global Redis client instance
_redis_client: Optional[RedisClient] = None


async def init_redis_client() -> RedisClient:
    """Initialize the global Redis client.

    Returns:
        Connected RedisClient instance
    """
    global _redis_client

    if _redis_client is None:
        client = RedisClient(settings.redis_url)
        await client.connect()
        _redis_client = client

    return _redis_client


async def close_redis_client() -> None:
    global _redis_client

    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None


def get_redis_client() -> Optional[RedisClient]:
    """Get the global Redis client, or None before start-up."""
    return _redis_client


async def get_self_position() -> Optional[dict[str, Any]]:
    """Get the own vessel position, or None if unknown or Redis is unavailable."""
    client = get_redis_client()
    if client is None:
        return None
    return await client.get_position(settings.self_context)


async def set_self_position(
    latitude: float, longitude: float, timestamp: Optional[datetime] = None
) -> bool:
    """Store the own vessel position.

    Returns:
        True if stored, False if Redis is unavailable
    """
    client = get_redis_client()
    if client is None:
        return False
    return await client.set_position(
        settings.self_context, latitude, longitude, timestamp
    )
