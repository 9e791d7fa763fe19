"""Tests for the own vessel position store and its feeders."""

import json
from datetime import datetime

import pytest

from aishub_ws.cache import redis_client as store
from aishub_ws.cache.redis_client import RedisClient, position_key
from aishub_ws.socketio import server


class FakeRedis:
    """In-memory stand-in for the redis.asyncio client."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def get(self, key):
        return self.data.get(key)

    async def ping(self):
        return True


@pytest.fixture
def client() -> RedisClient:
    client = RedisClient("redis://localhost:6379/0")
    client._client = FakeRedis()
    return client


@pytest.fixture
def global_client(client, monkeypatch) -> RedisClient:
    monkeypatch.setattr(store, "_redis_client", client)
    return client


class TestRedisClient:
    """Test RedisClient position reads and writes."""

    @pytest.mark.asyncio
    async def test_position_is_stored_as_signalk_value(self, client):
        context = "vessels.urn:mrn:imo:mmsi:237012345"
        stored = await client.set_position(
            context, 40.6, 22.9, timestamp=datetime(2017, 5, 3, 10, 15, 42), ttl=60
        )
        assert stored is True

        raw = json.loads(client._client.data[position_key(context)])
        assert raw == {
            "value": {"latitude": 40.6, "longitude": 22.9},
            "timestamp": "2017-05-03T10:15:42.000Z",
        }
        assert client._client.ttls[position_key(context)] == 60

        assert await client.get_position(context) == raw

    @pytest.mark.asyncio
    async def test_unknown_position(self, client):
        assert await client.get_position("vessels.urn:mrn:imo:mmsi:200000001") is None

    @pytest.mark.asyncio
    async def test_not_connected(self):
        client = RedisClient("redis://localhost:6379/0")
        assert await client.set_position("vessels.self", 0.0, 0.0) is False
        assert await client.get_position("vessels.self") is None
        assert await client.health_check() is False
        assert await client.get_stats() == {"status": "disconnected"}

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        assert await client.health_check() is True


class TestSelfPosition:
    """Test the own vessel helpers used by the poller."""

    @pytest.mark.asyncio
    async def test_without_store(self, monkeypatch):
        monkeypatch.setattr(store, "_redis_client", None)
        assert await store.get_self_position() is None
        assert await store.set_self_position(40.6, 22.9) is False

    @pytest.mark.asyncio
    async def test_round_trip(self, global_client):
        assert await store.set_self_position(40.6, 22.9) is True

        position = await store.get_self_position()
        assert position["value"] == {"latitude": 40.6, "longitude": 22.9}
        assert position["timestamp"].endswith("Z")


class TestPositionEvent:
    """Test the Socket.IO ``position`` event."""

    @pytest.mark.asyncio
    async def test_plain_position(self, global_client):
        ack = await server.position("sid1", {"latitude": 40.6, "longitude": 22.9})
        assert ack == {"stored": True}

        position = await store.get_self_position()
        assert position["value"] == {"latitude": 40.6, "longitude": 22.9}

    @pytest.mark.asyncio
    async def test_signalk_wrapped_position(self, global_client):
        ack = await server.position(
            "sid1", {"value": {"latitude": -33.9, "longitude": 151.2}}
        )
        assert ack == {"stored": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [None, "40.6,22.9", {"latitude": 95, "longitude": 0}, {"latitude": 40.6}],
    )
    async def test_invalid_position(self, global_client, data):
        ack = await server.position("sid1", data)
        assert ack["stored"] is False
        assert "error" in ack
        assert global_client._client.data == {}
