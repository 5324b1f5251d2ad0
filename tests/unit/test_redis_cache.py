"""RedisCacheService tests with an in-memory stand-in for redis.asyncio.Redis."""

import fnmatch
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from fleetcache.infrastructure.cache.redis_cache import (
    RedisCacheService,
    mechanic_availability_key,
    user_session_key,
    vehicle_availability_key,
)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for RedisCacheService (decode_responses=True)."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    async def unlink(self, *keys):
        return await self.delete(*keys)

    async def scan_iter(self, match=None):
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def flushdb(self):
        self.data.clear()
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def service(fake_redis: FakeRedis) -> RedisCacheService:
    return RedisCacheService(redis_client=fake_redis)


def test_key_formats() -> None:
    assert user_session_key("u1") == "user:u1"
    assert vehicle_availability_key("v1") == "vehicle:v1:available"
    assert mechanic_availability_key("m1") == "mechanic:m1:available"


@pytest.mark.asyncio
async def test_set_and_get_roundtrip_json(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    assert await service.set("k", {"a": [1, 2]}) is True
    assert fake_redis.data["k"] == '{"a": [1, 2]}'
    assert fake_redis.ttls["k"] == 3600
    assert await service.get("k") == {"a": [1, 2]}
    assert await service.get("missing") is None


@pytest.mark.asyncio
async def test_invalid_json_is_treated_as_miss(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    fake_redis.data["k"] = "{not json"
    assert await service.get("k") is None


@pytest.mark.asyncio
async def test_user_session_helpers(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    await service.set_user_session("u1", {"role": "vendor"})
    assert fake_redis.ttls["user:u1"] == 86400
    assert await service.get_user_session("u1") == {"role": "vendor"}
    assert await service.delete_user_session("u1") is True
    assert await service.get_user_session("u1") is None


@pytest.mark.asyncio
async def test_online_users_defaults_to_zero(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    assert await service.get_online_users() == 0
    await service.set_online_users(12)
    assert fake_redis.ttls["online_users"] == 60
    assert await service.get_online_users() == 12


@pytest.mark.asyncio
async def test_availability_and_dashboard(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    await service.set_vehicle_availability("v1", False)
    await service.set_mechanic_availability("m1", True)
    await service.set_dashboard_data({"bookings": 3})
    assert await service.get_vehicle_availability("v1") is False
    assert await service.get_mechanic_availability("m1") is True
    assert await service.get_dashboard_data() == {"bookings": 3}
    assert fake_redis.ttls["vehicle:v1:available"] == 300
    assert fake_redis.ttls["dashboard_data"] == 300


@pytest.mark.asyncio
async def test_delete_pattern_and_clear_all(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    await service.set_vehicle_availability("v1", True)
    await service.set_vehicle_availability("v2", True)
    await service.set_mechanic_availability("m1", True)
    assert await service.delete_pattern("vehicle:*") == 2
    assert list(fake_redis.data) == ["mechanic:m1:available"]
    assert await service.clear_all() is True
    assert fake_redis.data == {}


@pytest.mark.asyncio
async def test_disconnect_closes_client(service: RedisCacheService, fake_redis: FakeRedis) -> None:
    await service.disconnect()
    assert fake_redis.closed is True
    assert service.is_available() is False


@pytest.mark.asyncio
async def test_unavailable_service_degrades_quietly() -> None:
    service = RedisCacheService()
    assert service.is_available() is False
    assert await service.get("k") is None
    assert await service.set("k", 1) is False
    assert await service.delete("k") is False
    assert await service.delete_pattern("*") == 0
    assert await service.clear_all() is False
    assert await service.get_online_users() == 0


@pytest.mark.asyncio
async def test_connect_skipped_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEETCACHE_REDIS_ENABLED", "false")
    service = RedisCacheService()
    await service.connect()
    assert service.redis is None
    assert service.is_available() is False


@pytest.mark.asyncio
async def test_redis_errors_are_logged_not_raised() -> None:
    client = AsyncMock()
    client.get = AsyncMock(side_effect=redis.ConnectionError("down"))
    client.setex = AsyncMock(side_effect=redis.TimeoutError("slow"))
    client.delete = AsyncMock(side_effect=redis.RedisError("boom"))
    client.flushdb = AsyncMock(side_effect=redis.RedisError("boom"))
    service = RedisCacheService(redis_client=client)
    assert await service.get("k") is None
    assert await service.set("k", 1) is False
    assert await service.delete("k") is False
    assert await service.clear_all() is False
