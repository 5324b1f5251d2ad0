"""Redis-backed server cache for sessions, availability and dashboard data.

Async JSON cache with TTLs in seconds. Redis being down never breaks a
caller: every operation logs the failure and returns None/False/0.
Call connect() at startup and disconnect() at shutdown.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from fleetcache.core.config import get_settings
from fleetcache.core.constants import (
    REDIS_KEY_DASHBOARD_DATA,
    REDIS_KEY_ONLINE_USERS,
    REDIS_KEY_SEP,
    REDIS_PREFIX_MECHANIC,
    REDIS_PREFIX_USER_SESSION,
    REDIS_PREFIX_VEHICLE,
    REDIS_TTL_AVAILABILITY,
    REDIS_TTL_DASHBOARD,
    REDIS_TTL_DEFAULT,
    REDIS_TTL_ONLINE_USERS,
    REDIS_TTL_USER_SESSION,
)

logger = logging.getLogger(__name__)


def user_session_key(user_id: str) -> str:
    return f"{REDIS_PREFIX_USER_SESSION}{REDIS_KEY_SEP}{user_id}"


def vehicle_availability_key(vehicle_id: str) -> str:
    return f"{REDIS_PREFIX_VEHICLE}{REDIS_KEY_SEP}{vehicle_id}{REDIS_KEY_SEP}available"


def mechanic_availability_key(mechanic_id: str) -> str:
    return f"{REDIS_PREFIX_MECHANIC}{REDIS_KEY_SEP}{mechanic_id}{REDIS_KEY_SEP}available"


class RedisCacheService:
    """Async Redis cache service with TTL support.

    Holds user sessions (24h), online user count (1 min), vehicle and
    mechanic availability (5 min) and dashboard data (5 min).
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI. When
                given, the service treats it as already connected.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None or not self.settings.redis_enabled:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Cache value for key %s is not valid JSON; ignoring", key)
            return None

    async def set(self, key: str, value: Any, ttl: int = REDIS_TTL_DEFAULT) -> bool:
        """Store value with TTL in seconds. Returns True on success."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.setex(key, ttl, json.dumps(value))
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the command ran."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.delete(key)
        except redis.RedisError:
            logger.exception("Cache delete error for key %s", key)
            return False
        logger.debug("Cache DELETE: %s", key)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a Redis glob pattern using SCAN + batched UNLINK.

        Args:
            pattern: Redis SCAN match pattern (e.g. vehicle:*:available).

        Returns:
            Number of keys deleted.
        """
        if not self.is_available() or self.redis is None:
            return 0
        chunk_size = 500
        deleted = 0
        try:
            chunk: list[str] = []
            async for key in self.redis.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += int(await self.redis.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await self.redis.unlink(*chunk) or 0)
        except redis.RedisError:
            logger.exception("Cache delete_pattern error for %s", pattern)
            return deleted
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted

    async def clear_all(self) -> bool:
        """Clear the whole Redis database. Use with caution."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.flushdb()
        except redis.RedisError:
            logger.exception("Cache clear error")
            return False
        logger.warning("Cache CLEARED: all keys deleted")
        return True

    async def set_user_session(
        self, user_id: str, session_data: dict[str, Any], ttl: int = REDIS_TTL_USER_SESSION
    ) -> bool:
        return await self.set(user_session_key(user_id), session_data, ttl)

    async def get_user_session(self, user_id: str) -> dict[str, Any] | None:
        return await self.get(user_session_key(user_id))

    async def delete_user_session(self, user_id: str) -> bool:
        return await self.delete(user_session_key(user_id))

    async def set_online_users(self, count: int) -> bool:
        return await self.set(REDIS_KEY_ONLINE_USERS, count, REDIS_TTL_ONLINE_USERS)

    async def get_online_users(self) -> int:
        """Return the cached online user count, 0 when unknown."""
        return await self.get(REDIS_KEY_ONLINE_USERS) or 0

    async def set_vehicle_availability(self, vehicle_id: str, is_available: bool) -> bool:
        return await self.set(
            vehicle_availability_key(vehicle_id), is_available, REDIS_TTL_AVAILABILITY
        )

    async def get_vehicle_availability(self, vehicle_id: str) -> bool | None:
        return await self.get(vehicle_availability_key(vehicle_id))

    async def set_mechanic_availability(self, mechanic_id: str, is_available: bool) -> bool:
        return await self.set(
            mechanic_availability_key(mechanic_id), is_available, REDIS_TTL_AVAILABILITY
        )

    async def get_mechanic_availability(self, mechanic_id: str) -> bool | None:
        return await self.get(mechanic_availability_key(mechanic_id))

    async def set_dashboard_data(self, data: Any, ttl: int = REDIS_TTL_DASHBOARD) -> bool:
        return await self.set(REDIS_KEY_DASHBOARD_DATA, data, ttl)

    async def get_dashboard_data(self) -> Any | None:
        return await self.get(REDIS_KEY_DASHBOARD_DATA)
