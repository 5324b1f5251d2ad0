"""Cache: in-memory TTL cache, invalidation hooks, key utilities and Redis service.

CacheManager is the client-side cache; RedisCacheService is the server
cache. Key format is in keys.py and fleetcache.core.constants (DRY).
"""

from fleetcache.infrastructure.cache.cache_protocol import CacheProtocol
from fleetcache.infrastructure.cache.invalidation import CacheInvalidator
from fleetcache.infrastructure.cache.keys import (
    mechanic_detail_key,
    vehicle_detail_key,
    vehicle_list_key,
)
from fleetcache.infrastructure.cache.memory_cache import (
    CacheEntry,
    CacheManager,
    cached,
    get_cache,
    init_cache,
    reset_cache,
    with_cache,
)
from fleetcache.infrastructure.cache.redis_cache import RedisCacheService

__all__ = [
    "CacheEntry",
    "CacheInvalidator",
    "CacheManager",
    "CacheProtocol",
    "RedisCacheService",
    "cached",
    "get_cache",
    "init_cache",
    "mechanic_detail_key",
    "reset_cache",
    "vehicle_detail_key",
    "vehicle_list_key",
    "with_cache",
]
