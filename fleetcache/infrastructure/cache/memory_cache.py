"""In-memory TTL cache for REST responses.

Entries expire lazily: nothing sweeps the store in the background, but
every read path (get, has) compares the clock with the entry expiry
before returning, and drops the entry when it is stale. keys() and
size() report whatever is stored, including expired entries that have
not been read since they expired.

A process-wide instance is available through get_cache(); tests and
embedding code should build their own CacheManager or call
init_cache()/reset_cache() explicitly.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

from fleetcache.core.config import get_settings
from fleetcache.shared.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cached value and its absolute expiry (epoch milliseconds)."""

    key: str
    value: Any
    expiry: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.expiry


class CacheManager:
    """Thread-safe in-memory key/value store with per-entry TTL.

    Durations are milliseconds. An entry is live while now <= expiry.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        default_ttl_ms: int | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            clock: Time source; defaults to SystemClock.
            default_ttl_ms: TTL used when set() gets none; defaults to
                settings.cache_default_ttl_ms (5 minutes).
        """
        self.clock: Clock = clock or SystemClock()
        if default_ttl_ms is None:
            default_ttl_ms = get_settings().cache_default_ttl_ms
        self.default_ttl_ms = default_ttl_ms
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store value under key, replacing any previous entry.

        Args:
            key: Cache key (see fleetcache.infrastructure.cache.keys).
            value: Value to cache; stored as-is, not copied.
            ttl_ms: Time-to-live in milliseconds (default_ttl_ms if None).
        """
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        expiry = self.clock.now_ms() + ttl
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expiry=expiry)
        logger.debug("Cache SET: %s (TTL: %sms)", key, ttl)

    def _live_entry(self, key: str) -> CacheEntry | None:
        """Return the live entry for key, dropping it if expired. Caller holds the lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock.now_ms()):
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        return entry

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default if missing or expired."""
        with self._lock:
            entry = self._live_entry(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return default
        logger.debug("Cache HIT: %s", key)
        return entry.value

    def has(self, key: str) -> bool:
        """Return True if key holds a live value. Drops the entry if expired."""
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if an entry was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Cache DELETE: %s", key)
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache CLEARED: %s keys", count)

    def clear_by_pattern(self, pattern: str | re.Pattern[str]) -> int:
        """Delete every key that the regular expression matches anywhere.

        Matching uses re.search, so anchor with ^ to match prefixes. String
        patterns are compiled before the store is touched; a malformed
        pattern raises re.error and removes nothing.

        Args:
            pattern: Regular expression, as a string or compiled pattern.

        Returns:
            Number of keys deleted.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        with self._lock:
            matched = [key for key in self._entries if regex.search(key)]
            for key in matched:
                del self._entries[key]
        if matched:
            logger.info("Cache INVALIDATE: %s (%s keys)", regex.pattern, len(matched))
        return len(matched)

    def purge_expired(self) -> int:
        """Drop all expired entries now. Returns how many were removed."""
        now = self.clock.now_ms()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def keys(self) -> list[str]:
        """Snapshot of stored keys (may include expired, unread entries)."""
        with self._lock:
            return list(self._entries)

    def size(self) -> int:
        """Number of stored entries (may include expired, unread entries)."""
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)


_cache: CacheManager | None = None
_cache_lock = threading.Lock()
_MISSING = object()


def get_cache() -> CacheManager:
    """Return the process-wide CacheManager, creating it on first use."""
    global _cache
    with _cache_lock:
        if _cache is None:
            _cache = CacheManager()
        return _cache


def init_cache(
    clock: Clock | None = None,
    default_ttl_ms: int | None = None,
) -> CacheManager:
    """Replace the process-wide CacheManager with a fresh, empty one."""
    global _cache
    with _cache_lock:
        _cache = CacheManager(clock=clock, default_ttl_ms=default_ttl_ms)
        return _cache


def reset_cache() -> None:
    """Drop the process-wide CacheManager; the next get_cache() builds a new one."""
    global _cache
    with _cache_lock:
        _cache = None


def with_cache(
    fetch: Callable[..., Awaitable[Any]],
    cache_key: str,
    ttl_ms: int | None = None,
    cache: CacheManager | None = None,
) -> Callable[..., Awaitable[Any]]:
    """Wrap an async fetch so its result is cached under a fixed key.

    On a hit the cached value is returned and fetch is not called. On a
    miss fetch is awaited once, its result stored with ttl_ms and
    returned. Concurrent misses are not deduplicated: each one calls
    fetch. Exceptions from fetch propagate and nothing is stored.

    Args:
        fetch: Async callable producing the value.
        cache_key: Key to store the result under.
        ttl_ms: Time-to-live in milliseconds (cache default if None).
        cache: Cache to use; defaults to get_cache() at call time.

    Returns:
        Async callable taking the same arguments as fetch.
    """

    @wraps(fetch)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        store = cache if cache is not None else get_cache()
        value = store.get(cache_key, _MISSING)
        if value is not _MISSING:
            return value
        result = await fetch(*args, **kwargs)
        store.set(cache_key, result, ttl_ms)
        return result

    return wrapper


def _resolve_cache(
    args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[CacheManager | None, tuple[Any, ...], dict[str, Any]]:
    """Resolve the CacheManager and key-builder arguments for a cached() call.

    Resolution order: keyword "cache", then args[0].cache (the bound
    instance of a method, which is then left out of the key arguments).
    The "cache" keyword is never forwarded to the wrapped function.
    """
    call_kwargs = {k: v for k, v in kwargs.items() if k != "cache"}
    explicit = kwargs.get("cache")
    if isinstance(explicit, CacheManager):
        return explicit, args, call_kwargs
    if args:
        cache_attr = getattr(args[0], "cache", None)
        if isinstance(cache_attr, CacheManager):
            return cache_attr, args[1:], call_kwargs
    return None, args, call_kwargs


def cached(
    key_builder: Callable[..., str],
    ttl_ms: int | Callable[[], int] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Decorator form of with_cache for async methods.

    The cache is taken from the "cache" keyword argument or from the
    first argument's .cache attribute; when neither is a CacheManager the
    call goes straight through. key_builder receives the call's arguments
    (without the instance for methods resolved via .cache) and returns
    the key.

    Args:
        key_builder: callable(*args, **kwargs) -> cache key.
        ttl_ms: TTL in milliseconds, or a zero-argument callable returning
            one (read at call time so settings overrides apply).

    Returns:
        Decorator that caches the wrapped coroutine's result.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            store, key_args, call_kwargs = _resolve_cache(args, kwargs)
            if store is None:
                return await func(*args, **call_kwargs)
            cache_key = key_builder(*key_args, **call_kwargs)
            ttl = ttl_ms() if callable(ttl_ms) else ttl_ms
            return await with_cache(func, cache_key, ttl, cache=store)(*args, **call_kwargs)

        return wrapper

    return decorator
