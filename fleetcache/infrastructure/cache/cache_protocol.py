"""Cache protocol shared by the invalidation hooks and the REST client."""

import re
from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Synchronous key/value cache with per-entry TTL in milliseconds."""

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store value under key; None ttl_ms means the default TTL."""
        ...

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value or default."""
        ...

    def has(self, key: str) -> bool:
        """Return True if key holds a live value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove key; return True if something was removed."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...

    def clear_by_pattern(self, pattern: str | re.Pattern[str]) -> int:
        """Remove keys matching pattern; return how many were removed."""
        ...
