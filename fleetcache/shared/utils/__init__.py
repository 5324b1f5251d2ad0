"""Shared utilities: clock abstraction and token helpers."""

from fleetcache.shared.utils.clock import Clock, ManualClock, SystemClock
from fleetcache.shared.utils.tokens import (
    get_token_expiration_time,
    is_token_expiring_soon,
    is_token_valid,
)

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "get_token_expiration_time",
    "is_token_expiring_soon",
    "is_token_valid",
]
