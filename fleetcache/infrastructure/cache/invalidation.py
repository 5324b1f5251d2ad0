"""Named cache invalidation hooks for session and domain events.

Call on_login/on_logout at session transitions and the on_*_update hooks
after a successful write, so later reads go back to the API.
"""

from __future__ import annotations

import logging
from typing import Any

from fleetcache.core.constants import (
    CACHE_KEY_BOOKINGS,
    CACHE_KEY_MECHANICS,
    CACHE_KEY_USER_PROFILE,
    CACHE_KEY_VEHICLES,
    PATTERN_ALL_DATA_KEYS,
    PATTERN_MECHANIC_KEYS,
    PATTERN_VEHICLE_KEYS,
    PATTERN_VEHICLE_LIST_KEYS,
)
from fleetcache.infrastructure.cache.cache_protocol import CacheProtocol
from fleetcache.infrastructure.cache.keys import mechanic_detail_key, vehicle_detail_key

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Invalidation helpers over a cache. Holds no state of its own."""

    def __init__(self, cache: CacheProtocol) -> None:
        self.cache = cache

    def clear_vehicles(self) -> None:
        """Drop the vehicle list, its filtered variants and every vehicle_* key."""
        self.cache.delete(CACHE_KEY_VEHICLES)
        self.cache.clear_by_pattern(PATTERN_VEHICLE_KEYS)
        self.cache.clear_by_pattern(PATTERN_VEHICLE_LIST_KEYS)

    def clear_mechanics(self) -> None:
        """Drop the mechanic list and every mechanic_* key."""
        self.cache.delete(CACHE_KEY_MECHANICS)
        self.cache.clear_by_pattern(PATTERN_MECHANIC_KEYS)

    def clear_user(self) -> None:
        self.cache.delete(CACHE_KEY_USER_PROFILE)

    def clear_bookings(self) -> None:
        self.cache.delete(CACHE_KEY_BOOKINGS)

    def clear_all_data(self) -> None:
        """Drop every vehicles/mechanics/bookings/user_ key."""
        self.cache.clear_by_pattern(PATTERN_ALL_DATA_KEYS)

    def on_login(self) -> None:
        """New session: nothing cached for a previous user may be served.

        Detail keys (vehicle_*, mechanic_*) fall outside the all-data pattern,
        so their families are cleared explicitly.
        """
        logger.debug("Cache hook: login")
        self.clear_user()
        self.clear_vehicles()
        self.clear_mechanics()
        self.clear_bookings()
        self.clear_all_data()

    def on_logout(self) -> None:
        logger.debug("Cache hook: logout")
        self.cache.clear()

    def on_vehicle_update(self, vehicle_id: Any) -> None:
        logger.debug("Cache hook: vehicle %s updated", vehicle_id)
        self.clear_vehicles()
        self.cache.delete(vehicle_detail_key(vehicle_id))

    def on_mechanic_update(self, mechanic_id: Any) -> None:
        logger.debug("Cache hook: mechanic %s updated", mechanic_id)
        self.clear_mechanics()
        self.cache.delete(mechanic_detail_key(mechanic_id))

    def on_booking_update(self) -> None:
        logger.debug("Cache hook: booking updated")
        self.clear_bookings()
