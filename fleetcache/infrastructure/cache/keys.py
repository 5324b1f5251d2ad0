"""Cache key builders. Single place for key format (DRY).

Detail keys are "<prefix>_<id>". Ids are not otherwise validated, but an
empty id would collide with the bare prefix and is rejected.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from fleetcache.core.constants import (
    CACHE_KEY_MECHANIC_DETAIL,
    CACHE_KEY_SEP,
    CACHE_KEY_VEHICLE_DETAIL,
    CACHE_KEY_VEHICLES,
)


def _validate_id(value: Any, name: str) -> str:
    """Return value as a string; raise ValueError if it is empty."""
    text = str(value) if value is not None else ""
    if not text:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    return text


def vehicle_detail_key(vehicle_id: Any) -> str:
    """Cache key for a single vehicle."""
    return f"{CACHE_KEY_VEHICLE_DETAIL}{CACHE_KEY_SEP}{_validate_id(vehicle_id, 'vehicle_id')}"


def mechanic_detail_key(mechanic_id: Any) -> str:
    """Cache key for a single mechanic."""
    return f"{CACHE_KEY_MECHANIC_DETAIL}{CACHE_KEY_SEP}{_validate_id(mechanic_id, 'mechanic_id')}"


def vehicle_list_key(filters: Mapping[str, Any] | None = None) -> str:
    """Cache key for a (possibly filtered) vehicle list.

    Falsy filter values are dropped, matching how the list query string is
    built, and the remaining filters are sorted so equal filter sets share
    a key. Filtered variants ("vehicles?...") are cleared together with the
    plain list.
    """
    params = sorted((k, str(v)) for k, v in (filters or {}).items() if v)
    if not params:
        return CACHE_KEY_VEHICLES
    return f"{CACHE_KEY_VEHICLES}?{urlencode(params)}"
