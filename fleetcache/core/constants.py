"""Core constants: cache key names and invalidation patterns.

Single source of truth for cache key structure (DRY). Used by the
in-memory cache, the invalidation hooks and the REST client.
"""

# Canonical list/profile keys
CACHE_KEY_VEHICLES = "vehicles"
CACHE_KEY_MECHANICS = "mechanics"
CACHE_KEY_USER_PROFILE = "user_profile"
CACHE_KEY_BOOKINGS = "bookings"

# Detail key prefixes (used with _<id>)
CACHE_KEY_VEHICLE_DETAIL = "vehicle_detail"
CACHE_KEY_MECHANIC_DETAIL = "mechanic_detail"

# Delimiter between a detail prefix and the resource id
CACHE_KEY_SEP = "_"

# Patterns for bulk invalidation (searched, not fully matched)
PATTERN_VEHICLE_KEYS = r"^vehicle_"
PATTERN_VEHICLE_LIST_KEYS = r"^vehicles\?"
PATTERN_MECHANIC_KEYS = r"^mechanic_"
PATTERN_ALL_DATA_KEYS = r"^(vehicles|mechanics|bookings|user_)"

# Redis (server cache) key prefixes and TTLs in seconds
REDIS_PREFIX_USER_SESSION = "user"
REDIS_PREFIX_VEHICLE = "vehicle"
REDIS_PREFIX_MECHANIC = "mechanic"
REDIS_KEY_ONLINE_USERS = "online_users"
REDIS_KEY_DASHBOARD_DATA = "dashboard_data"
REDIS_KEY_SEP = ":"
REDIS_TTL_DEFAULT = 3600
REDIS_TTL_USER_SESSION = 86400
REDIS_TTL_ONLINE_USERS = 60
REDIS_TTL_AVAILABILITY = 300
REDIS_TTL_DASHBOARD = 300

MS_PER_MINUTE = 60 * 1000
