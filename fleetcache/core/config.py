"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support; every variable is read with the FLEETCACHE_ prefix
(e.g. FLEETCACHE_CACHE_DEFAULT_TTL_MS).
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Cache TTLs are milliseconds (client cache); Redis TTLs are seconds and
    live in fleetcache.core.constants.
    """

    # App
    app_name: str = "fleetcache"
    app_version: str = "1.0.0"
    debug: bool = False

    # In-memory cache
    cache_default_ttl_ms: int = 5 * 60 * 1000  # 5 minutes
    cache_ttl_vehicles_ms: int = 5 * 60 * 1000
    cache_ttl_mechanics_ms: int = 5 * 60 * 1000
    cache_ttl_user_profile_ms: int = 10 * 60 * 1000
    cache_ttl_bookings_ms: int = 60 * 1000

    # Rental REST API
    api_base_url: str = "http://localhost:5000/api"
    api_timeout_seconds: float = 10.0

    # Tokens: warn/refresh when expiry is within this many minutes
    token_expiry_threshold_minutes: int = 5

    # Redis (server cache)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_prefix="FLEETCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_ttls(self) -> "Settings":
        """Reject non-positive TTLs and thresholds."""
        for name in (
            "cache_default_ttl_ms",
            "cache_ttl_vehicles_ms",
            "cache_ttl_mechanics_ms",
            "cache_ttl_user_profile_ms",
            "cache_ttl_bookings_ms",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.token_expiry_threshold_minutes < 0:
            raise ValueError("token_expiry_threshold_minutes must not be negative")
        if self.api_timeout_seconds <= 0:
            raise ValueError("api_timeout_seconds must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
