"""Async client for the vehicle rental REST API.

Reads go through the in-memory cache (see cached()); successful writes
and session changes call the matching CacheInvalidator hook so the next
read fetches fresh data. All HTTP calls use httpx.AsyncClient.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx

from fleetcache.core.config import get_settings
from fleetcache.core.constants import (
    CACHE_KEY_BOOKINGS,
    CACHE_KEY_MECHANICS,
    CACHE_KEY_USER_PROFILE,
)
from fleetcache.domain.exceptions import ApiRequestException, ConfigurationException
from fleetcache.infrastructure.cache.invalidation import CacheInvalidator
from fleetcache.infrastructure.cache.keys import (
    mechanic_detail_key,
    vehicle_detail_key,
    vehicle_list_key,
)
from fleetcache.infrastructure.cache.memory_cache import CacheManager, cached, get_cache
from fleetcache.shared.utils.tokens import is_token_valid

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's JSON "message", then the body text, then the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class RentalApiClient:
    """Rental API client with cached reads and invalidating writes.

    Use as an async context manager, or call aclose() when done. An
    http_client passed in is not closed by this class.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        cache: CacheManager | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root (e.g. http://localhost:5000/api); defaults to
                settings.api_base_url. Ignored when http_client is given.
            token: Optional bearer token for authenticated calls.
            cache: Cache for reads; defaults to the process-wide get_cache().
            http_client: Optional preconfigured client for testing or DI.
        """
        settings = get_settings()
        self.cache = cache if cache is not None else get_cache()
        self.invalidator = CacheInvalidator(self.cache)
        self.token = token
        self._owns_http = http_client is None
        if http_client is None:
            base_url = base_url or settings.api_base_url
            if not base_url:
                raise ConfigurationException(
                    "API base URL is not configured", setting="api_base_url"
                )
            http_client = httpx.AsyncClient(
                base_url=base_url, timeout=settings.api_timeout_seconds
            )
        self._http = http_client

    async def __aenter__(self) -> RentalApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty).

        Raises:
            ApiRequestException: On non-2xx responses.
        """
        response = await self._http.request(
            method, path, json=json, params=params, headers=self._headers()
        )
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "API %s %s failed: %s %s", method, path, response.status_code, message
            )
            raise ApiRequestException(message, status_code=response.status_code, path=path)
        if not response.content:
            return None
        return response.json()

    # Session

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in, keep the returned token and drop data cached for any earlier session."""
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise ApiRequestException("Login response did not include a token", path="/auth/login")
        if not is_token_valid(token, clock=self.cache.clock):
            logger.warning("Login returned an expired or malformed token")
        self.token = token
        self.invalidator.on_login()
        return data

    def logout(self) -> None:
        """Forget the token and everything cached."""
        self.token = None
        self.invalidator.on_logout()

    # Cached reads

    @cached(lambda filters=None: vehicle_list_key(filters), ttl_ms=lambda: get_settings().cache_ttl_vehicles_ms)
    async def get_vehicles(self, filters: Mapping[str, Any] | None = None) -> Any:
        params = {k: v for k, v in (filters or {}).items() if v}
        return await self._request("GET", "/vehicles", params=params or None)

    @cached(vehicle_detail_key, ttl_ms=lambda: get_settings().cache_ttl_vehicles_ms)
    async def get_vehicle(self, vehicle_id: str) -> Any:
        return await self._request("GET", f"/vehicles/{vehicle_id}")

    @cached(lambda: CACHE_KEY_MECHANICS, ttl_ms=lambda: get_settings().cache_ttl_mechanics_ms)
    async def get_mechanics(self) -> Any:
        return await self._request("GET", "/mechanics")

    @cached(mechanic_detail_key, ttl_ms=lambda: get_settings().cache_ttl_mechanics_ms)
    async def get_mechanic(self, mechanic_id: str) -> Any:
        return await self._request("GET", f"/mechanics/{mechanic_id}")

    @cached(lambda: CACHE_KEY_USER_PROFILE, ttl_ms=lambda: get_settings().cache_ttl_user_profile_ms)
    async def get_user_profile(self) -> Any:
        return await self._request("GET", "/auth/me")

    @cached(lambda: CACHE_KEY_BOOKINGS, ttl_ms=lambda: get_settings().cache_ttl_bookings_ms)
    async def get_bookings(self) -> Any:
        return await self._request("GET", "/bookings")

    # Invalidating writes

    async def update_vehicle(self, vehicle_id: str, data: Mapping[str, Any]) -> Any:
        result = await self._request("PUT", f"/vehicles/{vehicle_id}", json=dict(data))
        self.invalidator.on_vehicle_update(vehicle_id)
        return result

    async def update_mechanic(self, mechanic_id: str, data: Mapping[str, Any]) -> Any:
        result = await self._request("PUT", f"/mechanics/{mechanic_id}", json=dict(data))
        self.invalidator.on_mechanic_update(mechanic_id)
        return result

    async def create_booking(self, data: Mapping[str, Any]) -> Any:
        result = await self._request("POST", "/bookings", json=dict(data))
        self.invalidator.on_booking_update()
        return result

    async def update_booking(self, booking_id: str, data: Mapping[str, Any]) -> Any:
        result = await self._request("PUT", f"/bookings/{booking_id}", json=dict(data))
        self.invalidator.on_booking_update()
        return result
