"""REST client for the rental API, with cached reads."""

from fleetcache.infrastructure.api.client import RentalApiClient

__all__ = ["RentalApiClient"]
