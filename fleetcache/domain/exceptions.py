"""Exceptions for the fleetcache package.

The in-memory cache itself raises none of these; they belong to the
collaborators around it (REST client, configuration).
"""

from typing import Any


class FleetCacheException(Exception):
    """Base exception for all fleetcache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. status_code, path).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ApiRequestException(FleetCacheException):
    """Raised when the rental REST API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        path: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if path:
            details["path"] = path
        super().__init__(message, "API_REQUEST_ERROR", details)

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")


class ConfigurationException(FleetCacheException):
    """Raised when a collaborator is used without the configuration it needs."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)
