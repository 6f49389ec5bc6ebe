"""AurumTrack core exception classes."""

from typing import Any


class AurumTrackError(Exception):
    """Base exception for AurumTrack."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: human readable message
            error_code: machine readable error code
            details: extra structured details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(AurumTrackError):
    """Invalid configuration value."""

    def __init__(self, message: str, key: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if key is not None:
            super_details["key"] = key
        super().__init__(message, "CONFIGURATION_ERROR", super_details)
        self.key = key


class ProviderError(AurumTrackError):
    """Market data provider failure."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = "PROVIDER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class NetworkError(ProviderError):
    """Transport failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, "NETWORK_ERROR", super_details)
        self.status_code = status_code


class PayloadError(ProviderError):
    """Malformed or empty provider payload."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, "PAYLOAD_ERROR", details)


class AllRelaysFailedError(ProviderError):
    """The direct request and every relay endpoint failed."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        failed_routes: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if failed_routes:
            super_details["failed_routes"] = failed_routes
        super().__init__(message, provider_name, "ALL_RELAYS_FAILED", super_details)
        self.failed_routes = failed_routes or []


class SnapshotError(AurumTrackError):
    """Persisted snapshot could not be read or written."""

    def __init__(self, message: str, path: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if path is not None:
            super_details["path"] = path
        super().__init__(message, "SNAPSHOT_ERROR", super_details)
