"""Exception handling module."""

from aurumtrack.core.exceptions.base import (
    AllRelaysFailedError,
    AurumTrackError,
    ConfigurationError,
    NetworkError,
    PayloadError,
    ProviderError,
    SnapshotError,
)

__all__ = [
    "AurumTrackError",
    "AllRelaysFailedError",
    "ConfigurationError",
    "NetworkError",
    "PayloadError",
    "ProviderError",
    "SnapshotError",
]
