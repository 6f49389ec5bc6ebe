"""Configuration module."""

from .settings import (
    AnchorConfig,
    AurumTrackConfig,
    ConfigManager,
    LoggingConfig,
    PredictionConfig,
    ProviderConfig,
    RefreshConfig,
    SessionConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "AnchorConfig",
    "AurumTrackConfig",
    "ConfigManager",
    "LoggingConfig",
    "PredictionConfig",
    "ProviderConfig",
    "RefreshConfig",
    "SessionConfig",
    "StorageConfig",
    "get_default_config",
    "load_config_from_env",
]
