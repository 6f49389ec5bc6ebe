"""Configuration management for the AurumTrack dashboard."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from aurumtrack.core.defaults import (
    CHART_API_URL,
    DEFAULT_CUTOFF_MINUTE_UTC,
    DEFAULT_PREDICTION_MODELS,
    DEFAULT_RELAYS,
    GRAMS_PER_OUNCE,
    NSE_HOLIDAYS,
    SCANNER_API_URL,
)
from aurumtrack.core.exceptions import ConfigurationError
from aurumtrack.core.models import PredictionModel

CONFIG_HOME = Path.home() / ".aurumtrack"


@dataclass
class RefreshConfig:
    """Timer configuration."""

    interval_seconds: float = 10.0
    clock_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ConfigurationError("interval_seconds must be positive", key="refresh.interval_seconds")
        if self.clock_seconds <= 0:
            raise ConfigurationError("clock_seconds must be positive", key="refresh.clock_seconds")


@dataclass
class AnchorConfig:
    """Anchor detection window around the daily cutoff."""

    cutoff_minute_utc: int = DEFAULT_CUTOFF_MINUTE_UTC
    exact_tolerance_minutes: int = 5
    max_window_minutes: int = 20

    def __post_init__(self) -> None:
        if not 0 <= self.cutoff_minute_utc < 1440:
            raise ConfigurationError("cutoff_minute_utc must be within a day", key="anchor.cutoff_minute_utc")
        if self.exact_tolerance_minutes < 0:
            raise ConfigurationError("exact_tolerance_minutes must be non-negative", key="anchor.exact_tolerance_minutes")
        if self.max_window_minutes < self.exact_tolerance_minutes:
            raise ConfigurationError(
                "max_window_minutes must not be smaller than exact_tolerance_minutes",
                key="anchor.max_window_minutes",
            )


@dataclass
class SessionConfig:
    """Exchange session boundaries, in local minutes of day."""

    utc_offset_minutes: int = 330  # IST, no DST
    pre_open_minute: int = 9 * 60
    open_minute: int = 9 * 60 + 15
    close_minute: int = 15 * 60 + 30
    weekend_days: list[int] = field(default_factory=lambda: [5, 6])
    lookahead_days: int = 14
    holidays: list[str] = field(default_factory=lambda: sorted(day.isoformat() for day in NSE_HOLIDAYS))

    def __post_init__(self) -> None:
        if not 0 <= self.pre_open_minute <= self.open_minute < self.close_minute <= 1440:
            raise ConfigurationError("session boundaries must satisfy pre_open <= open < close", key="session")
        if self.lookahead_days < 1:
            raise ConfigurationError("lookahead_days must be at least 1", key="session.lookahead_days")
        self.holiday_dates()

    def holiday_dates(self) -> frozenset[date]:
        try:
            return frozenset(value if isinstance(value, date) else date.fromisoformat(value) for value in self.holidays)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid holiday date: {exc}", key="session.holidays") from exc


@dataclass
class ProviderConfig:
    """Quote provider configuration."""

    kind: str = "chart"
    timeout: float = 10.0
    chart_url: str = CHART_API_URL
    scanner_url: str = SCANNER_API_URL
    user_agent: str = "Mozilla/5.0 (compatible; aurumtrack/0.1)"
    relays: list[dict[str, Any]] = field(default_factory=lambda: [dict(relay) for relay in DEFAULT_RELAYS])

    def __post_init__(self) -> None:
        if self.kind not in ("chart", "scanner"):
            raise ConfigurationError(f"unknown provider kind '{self.kind}'", key="providers.kind")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", key="providers.timeout")


@dataclass
class PredictionConfig:
    """Fixed per-pair projection coefficients and unit conversion."""

    grams_per_ounce: float = GRAMS_PER_OUNCE
    pairs: list[dict[str, Any]] = field(
        default_factory=lambda: [model.model_dump() for model in DEFAULT_PREDICTION_MODELS]
    )

    def __post_init__(self) -> None:
        if self.grams_per_ounce <= 0:
            raise ConfigurationError("grams_per_ounce must be positive", key="prediction.grams_per_ounce")
        self.models()

    def models(self) -> list[PredictionModel]:
        try:
            return [PredictionModel.model_validate(pair) for pair in self.pairs]
        except ValidationError as exc:
            raise ConfigurationError(f"invalid prediction pair: {exc}", key="prediction.pairs") from exc


@dataclass
class StorageConfig:
    """Last-snapshot cache location."""

    enabled: bool = True
    snapshot_path: str = str(CONFIG_HOME / "snapshot.json")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""  # empty disables file output


@dataclass
class AurumTrackConfig:
    """Top level AurumTrack configuration."""

    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    anchor: AnchorConfig = field(default_factory=AnchorConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    providers: ProviderConfig = field(default_factory=ProviderConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "AurumTrackConfig":
        """Build a configuration from a plain dictionary."""
        try:
            return cls(
                refresh=RefreshConfig(**config_dict.get("refresh", {})),
                anchor=AnchorConfig(**config_dict.get("anchor", {})),
                session=SessionConfig(**config_dict.get("session", {})),
                providers=ProviderConfig(**config_dict.get("providers", {})),
                prediction=PredictionConfig(**config_dict.get("prediction", {})),
                storage=StorageConfig(**config_dict.get("storage", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigurationError(f"unknown configuration key: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "refresh": asdict(self.refresh),
            "anchor": asdict(self.anchor),
            "session": asdict(self.session),
            "providers": asdict(self.providers),
            "prediction": asdict(self.prediction),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
        }


def deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``u`` into ``d``."""
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """Loads, updates and saves the TOML configuration file."""

    def __init__(self, config_path: Path | None = None, use_env: bool = True):
        """Initialise the manager.

        Args:
            config_path: configuration file, defaults to ``~/.aurumtrack/config.toml``
            use_env: apply ``AURUMTRACK_*`` environment overrides
        """
        self.config_path = config_path or CONFIG_HOME / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> AurumTrackConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("Failed to read config file, using defaults", path=str(self.config_path), error=str(e))
                config_dict = {}

        if self.use_env:
            deep_update(config_dict, load_config_from_env())

        try:
            return AurumTrackConfig.from_dict(config_dict)
        except ConfigurationError as e:
            logger.warning(
                "Invalid configuration, using defaults",
                error_code=e.error_code,
                path=str(self.config_path),
                error=e.message,
            )
            return AurumTrackConfig()

    def get_config(self) -> AurumTrackConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(refresh={"interval_seconds": 5})``."""
        config_dict = deep_update(self.config.to_dict(), updates)
        self.config = AurumTrackConfig.from_dict(config_dict)

    def save_config(self) -> None:
        """Write the configuration back to the TOML file."""
        import tomli_w

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "wb") as f:
            tomli_w.dump(self.config.to_dict(), f)


def get_default_config() -> AurumTrackConfig:
    return AurumTrackConfig()


def load_config_from_env() -> dict[str, Any]:
    """Read ``AURUMTRACK_*`` overrides from the environment."""
    config: dict[str, Any] = {}

    refresh_interval = os.getenv("AURUMTRACK_REFRESH_INTERVAL")
    if refresh_interval is not None:
        config.setdefault("refresh", {})["interval_seconds"] = float(refresh_interval)

    provider_kind = os.getenv("AURUMTRACK_PROVIDER")
    if provider_kind is not None:
        config.setdefault("providers", {})["kind"] = provider_kind.lower()
    provider_timeout = os.getenv("AURUMTRACK_PROVIDER_TIMEOUT")
    if provider_timeout is not None:
        config.setdefault("providers", {})["timeout"] = float(provider_timeout)

    grams_per_ounce = os.getenv("AURUMTRACK_GRAMS_PER_OUNCE")
    if grams_per_ounce is not None:
        config.setdefault("prediction", {})["grams_per_ounce"] = float(grams_per_ounce)

    snapshot_path = os.getenv("AURUMTRACK_SNAPSHOT_PATH")
    if snapshot_path is not None:
        config.setdefault("storage", {})["snapshot_path"] = snapshot_path
    snapshot_enabled = os.getenv("AURUMTRACK_SNAPSHOT_ENABLED")
    if snapshot_enabled is not None:
        config.setdefault("storage", {})["enabled"] = snapshot_enabled.lower() == "true"

    logging_level = os.getenv("AURUMTRACK_LOGGING_LEVEL")
    if logging_level is not None:
        config.setdefault("logging", {})["level"] = logging_level
    logging_file = os.getenv("AURUMTRACK_LOGGING_FILE")
    if logging_file is not None:
        config.setdefault("logging", {})["file"] = logging_file

    return config
