"""AurumTrack client: wires configuration into a running dashboard."""

from __future__ import annotations

from collections.abc import Sequence

from aurumtrack.core.config import AurumTrackConfig, ConfigManager
from aurumtrack.core.data.providers import QuoteProvider, create_http_client, create_provider
from aurumtrack.core.data.snapshot import SnapshotRepository
from aurumtrack.core.defaults import DEFAULT_INSTRUMENTS
from aurumtrack.core.http import HttpClient
from aurumtrack.core.interfaces import PresentationSink
from aurumtrack.core.logging import configure_logging
from aurumtrack.core.models import Instrument
from aurumtrack.core.services.calendars import Clock, TradingCalendar
from aurumtrack.core.services.dashboard import DashboardService
from aurumtrack.core.services.scheduler import RefreshScheduler


class AurumTrackClient:
    """Builds the provider, calendar, store and service from one configuration.

    Use as an async context manager so the HTTP client is closed.
    """

    def __init__(
        self,
        config: AurumTrackConfig | None = None,
        sink: PresentationSink | None = None,
        instruments: Sequence[Instrument] = DEFAULT_INSTRUMENTS,
        http_client: HttpClient | None = None,
        clock: Clock | None = None,
        configure_logs: bool = False,
    ):
        self.config = config or ConfigManager().get_config()
        if configure_logs:
            configure_logging(
                level=self.config.logging.level,
                file_output=bool(self.config.logging.file),
                file_path=self.config.logging.file or None,
            )

        self.http_client = http_client or create_http_client(self.config.providers)
        self.provider: QuoteProvider = create_provider(self.config.providers, self.config.anchor, self.http_client)
        self.calendar = TradingCalendar.from_config(self.config.session, clock=clock)
        self.models = self.config.prediction.models()
        snapshots = SnapshotRepository(self.config.storage.snapshot_path) if self.config.storage.enabled else None
        self.service = DashboardService(
            provider=self.provider,
            calendar=self.calendar,
            instruments=instruments,
            models=self.models,
            sink=sink,
            snapshots=snapshots,
            grams_per_ounce=self.config.prediction.grams_per_ounce,
        )

    async def __aenter__(self) -> "AurumTrackClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http_client.close()

    def scheduler(self) -> RefreshScheduler:
        return RefreshScheduler(
            self.service,
            refresh_interval=self.config.refresh.interval_seconds,
            clock_interval=self.config.refresh.clock_seconds,
        )


__all__ = ["AurumTrackClient"]
