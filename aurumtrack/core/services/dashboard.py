"""Refresh cycle, view construction and snapshot persistence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from aurumtrack.core.data.providers import QuoteProvider
from aurumtrack.core.data.snapshot import SnapshotRepository, restore_store
from aurumtrack.core.data.store import QuoteStore
from aurumtrack.core.defaults import PREMIUM_PAIRS, USDINR_KEY
from aurumtrack.core.exceptions import SnapshotError
from aurumtrack.core.interfaces import NullSink, PresentationSink
from aurumtrack.core.logging import log_context, logger
from aurumtrack.core.models import (
    ChangeSign,
    ClockView,
    DashboardView,
    GatingState,
    Instrument,
    InstrumentView,
    PredictionModel,
    PredictionView,
    Quote,
)
from aurumtrack.core.services.calendars import TradingCalendar
from aurumtrack.core.services.gating import gating_state
from aurumtrack.core.services.metrics import day_change, inr_per_gram, local_premium, should_animate
from aurumtrack.core.services.prediction import project


@dataclass
class RefreshReport:
    """Outcome of one refresh cycle."""

    cycle: int
    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class DashboardService:
    """Owns the quote store and drives the presentation sink."""

    def __init__(
        self,
        provider: QuoteProvider,
        calendar: TradingCalendar,
        instruments: Sequence[Instrument],
        models: Sequence[PredictionModel] = (),
        store: QuoteStore | None = None,
        sink: PresentationSink | None = None,
        snapshots: SnapshotRepository | None = None,
        grams_per_ounce: float = 28.3,
    ):
        self.provider = provider
        self.calendar = calendar
        self.instruments = list(instruments)
        self.models = list(models)
        self.store = store or QuoteStore()
        self.sink = sink or NullSink()
        self.snapshots = snapshots
        self.grams_per_ounce = grams_per_ounce
        self.first_load = True
        self.cycles = 0
        self.last_updated: datetime | None = None
        self._rendered_prices: dict[str, float] = {}

    def restore(self) -> int:
        """Pre-seed the store from the snapshot and render it straight away."""

        if self.snapshots is None:
            return 0
        loaded = restore_store(self.store, self.snapshots)
        if loaded:
            self.render(persist=False)
        return loaded

    async def refresh(self) -> RefreshReport:
        """Fetch every instrument, landing each quote as soon as it arrives."""

        self.cycles += 1
        report = RefreshReport(cycle=self.cycles)
        with log_context(cycle=report.cycle, provider=self.provider.name):
            async for instrument, quote in self.provider.iter_quotes(self.instruments):
                if quote is None or quote.current_price is None:
                    # the last known record stays on screen
                    report.failed.append(instrument.key)
                    continue
                self.store.replace(quote)
                self.last_updated = self.calendar.local_now()
                report.updated.append(instrument.key)
                self.render()

            logger.info("Refresh cycle finished", updated=len(report.updated), failed=report.failed)
        self.first_load = False
        return report

    def render(self, persist: bool = True) -> DashboardView:
        view = self.build_view(self.calendar.local_now())
        self.sink.render(view)
        self._rendered_prices.update({item.key: item.price for item in view.instruments if item.price is not None})
        if persist:
            self.persist()
        return view

    def persist(self) -> None:
        if self.snapshots is None:
            return
        try:
            self.snapshots.save(self.store.snapshot())
        except SnapshotError as exc:
            logger.warning("Snapshot not saved", error_code=exc.error_code, error=exc.message)

    def tick(self, seconds_to_refresh: int | None = None) -> ClockView:
        clock = self.clock_view(self.calendar.local_now(), seconds_to_refresh)
        self.sink.tick(clock)
        return clock

    def clock_view(self, now: datetime, seconds_to_refresh: int | None = None) -> ClockView:
        return ClockView(
            now=now,
            session=self.calendar.session_state(now),
            gating=gating_state(self.calendar, now),
            next_trading_day=self.calendar.next_trading_day(now),
            seconds_to_refresh=seconds_to_refresh,
        )

    def build_view(self, now: datetime) -> DashboardView:
        gating = gating_state(self.calendar, now)
        return DashboardView(
            generated_at=now,
            session=self.calendar.session_state(now),
            gating=gating,
            instruments=[self.instrument_view(instrument) for instrument in self.instruments],
            predictions=[self.prediction_view(model, gating) for model in self.models],
            last_updated=self.last_updated,
        )

    def instrument_view(self, instrument: Instrument) -> InstrumentView:
        quote = self.store.get(instrument.key)
        view = InstrumentView(
            key=instrument.key,
            label=instrument.label,
            currency=instrument.currency,
            decimals=instrument.decimals,
            stale=quote is None,
        )
        if quote is None or not quote.current_price:
            return view

        price = quote.current_price
        view.price = price
        view.previous_close = quote.previous_close
        change = day_change(price, quote.previous_close)
        if change is not None:
            view.change_sign = change.sign
            view.change_magnitude = change.magnitude
            view.change_percent = change.percent

        usdinr = self._current(USDINR_KEY)
        if instrument.currency == "USD":
            view.inr_per_gram = inr_per_gram(price, usdinr, self.grams_per_ounce)
        international_key = PREMIUM_PAIRS.get(instrument.key)
        if international_key is not None:
            view.premium = local_premium(price, self._current(international_key), usdinr, self.grams_per_ounce)

        view.animate = should_animate(self._rendered_prices.get(instrument.key), price, self.first_load)
        return view

    def prediction_view(self, model: PredictionModel, gating: GatingState) -> PredictionView:
        view = PredictionView(
            international_key=model.international_key,
            local_key=model.local_key,
            gating=gating,
            coefficient=model.coefficient,
        )
        if not gating.shows_values:
            return view

        international = self.store.get(model.international_key) or Quote(key=model.international_key, symbol="")
        local = self.store.get(model.local_key) or Quote(key=model.local_key, symbol="")
        prediction = project(international, local, model)

        view.anchor_price = prediction.anchor_price
        view.anchor_quality = international.anchor_quality
        view.current_price = prediction.international_price
        view.overnight_percent = prediction.overnight_percent
        if gating.shows_expected_price and prediction.available and local.current_price:
            expected = prediction.expected_open
            view.expected_open = expected
            if expected > local.current_price:
                view.expected_direction = ChangeSign.UP
            elif expected < local.current_price:
                view.expected_direction = ChangeSign.DOWN
            else:
                view.expected_direction = ChangeSign.FLAT
        return view

    def _current(self, key: str) -> float | None:
        quote = self.store.get(key)
        return quote.current_price if quote else None


__all__ = ["DashboardService", "RefreshReport"]
