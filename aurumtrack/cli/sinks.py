"""Rich terminal rendering of the dashboard."""

from __future__ import annotations

from typing import Any

from rich.box import SIMPLE
from rich.console import Console, Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from aurumtrack.core.models import (
    AnchorQuality,
    ChangeSign,
    ClockView,
    DashboardView,
    GatingState,
    InstrumentView,
    PredictionView,
)

PLACEHOLDER = "--"

GATING_MESSAGES = {
    GatingState.LOCKED_MARKET_OPEN: "Market open, prediction locked",
    GatingState.LOCKED_NON_TRADING_DAY: "Market closed today, prediction locked",
    GatingState.AVAILABLE: "Expected at next open",
    GatingState.AVAILABLE_NO_NEXT_SESSION: "No session tomorrow",
}

_SIGN_STYLES = {ChangeSign.UP: "green", ChangeSign.DOWN: "red", ChangeSign.FLAT: "dim"}
_SIGN_MARKS = {ChangeSign.UP: "+", ChangeSign.DOWN: "-", ChangeSign.FLAT: ""}


def format_number(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:,.{decimals}f}"


def format_signed(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:+,.{decimals}f}"


def format_percent(value: float | None, sign: ChangeSign | None = None) -> str:
    if value is None:
        return PLACEHOLDER
    if sign is None:
        return f"{value:+.2f}%"
    return f"{_SIGN_MARKS[sign]}{abs(value):.2f}%"


def instrument_rows(view: DashboardView) -> list[dict[str, Any]]:
    """Flatten instrument views into formatter rows."""

    rows = []
    for item in view.instruments:
        rows.append(
            {
                "key": item.key,
                "label": item.label,
                "price": format_number(item.price, item.decimals),
                "change": _format_change(item),
                "percent": format_percent(item.change_percent, item.change_sign),
                "inr_per_gram": format_number(item.inr_per_gram, 0),
                "premium": format_signed(item.premium, 0),
                "currency": item.currency,
            }
        )
    return rows


def prediction_rows(view: DashboardView) -> list[dict[str, Any]]:
    """Flatten prediction views into formatter rows."""

    rows = []
    for item in view.predictions:
        expected: str
        if item.gating is GatingState.AVAILABLE:
            expected = format_number(item.expected_open) if item.expected_open is not None else "unavailable"
        else:
            expected = GATING_MESSAGES[item.gating]
        rows.append(
            {
                "pair": f"{item.international_key}->{item.local_key}",
                "coefficient": f"{item.coefficient:.2f}",
                "anchor": format_number(item.anchor_price),
                "anchor_quality": item.anchor_quality.value,
                "current": format_number(item.current_price),
                "overnight": format_percent(item.overnight_percent),
                "expected_open": expected,
                "gating": item.gating.value,
            }
        )
    return rows


def _format_change(item: InstrumentView) -> str:
    if item.change_magnitude is None or item.change_sign is None:
        return PLACEHOLDER
    return f"{_SIGN_MARKS[item.change_sign]}{format_number(item.change_magnitude, item.decimals)}"


class RichDashboardSink:
    """Presentation sink drawing the dashboard into a Rich ``Live`` region.

    ``render`` and ``tick`` only store the latest values and redraw, so the
    sink is safe to call from the refresh and clock timers alike.
    """

    def __init__(self, console: Console | None = None, no_color: bool = False):
        self.console = console or Console(no_color=no_color)
        self.no_color = no_color
        self.view: DashboardView | None = None
        self.clock: ClockView | None = None
        self._live: Live | None = None

    def __enter__(self) -> "RichDashboardSink":
        self._live = Live(self.renderable(), console=self.console, refresh_per_second=4, auto_refresh=False)
        self._live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def render(self, view: DashboardView) -> None:
        self.view = view
        self._redraw()

    def tick(self, clock: ClockView) -> None:
        self.clock = clock
        self._redraw()

    def _redraw(self) -> None:
        if self._live is not None:
            self._live.update(self.renderable(), refresh=True)

    def renderable(self) -> Group:
        return Group(self._header(), self._instrument_table(), self._prediction_table())

    def _header(self) -> Text:
        if self.clock is None:
            return Text("AurumTrack  waiting for first refresh", style="bold")
        clock = self.clock
        parts = [
            f"AurumTrack  {clock.now:%a %d %b %Y %H:%M:%S} IST",
            f"session: {clock.session.value}",
            f"next trading day: {clock.next_trading_day:%a %d %b}",
        ]
        if clock.seconds_to_refresh is not None:
            parts.append(f"refresh in {clock.seconds_to_refresh}s")
        if self.view is not None and self.view.last_updated is not None:
            parts.append(f"updated {self.view.last_updated:%H:%M:%S}")
        return Text("  |  ".join(parts), style="bold")

    def _instrument_table(self) -> Table:
        table = Table(box=SIMPLE, title="Prices")
        for column in ("Instrument", "Price", "Change", "%", "INR/g", "Premium"):
            table.add_column(column, justify="left" if column == "Instrument" else "right")
        if self.view is None:
            return table
        for item in self.view.instruments:
            style = None if self.no_color or item.change_sign is None else _SIGN_STYLES[item.change_sign]
            price = Text(format_number(item.price, item.decimals), style="reverse" if item.animate else "")
            table.add_row(
                Text(item.label, style="dim" if item.stale else ""),
                price,
                Text(_format_change(item), style=style or ""),
                Text(format_percent(item.change_percent, item.change_sign), style=style or ""),
                format_number(item.inr_per_gram, 0),
                format_signed(item.premium, 0),
            )
        return table

    def _prediction_table(self) -> Table:
        table = Table(box=SIMPLE, title="Next open")
        for column in ("Pair", "Anchor", "Now", "Overnight", "Expected open"):
            table.add_column(column, justify="left" if column == "Pair" else "right")
        if self.view is None:
            return table
        for row, item in zip(prediction_rows(self.view), self.view.predictions):
            table.add_row(
                f"{item.international_key.upper()} -> {item.local_key}",
                _anchor_cell(item, row["anchor"]),
                row["current"],
                row["overnight"],
                Text(row["expected_open"], style=self._direction_style(item)),
            )
        return table

    def _direction_style(self, item: PredictionView) -> str:
        if self.no_color or item.expected_direction is None:
            return ""
        return _SIGN_STYLES[item.expected_direction]


def _anchor_cell(item: PredictionView, anchor: str) -> str:
    if item.anchor_quality is AnchorQuality.PREVIOUS_CLOSE and item.anchor_price is not None:
        return f"{anchor}*"
    return anchor


__all__ = [
    "GATING_MESSAGES",
    "RichDashboardSink",
    "format_number",
    "format_percent",
    "format_signed",
    "instrument_rows",
    "prediction_rows",
]
