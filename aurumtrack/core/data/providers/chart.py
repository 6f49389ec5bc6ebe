"""Chart endpoint provider: one request per symbol with an intraday series."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from urllib.parse import urlencode

from aurumtrack.core.config import AnchorConfig
from aurumtrack.core.exceptions import PayloadError
from aurumtrack.core.logging import logger
from aurumtrack.core.models import AnchorQuality, Instrument, Quote, TimeSeriesSample
from aurumtrack.core.patterns import FallbackChain
from aurumtrack.core.services.anchor import resolve_anchor

from .base import QuoteBatch, QuoteProvider, coerce_price, first_price

# Fixed precedence, first non-null wins.
PREVIOUS_CLOSE_FIELDS = ("regularMarketPreviousClose", "previousClose", "chartPreviousClose")


def extract_chart_result(payload: Any) -> dict[str, Any]:
    """Return ``chart.result[0]`` or raise :class:`PayloadError`."""

    try:
        result = payload["chart"]["result"][0]
    except (KeyError, IndexError, TypeError) as exc:
        raise PayloadError("chart payload has no result", ChartQuoteProvider.name) from exc
    if not isinstance(result, dict) or not isinstance(result.get("meta"), dict):
        raise PayloadError("chart result has no meta block", ChartQuoteProvider.name)
    return result


def parse_series(result: dict[str, Any]) -> list[TimeSeriesSample]:
    """Pair ``timestamp`` with ``indicators.quote[0].close``; missing series is empty."""

    timestamps = result.get("timestamp") or []
    try:
        closes = result["indicators"]["quote"][0].get("close") or []
    except (KeyError, IndexError, TypeError, AttributeError):
        closes = []

    samples: list[TimeSeriesSample] = []
    for timestamp, close in zip(timestamps, closes):
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            continue
        samples.append(TimeSeriesSample(timestamp=int(timestamp), close=coerce_price(close)))
    return samples


def resolve_previous_close(meta: dict[str, Any]) -> float | None:
    return first_price(*(meta.get(name) for name in PREVIOUS_CLOSE_FIELDS))


def last_valid_close(series: Sequence[TimeSeriesSample]) -> float | None:
    for sample in reversed(series):
        if sample.close is not None:
            return sample.close
    return None


def parse_chart_result(
    instrument: Instrument,
    result: dict[str, Any],
    anchor_config: AnchorConfig,
    fetched_at: datetime | None = None,
) -> Quote:
    meta = result["meta"]
    series = parse_series(result)
    previous_close = resolve_previous_close(meta)
    current = coerce_price(meta.get("regularMarketPrice"))
    if current is None:
        current = last_valid_close(series)

    anchor: float | None = None
    quality = AnchorQuality.MISSING
    if instrument.track_anchor:
        anchor, quality = resolve_anchor(series, previous_close, anchor_config)
        if quality is AnchorQuality.PREVIOUS_CLOSE:
            logger.info(
                "No intraday sample near cutoff, anchoring on previous close",
                instrument=instrument.key,
                samples=len(series),
            )

    return Quote(
        key=instrument.key,
        symbol=instrument.symbol or instrument.key,
        current_price=current,
        previous_close=previous_close,
        anchor_price=anchor,
        anchor_quality=quality,
        provider=ChartQuoteProvider.name,
        fetched_at=fetched_at,
    )


class ChartQuoteProvider(QuoteProvider):
    """Quote/chart endpoint keyed by ticker symbol."""

    name = "chart"

    def __init__(self, chain: FallbackChain, base_url: str, anchor_config: AnchorConfig | None = None):
        super().__init__(chain)
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.anchor_config = anchor_config or AnchorConfig()

    def build_url(self, instrument: Instrument) -> str:
        params = urlencode({"interval": instrument.interval, "range": instrument.lookback})
        return f"{self.base_url}{instrument.symbol}?{params}"

    def supports(self, instrument: Instrument) -> bool:
        return bool(instrument.symbol)

    def group(self, instruments: Sequence[Instrument]) -> list[list[Instrument]]:
        return [[instrument] for instrument in instruments]

    async def fetch_group(self, instruments: Sequence[Instrument]) -> QuoteBatch:
        batch: QuoteBatch = {}
        for instrument in instruments:
            result = await self.chain.fetch_json("GET", self.build_url(instrument), validate=extract_chart_result)
            quote = parse_chart_result(instrument, result, self.anchor_config, fetched_at=self.now())
            logger.debug(
                "Chart quote",
                instrument=instrument.key,
                current=quote.current_price,
                previous_close=quote.previous_close,
                anchor=quote.anchor_price,
            )
            batch[instrument.key] = quote
        return batch


__all__ = [
    "PREVIOUS_CLOSE_FIELDS",
    "ChartQuoteProvider",
    "extract_chart_result",
    "last_valid_close",
    "parse_chart_result",
    "parse_series",
    "resolve_previous_close",
]
