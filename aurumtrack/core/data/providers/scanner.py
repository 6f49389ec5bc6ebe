"""Scanner endpoint provider: one batched request per market group."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from aurumtrack.core.exceptions import PayloadError
from aurumtrack.core.logging import logger
from aurumtrack.core.models import AnchorQuality, Instrument, Quote
from aurumtrack.core.patterns import FallbackChain

from .base import QuoteBatch, QuoteProvider, coerce_price

SCANNER_COLUMNS = ("close", "change", "change_abs")


def extract_scanner_rows(payload: Any) -> dict[str, list[Any]]:
    """Map symbol to its ``d`` column array, or raise :class:`PayloadError`."""

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise PayloadError("scanner payload has no data array", ScannerQuoteProvider.name)

    rows: dict[str, list[Any]] = {}
    for row in data:
        if not isinstance(row, dict):
            continue
        symbol = row.get("s")
        values = row.get("d")
        if isinstance(symbol, str) and isinstance(values, list):
            rows[symbol] = values
    return rows


def parse_scanner_row(instrument: Instrument, values: Sequence[Any], fetched_at: datetime | None = None) -> Quote:
    """Build a quote from ``[close, percent_change, absolute_change]``.

    The scanner has no previous close, so it is derived as
    ``close - absolute_change``. There is no series either, so the anchor
    is the previous close at degraded quality.
    """

    padded = list(values) + [None] * (len(SCANNER_COLUMNS) - len(values))
    close = coerce_price(padded[0])
    change_abs = coerce_price(padded[2])
    previous_close = close - change_abs if close is not None and change_abs is not None else None

    return Quote(
        key=instrument.key,
        symbol=instrument.scanner_symbol or instrument.key,
        current_price=close,
        previous_close=previous_close,
        anchor_price=previous_close,
        anchor_quality=AnchorQuality.PREVIOUS_CLOSE if previous_close is not None else AnchorQuality.MISSING,
        provider=ScannerQuoteProvider.name,
        fetched_at=fetched_at,
    )


class ScannerQuoteProvider(QuoteProvider):
    """Scanner endpoint keyed by many symbols per call."""

    name = "scanner"

    def __init__(self, chain: FallbackChain, base_url: str, columns: Sequence[str] = SCANNER_COLUMNS):
        super().__init__(chain)
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.columns = list(columns)

    def build_url(self, market: str) -> str:
        return f"{self.base_url}{market}/scan"

    def build_body(self, instruments: Sequence[Instrument]) -> dict[str, Any]:
        return {
            "symbols": {"tickers": [instrument.scanner_symbol for instrument in instruments]},
            "columns": self.columns,
        }

    def supports(self, instrument: Instrument) -> bool:
        return bool(instrument.scanner_symbol)

    def group(self, instruments: Sequence[Instrument]) -> list[list[Instrument]]:
        groups: dict[str, list[Instrument]] = {}
        for instrument in instruments:
            groups.setdefault(instrument.scanner_market, []).append(instrument)
        return list(groups.values())

    async def fetch_group(self, instruments: Sequence[Instrument]) -> QuoteBatch:
        if not instruments:
            return {}
        market = instruments[0].scanner_market
        rows = await self.chain.fetch_json(
            "POST",
            self.build_url(market),
            json_body=self.build_body(instruments),
            validate=extract_scanner_rows,
        )

        fetched_at = self.now()
        batch: QuoteBatch = {}
        for instrument in instruments:
            values = rows.get(instrument.scanner_symbol or "")
            if values is None:
                logger.warning("Symbol missing from scanner response", provider=self.name, instrument=instrument.key)
                batch[instrument.key] = None
                continue
            batch[instrument.key] = parse_scanner_row(instrument, values, fetched_at)
        return batch


__all__ = ["SCANNER_COLUMNS", "ScannerQuoteProvider", "extract_scanner_rows", "parse_scanner_row"]
