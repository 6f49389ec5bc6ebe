"""Quote provider interface."""

from __future__ import annotations

import asyncio
import math
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from aurumtrack.core.exceptions import ProviderError
from aurumtrack.core.logging import logger
from aurumtrack.core.models import Instrument, Quote
from aurumtrack.core.patterns import FallbackChain

QuoteBatch = dict[str, Quote | None]


def coerce_price(value: Any) -> float | None:
    """Finite float or ``None``; booleans and strings are rejected."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def first_price(*candidates: Any) -> float | None:
    """First candidate that coerces to a price."""

    for candidate in candidates:
        price = coerce_price(candidate)
        if price is not None:
            return price
    return None


class QuoteProvider(ABC):
    """Fetches quotes for a set of instruments.

    Subclasses split instruments into request groups; every group is
    requested concurrently and a failing group never blocks the others.
    """

    name: str = "base"

    def __init__(self, chain: FallbackChain):
        self.chain = chain

    @abstractmethod
    def supports(self, instrument: Instrument) -> bool:
        """Whether this provider can address ``instrument``."""

    @abstractmethod
    def group(self, instruments: Sequence[Instrument]) -> list[list[Instrument]]:
        """Split instruments into one group per HTTP request."""

    @abstractmethod
    async def fetch_group(self, instruments: Sequence[Instrument]) -> QuoteBatch:
        """Fetch one group, raising :class:`ProviderError` on failure."""

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    async def _settle(self, instruments: Sequence[Instrument]) -> tuple[Sequence[Instrument], QuoteBatch]:
        try:
            return instruments, await self.fetch_group(instruments)
        except ProviderError as exc:
            logger.warning(
                "Quote fetch failed, keeping last known values",
                provider=self.name,
                error_code=exc.error_code,
                instruments=[instrument.key for instrument in instruments],
                error=exc.message,
            )
        except Exception:
            logger.exception(
                "Unexpected error while fetching quotes",
                provider=self.name,
                instruments=[instrument.key for instrument in instruments],
            )
        return instruments, {}

    async def iter_quotes(self, instruments: Iterable[Instrument]) -> AsyncIterator[tuple[Instrument, Quote | None]]:
        """Yield ``(instrument, quote)`` pairs as each request settles."""

        supported: list[Instrument] = []
        for instrument in instruments:
            if self.supports(instrument):
                supported.append(instrument)
            else:
                logger.debug("Instrument not addressable by provider", provider=self.name, instrument=instrument.key)
                yield instrument, None

        tasks = [asyncio.ensure_future(self._settle(group)) for group in self.group(supported)]
        try:
            for next_done in asyncio.as_completed(tasks):
                group, batch = await next_done
                for instrument in group:
                    yield instrument, batch.get(instrument.key)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def fetch_quotes(self, instruments: Iterable[Instrument]) -> list[Quote | None]:
        """Quotes in input order, ``None`` where the fetch failed."""

        ordered = list(instruments)
        results: dict[str, Quote | None] = {}
        async for instrument, quote in self.iter_quotes(ordered):
            results[instrument.key] = quote
        return [results.get(instrument.key) for instrument in ordered]


__all__ = ["QuoteBatch", "QuoteProvider", "coerce_price", "first_price"]
