"""In-memory quote store."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

from aurumtrack.core.models import Quote, QuoteSnapshot


class QuoteStore:
    """Single-writer mapping from instrument key to its latest quote.

    Quotes are immutable, so a write is one dictionary assignment and a
    reader never observes a half-updated record. Overlapping refreshes are
    last-write-wins.
    """

    def __init__(self, quotes: Iterable[Quote] = ()):
        self._quotes: dict[str, Quote] = {}
        self.version = 0
        for quote in quotes:
            self.replace(quote)

    def get(self, key: str) -> Quote | None:
        return self._quotes.get(key)

    def replace(self, quote: Quote) -> None:
        self._quotes[quote.key] = quote
        self.version += 1

    def keys(self) -> list[str]:
        return list(self._quotes)

    def __contains__(self, key: object) -> bool:
        return key in self._quotes

    def __iter__(self) -> Iterator[Quote]:
        return iter(list(self._quotes.values()))

    def __len__(self) -> int:
        return len(self._quotes)

    def snapshot(self) -> QuoteSnapshot:
        return QuoteSnapshot(saved_at=datetime.now(timezone.utc), quotes=dict(self._quotes))

    def seed(self, snapshot: QuoteSnapshot) -> int:
        """Pre-seed from a snapshot, returning how many quotes were loaded."""

        for key, quote in snapshot.quotes.items():
            if quote.key != key:
                quote = quote.model_copy(update={"key": key})
            self.replace(quote)
        return len(snapshot.quotes)


__all__ = ["QuoteStore"]
