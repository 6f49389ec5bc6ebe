"""Quote, instrument and time series models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .market import AnchorQuality


class TimeSeriesSample(BaseModel):
    """Single intraday close sample."""

    model_config = ConfigDict(frozen=True)

    timestamp: int  # UTC epoch seconds
    close: float | None = None

    @property
    def minute_of_day_utc(self) -> int:
        return (self.timestamp // 60) % 1440


class Quote(BaseModel):
    """Latest known price state of one instrument.

    Records are immutable. The store replaces a whole record on every
    update so readers never see ``current_price`` without the matching
    ``previous_close``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    symbol: str | None = None
    current_price: float | None = None
    previous_close: float | None = None
    anchor_price: float | None = None
    anchor_quality: AnchorQuality = AnchorQuality.MISSING
    provider: str | None = None
    fetched_at: datetime | None = None

    @field_serializer("fetched_at", when_used="json")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        """Serialize datetime to isoformat string."""
        if value is None:
            return None
        return value.isoformat()


class Instrument(BaseModel):
    """A tracked instrument and how each provider addresses it."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    symbol: str | None = None
    scanner_symbol: str | None = None
    scanner_market: str = "global"
    interval: str = "1d"
    lookback: str = "5d"
    track_anchor: bool = False
    decimals: int = 2
    currency: str = "INR"


class CalendarDay(BaseModel):
    """Calendar classification of a local exchange date."""

    model_config = ConfigDict(frozen=True)

    day: date
    is_weekday: bool
    is_holiday: bool

    @property
    def is_trading_day(self) -> bool:
        return self.is_weekday and not self.is_holiday


class QuoteSnapshot(BaseModel):
    """Serialized point-in-time copy of the quote store."""

    saved_at: datetime | None = None
    quotes: dict[str, Quote] = Field(default_factory=dict)
