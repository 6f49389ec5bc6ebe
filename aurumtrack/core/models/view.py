"""Values handed to the presentation sink."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from .market import AnchorQuality, ChangeSign, GatingState, SessionState


class InstrumentView(BaseModel):
    """Display values for one instrument."""

    key: str
    label: str
    currency: str
    decimals: int = 2
    price: float | None = None
    previous_close: float | None = None
    change_sign: ChangeSign | None = None
    change_magnitude: float | None = None
    change_percent: float | None = None
    inr_per_gram: float | None = None
    premium: float | None = None
    animate: bool = False
    stale: bool = False


class PredictionView(BaseModel):
    """Gap prediction values for one instrument pair."""

    international_key: str
    local_key: str
    gating: GatingState
    coefficient: float
    anchor_price: float | None = None
    anchor_quality: AnchorQuality = AnchorQuality.MISSING
    current_price: float | None = None
    overnight_percent: float | None = None
    expected_open: float | None = None  # None renders as "unavailable"
    expected_direction: ChangeSign | None = None


class ClockView(BaseModel):
    """Once-per-second clock values."""

    now: datetime
    session: SessionState
    gating: GatingState
    next_trading_day: date
    seconds_to_refresh: int | None = None


class DashboardView(BaseModel):
    """Everything rendered for one refresh."""

    generated_at: datetime
    session: SessionState
    gating: GatingState
    instruments: list[InstrumentView] = Field(default_factory=list)
    predictions: list[PredictionView] = Field(default_factory=list)
    last_updated: datetime | None = None
