"""Market-related enums and types."""

from enum import Enum


class SessionState(str, Enum):
    """Exchange session state for a given instant."""

    CLOSED_WEEKEND = "closed_weekend"
    CLOSED_HOLIDAY = "closed_holiday"
    PRE_OPEN = "pre_open"
    OPEN = "open"
    CLOSED_AFTER_HOURS = "closed_after_hours"


class GatingState(str, Enum):
    """Whether a gap prediction may be shown."""

    LOCKED_MARKET_OPEN = "locked_market_open"
    LOCKED_NON_TRADING_DAY = "locked_non_trading_day"
    AVAILABLE = "available"
    AVAILABLE_NO_NEXT_SESSION = "available_no_next_session"

    @property
    def shows_values(self) -> bool:
        return self in (GatingState.AVAILABLE, GatingState.AVAILABLE_NO_NEXT_SESSION)

    @property
    def shows_expected_price(self) -> bool:
        return self is GatingState.AVAILABLE


class AnchorQuality(str, Enum):
    """Where an anchor price came from."""

    INTRADAY = "intraday"  # sample near the cutoff
    PREVIOUS_CLOSE = "previous_close"  # degraded fallback
    MISSING = "missing"


class ProviderKind(str, Enum):
    """Available quote provider variants."""

    CHART = "chart"
    SCANNER = "scanner"


class ChangeSign(str, Enum):
    """Direction of a price change."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"
