from __future__ import annotations

from datetime import datetime

import pytest

from aurumtrack.core.models import GatingState
from aurumtrack.core.services.calendars import TradingCalendar
from aurumtrack.core.services.gating import gating_state


@pytest.mark.parametrize(
    ("instant", "expected"),
    [
        # Saturday
        (datetime(2025, 1, 4, 12, 0), GatingState.LOCKED_NON_TRADING_DAY),
        # Monday holiday
        (datetime(2025, 1, 6, 16, 0), GatingState.LOCKED_NON_TRADING_DAY),
        # Wednesday pre-open and open session
        (datetime(2025, 1, 8, 9, 5), GatingState.LOCKED_MARKET_OPEN),
        (datetime(2025, 1, 8, 12, 0), GatingState.LOCKED_MARKET_OPEN),
        # Wednesday after close, Thursday trades
        (datetime(2025, 1, 8, 15, 45), GatingState.AVAILABLE),
        # Friday after close, Monday is a holiday
        (datetime(2025, 1, 3, 15, 45), GatingState.AVAILABLE_NO_NEXT_SESSION),
        # Thursday after close, Friday is a holiday
        (datetime(2025, 1, 9, 20, 0), GatingState.AVAILABLE_NO_NEXT_SESSION),
        # Tuesday early morning counts as after hours
        (datetime(2025, 1, 7, 6, 0), GatingState.AVAILABLE),
    ],
)
def test_gating_state(calendar: TradingCalendar, instant: datetime, expected: GatingState) -> None:
    assert gating_state(calendar, instant) is expected


def test_gating_flags() -> None:
    assert GatingState.AVAILABLE.shows_values
    assert GatingState.AVAILABLE.shows_expected_price
    assert GatingState.AVAILABLE_NO_NEXT_SESSION.shows_values
    assert not GatingState.AVAILABLE_NO_NEXT_SESSION.shows_expected_price
    assert not GatingState.LOCKED_MARKET_OPEN.shows_values
    assert not GatingState.LOCKED_NON_TRADING_DAY.shows_values
