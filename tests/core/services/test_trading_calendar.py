from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from aurumtrack.core.config import SessionConfig
from aurumtrack.core.models import SessionState
from aurumtrack.core.services.calendars import TradingCalendar


def test_weekends_and_holidays_are_not_trading_days(calendar: TradingCalendar) -> None:
    assert calendar.is_trading_day(date(2025, 1, 3))
    assert not calendar.is_trading_day(date(2025, 1, 4))
    assert not calendar.is_trading_day(date(2025, 1, 5))
    assert not calendar.is_trading_day(date(2025, 1, 6))

    day = calendar.calendar_day(date(2025, 1, 6))
    assert day.is_weekday
    assert day.is_holiday


def test_next_trading_day_skips_weekend_and_monday_holiday(calendar: TradingCalendar) -> None:
    friday_evening = datetime(2025, 1, 3, 18, 0)

    assert calendar.next_trading_day(friday_evening) == date(2025, 1, 7)
    assert not calendar.is_tomorrow_trading_day(friday_evening)


def test_next_trading_day_is_strictly_after_today(calendar: TradingCalendar) -> None:
    assert calendar.next_trading_day(datetime(2025, 1, 7, 9, 0)) == date(2025, 1, 8)
    assert calendar.is_tomorrow_trading_day(datetime(2025, 1, 7, 9, 0))


@pytest.mark.parametrize(
    ("instant", "expected"),
    [
        (datetime(2025, 1, 4, 11, 0), SessionState.CLOSED_WEEKEND),
        (datetime(2025, 1, 6, 11, 0), SessionState.CLOSED_HOLIDAY),
        (datetime(2025, 1, 8, 8, 59), SessionState.CLOSED_AFTER_HOURS),
        (datetime(2025, 1, 8, 9, 0), SessionState.PRE_OPEN),
        (datetime(2025, 1, 8, 9, 14), SessionState.PRE_OPEN),
        (datetime(2025, 1, 8, 9, 15), SessionState.OPEN),
        (datetime(2025, 1, 8, 15, 29), SessionState.OPEN),
        (datetime(2025, 1, 8, 15, 30), SessionState.CLOSED_AFTER_HOURS),
        (datetime(2025, 1, 8, 23, 59), SessionState.CLOSED_AFTER_HOURS),
    ],
)
def test_session_state_boundaries(calendar: TradingCalendar, instant: datetime, expected: SessionState) -> None:
    assert calendar.session_state(instant) is expected


def test_aware_instants_are_converted_to_exchange_time(calendar: TradingCalendar) -> None:
    # 04:00 UTC is 09:30 IST
    instant = datetime(2025, 1, 8, 4, 0, tzinfo=timezone.utc)

    assert calendar.to_local(instant).hour == 9
    assert calendar.to_local(instant).minute == 30
    assert calendar.session_state(instant) is SessionState.OPEN


def test_utc_evening_can_be_next_local_day(calendar: TradingCalendar) -> None:
    # Friday 19:00 UTC is Saturday 00:30 IST
    instant = datetime(2025, 1, 3, 19, 0, tzinfo=timezone.utc)

    assert calendar.session_state(instant) is SessionState.CLOSED_WEEKEND


def test_local_now_uses_injected_clock() -> None:
    frozen = datetime(2025, 1, 8, 10, 15, tzinfo=timezone.utc)
    calendar = TradingCalendar(clock=lambda: frozen)

    now = calendar.local_now()

    assert now.utcoffset() == timedelta(minutes=330)
    assert (now.hour, now.minute) == (15, 45)


def test_trading_days_inclusive_range(calendar: TradingCalendar) -> None:
    days = calendar.trading_days(date(2025, 1, 3), date(2025, 1, 10))

    assert days == [date(2025, 1, 3), date(2025, 1, 7), date(2025, 1, 8), date(2025, 1, 9)]


def test_trading_days_rejects_reversed_range(calendar: TradingCalendar) -> None:
    with pytest.raises(ValueError):
        calendar.trading_days(date(2025, 1, 10), date(2025, 1, 3))


def test_lookahead_exhausted_falls_back_to_tomorrow() -> None:
    holidays = {date(2025, 3, 3) + timedelta(days=offset) for offset in range(30)}
    calendar = TradingCalendar(holidays=holidays, lookahead_days=5)

    assert calendar.next_trading_day(datetime(2025, 3, 3, 12, 0)) == date(2025, 3, 4)


def test_from_config_uses_session_boundaries() -> None:
    config = SessionConfig(open_minute=10 * 60, close_minute=15 * 60, holidays=["2025-01-06"])
    calendar = TradingCalendar.from_config(config)

    assert calendar.session_state(datetime(2025, 1, 8, 9, 30)) is SessionState.PRE_OPEN
    assert calendar.session_state(datetime(2025, 1, 8, 15, 10)) is SessionState.CLOSED_AFTER_HOURS
    assert not calendar.is_trading_day(date(2025, 1, 6))


def test_bundled_holiday_table_is_used_by_default() -> None:
    calendar = TradingCalendar.from_config(SessionConfig())

    assert date(2025, 10, 2) in calendar.holidays
    assert not calendar.is_trading_day(date(2025, 12, 25))
