"""Exchange trading calendar and session clock."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, timezone

from loguru import logger

from aurumtrack.core.config import SessionConfig
from aurumtrack.core.models import CalendarDay, SessionState

default_weekend = frozenset({5, 6})

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


class TradingCalendar:
    """Weekday rule plus a static holiday table for one exchange.

    Instants may be timezone aware (converted to the exchange offset) or
    naive (taken as local exchange time already).
    """

    def __init__(
        self,
        market: str = "nse",
        utc_offset_minutes: int = 330,
        holidays: Iterable[date] = (),
        weekend_days: Iterable[int] = default_weekend,
        pre_open_minute: int = 540,
        open_minute: int = 555,
        close_minute: int = 930,
        lookahead_days: int = 14,
        clock: Clock | None = None,
    ) -> None:
        self.market = market
        self.tz = timezone(timedelta(minutes=utc_offset_minutes))
        self.holidays = frozenset(holidays)
        self.weekend_days = frozenset(weekend_days)
        self.pre_open_minute = pre_open_minute
        self.open_minute = open_minute
        self.close_minute = close_minute
        self.lookahead_days = lookahead_days
        self._clock = clock or utc_clock
        self._last_holiday_year = max((day.year for day in self.holidays), default=None)
        self._flagged_years: set[int] = set()

    @classmethod
    def from_config(cls, config: SessionConfig, clock: Clock | None = None) -> TradingCalendar:
        return cls(
            utc_offset_minutes=config.utc_offset_minutes,
            holidays=config.holiday_dates(),
            weekend_days=config.weekend_days,
            pre_open_minute=config.pre_open_minute,
            open_minute=config.open_minute,
            close_minute=config.close_minute,
            lookahead_days=config.lookahead_days,
            clock=clock,
        )

    def local_now(self) -> datetime:
        """Current instant at the exchange's fixed UTC offset."""

        return self._clock().astimezone(self.tz)

    def to_local(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def calendar_day(self, day: date) -> CalendarDay:
        self._flag_stale_table(day)
        return CalendarDay(
            day=day,
            is_weekday=day.weekday() not in self.weekend_days,
            is_holiday=day in self.holidays,
        )

    def is_trading_day(self, day: date) -> bool:
        return self.calendar_day(day).is_trading_day

    def session_state(self, instant: datetime) -> SessionState:
        local = self.to_local(instant)
        day = self.calendar_day(local.date())
        if not day.is_weekday:
            return SessionState.CLOSED_WEEKEND
        if day.is_holiday:
            return SessionState.CLOSED_HOLIDAY

        minute = local.hour * 60 + local.minute
        if self.pre_open_minute <= minute < self.open_minute:
            return SessionState.PRE_OPEN
        if self.open_minute <= minute < self.close_minute:
            return SessionState.OPEN
        return SessionState.CLOSED_AFTER_HOURS

    def next_trading_day(self, instant: datetime) -> date:
        """First trading day strictly after the local date of ``instant``."""

        today = self.to_local(instant).date()
        for offset in range(1, self.lookahead_days + 1):
            candidate = today + timedelta(days=offset)
            if self.is_trading_day(candidate):
                return candidate

        logger.warning(
            "No trading day found within lookahead, holiday table may be corrupt",
            market=self.market,
            start=today.isoformat(),
            lookahead_days=self.lookahead_days,
        )
        return today + timedelta(days=1)

    def is_tomorrow_trading_day(self, instant: datetime) -> bool:
        today = self.to_local(instant).date()
        return self.next_trading_day(instant) == today + timedelta(days=1)

    def trading_days(self, start: date, end: date) -> list[date]:
        """Return trading days between the provided bounds inclusive."""

        if end < start:
            raise ValueError("end must be on or after start")

        current = start
        days: list[date] = []
        while current <= end:
            if self.is_trading_day(current):
                days.append(current)
            current += timedelta(days=1)
        return days

    def _flag_stale_table(self, day: date) -> None:
        if self._last_holiday_year is not None and day.year <= self._last_holiday_year:
            return
        if day.year in self._flagged_years:
            return
        self._flagged_years.add(day.year)
        logger.warning(
            "Holiday table has no entries for this year, treating every weekday as a trading day",
            market=self.market,
            year=day.year,
            error_code="CALENDAR_STALE",
        )


__all__ = ["Clock", "TradingCalendar", "default_weekend", "utc_clock"]
