"""Session gating for the gap prediction.

The state is a pure function of the instant, recomputed on every clock
tick:

* pre-open or open session            -> ``LOCKED_MARKET_OPEN``
* weekend or holiday                  -> ``LOCKED_NON_TRADING_DAY``
* trading day, session closed:
    * tomorrow is a trading day       -> ``AVAILABLE``
    * otherwise                       -> ``AVAILABLE_NO_NEXT_SESSION``
"""

from __future__ import annotations

from datetime import datetime

from aurumtrack.core.models import GatingState, SessionState
from aurumtrack.core.services.calendars import TradingCalendar

_MARKET_OPEN_STATES = frozenset({SessionState.PRE_OPEN, SessionState.OPEN})
_NON_TRADING_STATES = frozenset({SessionState.CLOSED_WEEKEND, SessionState.CLOSED_HOLIDAY})


def gating_state(calendar: TradingCalendar, instant: datetime) -> GatingState:
    session = calendar.session_state(instant)
    if session in _MARKET_OPEN_STATES:
        return GatingState.LOCKED_MARKET_OPEN
    if session in _NON_TRADING_STATES:
        return GatingState.LOCKED_NON_TRADING_DAY
    if calendar.is_tomorrow_trading_day(instant):
        return GatingState.AVAILABLE
    return GatingState.AVAILABLE_NO_NEXT_SESSION


__all__ = ["gating_state"]
