"""Calendar, anchor, prediction and metric services."""

from .anchor import AnchorMatch, find_anchor, resolve_anchor
from .calendars import TradingCalendar
from .gating import gating_state
from .metrics import day_change, inr_per_gram, local_premium, should_animate
from .prediction import overnight_move, project

__all__ = [
    "AnchorMatch",
    "TradingCalendar",
    "day_change",
    "find_anchor",
    "gating_state",
    "inr_per_gram",
    "local_premium",
    "overnight_move",
    "project",
    "resolve_anchor",
    "should_animate",
]
