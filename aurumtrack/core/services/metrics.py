"""Derived display metrics: day change, INR per gram and local premium."""

from __future__ import annotations

from dataclasses import dataclass

from aurumtrack.core.models import ChangeSign

ANIMATION_EPSILON = 0.001


@dataclass(frozen=True)
class DayChange:
    """Change of the current price against the previous close."""

    sign: ChangeSign
    magnitude: float
    percent: float


def day_change(current: float | None, previous: float | None) -> DayChange | None:
    if not current or not previous:
        return None
    diff = current - previous
    if diff > 0:
        sign = ChangeSign.UP
    elif diff < 0:
        sign = ChangeSign.DOWN
    else:
        sign = ChangeSign.FLAT
    return DayChange(sign=sign, magnitude=abs(diff), percent=diff / previous * 100.0)


def inr_per_gram(usd_per_ounce: float | None, usdinr: float | None, grams_per_ounce: float) -> float | None:
    if not usd_per_ounce or not usdinr:
        return None
    return usd_per_ounce * usdinr / grams_per_ounce


def local_premium(
    local_price: float | None,
    usd_per_ounce: float | None,
    usdinr: float | None,
    grams_per_ounce: float,
) -> float | None:
    """Local INR/gram price minus the converted international price."""

    international = inr_per_gram(usd_per_ounce, usdinr, grams_per_ounce)
    if not local_price or international is None:
        return None
    return local_price - international


def should_animate(previous: float | None, target: float | None, first_load: bool) -> bool:
    """Whether a displayed value should count up to ``target``.

    Skipped on first load, without a previous value, or for negligible deltas.
    """

    if target is None or previous is None or first_load:
        return False
    return abs(previous - target) >= ANIMATION_EPSILON


__all__ = ["DayChange", "day_change", "inr_per_gram", "local_premium", "should_animate"]
