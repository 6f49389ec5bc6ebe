"""Anchor detection around a fixed daily cutoff."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from aurumtrack.core.config import AnchorConfig
from aurumtrack.core.models import AnchorQuality, TimeSeriesSample

MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class AnchorMatch:
    """Sample selected as the anchor and its distance from the cutoff."""

    sample: TimeSeriesSample
    distance_minutes: int
    exact: bool

    @property
    def price(self) -> float:
        assert self.sample.close is not None
        return self.sample.close


def minute_distance(minute: int, cutoff_minute: int) -> int:
    """Distance between two minutes of day, measured around midnight."""

    distance = abs(minute - cutoff_minute) % MINUTES_PER_DAY
    return min(distance, MINUTES_PER_DAY - distance)


def _cutoff_window(timestamp: int, cutoff_minute: int) -> int:
    # index of the 24h window centred on the cutoff that holds ``timestamp``
    return (timestamp // 60 - cutoff_minute + MINUTES_PER_DAY // 2) // MINUTES_PER_DAY


def _is_valid(close: float | None) -> bool:
    return close is not None and math.isfinite(close)


def find_anchor(
    series: Sequence[TimeSeriesSample],
    cutoff_minute_utc: int,
    exact_tolerance: int = 5,
    max_window: int = 20,
) -> AnchorMatch | None:
    """Locate the sample nearest ``cutoff_minute_utc``.

    The series is scanned newest first so the most recent qualifying day
    wins. A sample within ``exact_tolerance`` minutes beats every
    approximate match. Within the chosen day the closest sample wins, and
    ties keep the more recent sample. Samples farther than ``max_window``
    minutes are never returned.
    """

    if exact_tolerance > max_window:
        raise ValueError("exact_tolerance must not exceed max_window")

    exact: AnchorMatch | None = None
    exact_window: int | None = None
    approximate: AnchorMatch | None = None
    approximate_window: int | None = None

    for sample in reversed(series):
        if not _is_valid(sample.close):
            continue

        window = _cutoff_window(sample.timestamp, cutoff_minute_utc)
        if exact_window is not None and window != exact_window:
            break

        distance = minute_distance(sample.minute_of_day_utc, cutoff_minute_utc)
        if distance <= exact_tolerance:
            if exact is None or distance < exact.distance_minutes:
                exact = AnchorMatch(sample=sample, distance_minutes=distance, exact=True)
                exact_window = window
            if distance == 0:
                break
        elif distance <= max_window and exact is None:
            if approximate_window is None or (
                window == approximate_window and distance < approximate.distance_minutes  # type: ignore[union-attr]
            ):
                approximate = AnchorMatch(sample=sample, distance_minutes=distance, exact=False)
                approximate_window = window

    return exact or approximate


def resolve_anchor(
    series: Sequence[TimeSeriesSample],
    previous_close: float | None,
    config: AnchorConfig,
) -> tuple[float | None, AnchorQuality]:
    """Anchor price and its quality, falling back to the previous close."""

    match = find_anchor(
        series,
        config.cutoff_minute_utc,
        exact_tolerance=config.exact_tolerance_minutes,
        max_window=config.max_window_minutes,
    )
    if match is not None:
        return match.price, AnchorQuality.INTRADAY
    if previous_close is not None:
        return previous_close, AnchorQuality.PREVIOUS_CLOSE
    return None, AnchorQuality.MISSING


__all__ = ["AnchorMatch", "find_anchor", "minute_distance", "resolve_anchor"]
