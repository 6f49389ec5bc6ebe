"""Overnight move and next-session gap projection."""

from __future__ import annotations

from aurumtrack.core.models import Prediction, PredictionModel, Quote


def overnight_move(current: float | None, anchor: float | None) -> float | None:
    """Fractional move from ``anchor`` to ``current``, undefined for a zero anchor."""

    if current is None or not anchor:
        return None
    return (current - anchor) / anchor


def project(international: Quote, local: Quote, model: PredictionModel) -> Prediction:
    """Project the international overnight move onto the local instrument.

    ``expected_open = local.current * (1 + move * coefficient)``. The
    expected price stays ``None`` (unavailable, never zero) unless the
    international current, the anchor and the local current are all
    present and non-zero.
    """

    if international.key != model.international_key or local.key != model.local_key:
        raise ValueError(
            f"quotes ({international.key}, {local.key}) do not match model pair {model.pair}"
        )

    move: float | None = None
    expected: float | None = None
    if international.current_price and international.anchor_price and local.current_price:
        move = overnight_move(international.current_price, international.anchor_price)
        if move is not None:
            expected = local.current_price * (1 + move * model.coefficient)

    return Prediction(
        model=model,
        anchor_price=international.anchor_price,
        international_price=international.current_price,
        local_price=local.current_price,
        overnight_move=move,
        expected_open=expected,
    )


__all__ = ["overnight_move", "project"]
