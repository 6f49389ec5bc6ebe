"""Core data models."""

from .market import AnchorQuality, ChangeSign, GatingState, ProviderKind, SessionState
from .prediction import Prediction, PredictionModel
from .quote import CalendarDay, Instrument, Quote, QuoteSnapshot, TimeSeriesSample
from .view import ClockView, DashboardView, InstrumentView, PredictionView

__all__ = [
    "AnchorQuality",
    "CalendarDay",
    "ChangeSign",
    "ClockView",
    "DashboardView",
    "GatingState",
    "Instrument",
    "InstrumentView",
    "Prediction",
    "PredictionModel",
    "PredictionView",
    "ProviderKind",
    "Quote",
    "QuoteSnapshot",
    "SessionState",
    "TimeSeriesSample",
]
