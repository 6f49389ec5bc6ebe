"""Collaborator interfaces."""

from typing import Protocol, runtime_checkable

from aurumtrack.core.models import ClockView, DashboardView


@runtime_checkable
class PresentationSink(Protocol):
    """Receives computed values; formatting and display are its own concern."""

    def render(self, view: DashboardView) -> None:
        """Called after every quote update."""

    def tick(self, clock: ClockView) -> None:
        """Called once per clock interval."""


class NullSink:
    """Sink that discards everything."""

    def render(self, view: DashboardView) -> None:
        return None

    def tick(self, clock: ClockView) -> None:
        return None


__all__ = ["NullSink", "PresentationSink"]
