"""Periodic refresh and clock timers on the asyncio event loop."""

from __future__ import annotations

import asyncio
import math
from collections.abc import Awaitable, Callable

from aurumtrack.core.logging import logger
from aurumtrack.core.services.dashboard import DashboardService


class ScheduledTask:
    """Cancellation handle for a repeating task."""

    def __init__(self, name: str, task: asyncio.Task):
        self.name = name
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        self._task.cancel()

    async def wait(self) -> None:
        try:
            await self._task
        except asyncio.CancelledError:
            pass


def schedule_every(name: str, interval: float, callback: Callable[[], Awaitable[None] | None]) -> ScheduledTask:
    """Run ``callback`` immediately and then every ``interval`` seconds."""

    async def _loop() -> None:
        while True:
            result = callback()
            if asyncio.iscoroutine(result):
                await result
            await asyncio.sleep(interval)

    return ScheduledTask(name, asyncio.create_task(_loop(), name=name))


class RefreshScheduler:
    """Drives the refresh timer and the independent clock timer.

    Each refresh tick starts a new cycle without waiting for earlier ones,
    so a slow cycle may still land after a newer one (last write wins).
    """

    def __init__(self, service: DashboardService, refresh_interval: float = 10.0, clock_interval: float = 1.0):
        self.service = service
        self.refresh_interval = refresh_interval
        self.clock_interval = clock_interval
        self.handles: list[ScheduledTask] = []
        self.in_flight: set[asyncio.Task] = set()
        self._next_refresh_at: float | None = None

    def start(self) -> list[ScheduledTask]:
        if self.handles:
            return self.handles
        self.handles = [
            schedule_every("aurumtrack-refresh", self.refresh_interval, self._spawn_refresh),
            schedule_every("aurumtrack-clock", self.clock_interval, self._tick),
        ]
        return self.handles

    async def stop(self) -> None:
        for handle in self.handles:
            handle.cancel()
        for task in list(self.in_flight):
            task.cancel()
        for handle in self.handles:
            await handle.wait()
        if self.in_flight:
            await asyncio.gather(*self.in_flight, return_exceptions=True)
        self.handles = []

    async def run(self, stop_event: asyncio.Event) -> None:
        """Run until ``stop_event`` is set."""

        self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop()

    def seconds_to_refresh(self) -> int | None:
        if self._next_refresh_at is None:
            return None
        remaining = self._next_refresh_at - asyncio.get_running_loop().time()
        return max(0, math.ceil(remaining))

    def _spawn_refresh(self) -> None:
        self._next_refresh_at = asyncio.get_running_loop().time() + self.refresh_interval
        task = asyncio.create_task(self.service.refresh())
        self.in_flight.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task) -> None:
        self.in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("Refresh cycle crashed")

    def _tick(self) -> None:
        self.service.tick(self.seconds_to_refresh())


__all__ = ["RefreshScheduler", "ScheduledTask", "schedule_every"]
