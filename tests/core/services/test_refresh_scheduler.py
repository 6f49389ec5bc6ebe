from __future__ import annotations

import asyncio

import pytest

from aurumtrack.core.services.scheduler import RefreshScheduler, schedule_every


class StubService:
    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.fail = fail
        self.delay = delay
        self.refreshes = 0
        self.ticks: list[int | None] = []

    async def refresh(self) -> None:
        self.refreshes += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("provider exploded")

    def tick(self, seconds_to_refresh: int | None = None) -> None:
        self.ticks.append(seconds_to_refresh)


@pytest.mark.asyncio
async def test_schedule_every_runs_immediately_and_repeats() -> None:
    calls: list[int] = []
    handle = schedule_every("test", 0.01, lambda: calls.append(1))

    await asyncio.sleep(0.055)
    handle.cancel()
    await handle.wait()

    assert handle.done
    assert len(calls) >= 3


@pytest.mark.asyncio
async def test_scheduler_drives_refresh_and_clock() -> None:
    service = StubService()
    scheduler = RefreshScheduler(service, refresh_interval=0.02, clock_interval=0.01)  # type: ignore[arg-type]

    handles = scheduler.start()
    await asyncio.sleep(0.07)
    await scheduler.stop()

    assert service.refreshes >= 2
    assert len(service.ticks) >= 3
    assert all(handle.done for handle in handles)
    assert scheduler.handles == []
    assert not scheduler.in_flight


@pytest.mark.asyncio
async def test_start_is_idempotent() -> None:
    scheduler = RefreshScheduler(StubService(), refresh_interval=1, clock_interval=1)  # type: ignore[arg-type]

    first = scheduler.start()
    second = scheduler.start()
    await scheduler.stop()

    assert first is second


@pytest.mark.asyncio
async def test_crashing_refresh_does_not_stop_timers() -> None:
    service = StubService(fail=True)
    scheduler = RefreshScheduler(service, refresh_interval=0.01, clock_interval=0.01)  # type: ignore[arg-type]

    scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert service.refreshes >= 2


@pytest.mark.asyncio
async def test_refreshes_overlap_without_waiting() -> None:
    service = StubService(delay=0.05)
    scheduler = RefreshScheduler(service, refresh_interval=0.01, clock_interval=1)  # type: ignore[arg-type]

    scheduler.start()
    await asyncio.sleep(0.035)
    in_flight = len(scheduler.in_flight)
    await scheduler.stop()

    assert in_flight >= 2
    assert not scheduler.in_flight


@pytest.mark.asyncio
async def test_run_until_stop_event() -> None:
    service = StubService()
    scheduler = RefreshScheduler(service, refresh_interval=0.01, clock_interval=0.01)  # type: ignore[arg-type]
    stop = asyncio.Event()
    asyncio.get_running_loop().call_later(0.03, stop.set)

    await asyncio.wait_for(scheduler.run(stop), timeout=1)

    assert service.refreshes >= 1
    assert scheduler.handles == []


@pytest.mark.asyncio
async def test_seconds_to_refresh_counts_down() -> None:
    scheduler = RefreshScheduler(StubService(), refresh_interval=10, clock_interval=1)  # type: ignore[arg-type]

    assert scheduler.seconds_to_refresh() is None
    scheduler.start()
    await asyncio.sleep(0)
    remaining = scheduler.seconds_to_refresh()
    await scheduler.stop()

    assert remaining is not None
    assert 9 <= remaining <= 10
