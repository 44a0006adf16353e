"""Tests for the sync scheduler."""

import asyncio

import pytest

from media_sync.channel.scheduler import SyncScheduler
from media_sync.channel.schemas import SyncResult


class GatedPass:
    """A run_pass callable that blocks until released."""

    def __init__(self, count: int = 1) -> None:
        self.count = count
        self.calls = 0
        self.gate = asyncio.Event()

    async def __call__(self) -> int:
        self.calls += 1
        await self.gate.wait()
        return self.count


class CountingPass:
    def __init__(self, count: int = 0) -> None:
        self.count = count
        self.calls = 0

    async def __call__(self) -> int:
        self.calls += 1
        return self.count


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


class TestSchedulerLifecycle:
    """Test start, stop and the cold-start pass."""

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            SyncScheduler(CountingPass(), interval_seconds=0)
        with pytest.raises(ValueError):
            SyncScheduler(CountingPass(), interval_seconds=-5)

    @pytest.mark.asyncio
    async def test_cold_start_pass(self):
        run_pass = CountingPass(count=4)
        scheduler = SyncScheduler(run_pass, interval_seconds=60)

        await scheduler.start()
        await _wait_until(lambda: scheduler.last_count is not None)
        await scheduler.stop()

        assert run_pass.calls == 1
        assert scheduler.last_count == 4

    @pytest.mark.asyncio
    async def test_no_cold_start_pass_when_disabled(self):
        run_pass = CountingPass()
        scheduler = SyncScheduler(run_pass, interval_seconds=60, run_on_start=False)

        await scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert run_pass.calls == 0

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self):
        scheduler = SyncScheduler(CountingPass(), interval_seconds=60, run_on_start=False)

        await scheduler.stop()
        await scheduler.start()
        await scheduler.start()
        assert scheduler.is_started

        await scheduler.stop()
        await scheduler.stop()
        assert not scheduler.is_started

    @pytest.mark.asyncio
    async def test_restart_after_stop_ticks_again(self):
        run_pass = CountingPass()
        scheduler = SyncScheduler(run_pass, interval_seconds=0.03, run_on_start=False)

        await scheduler.start()
        await scheduler.stop()
        calls_after_first_run = run_pass.calls

        await scheduler.start()
        await _wait_until(lambda: run_pass.calls > calls_after_first_run)
        assert scheduler.is_started
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_waits_for_running_pass(self):
        run_pass = GatedPass(count=2)
        scheduler = SyncScheduler(run_pass, interval_seconds=60)

        await scheduler.start()
        await _wait_until(lambda: run_pass.calls == 1)
        assert scheduler.state == "running-pass"

        stopping = asyncio.create_task(scheduler.stop())
        await asyncio.sleep(0.02)
        assert not stopping.done()

        run_pass.gate.set()
        await stopping

        assert scheduler.last_count == 2
        assert scheduler.state == "idle"


class TestSchedulerTicks:
    """Test interval ticks and overlap behavior."""

    @pytest.mark.asyncio
    async def test_fires_on_interval(self):
        run_pass = CountingPass()
        scheduler = SyncScheduler(run_pass, interval_seconds=0.05, run_on_start=False)

        await scheduler.start()
        await _wait_until(lambda: run_pass.calls >= 2)
        await scheduler.stop()

        assert run_pass.calls >= 2

    @pytest.mark.asyncio
    async def test_slow_pass_does_not_delay_next_tick(self):
        run_pass = GatedPass()
        scheduler = SyncScheduler(run_pass, interval_seconds=0.03)

        await scheduler.start()
        # The first pass is still blocked while later ticks start new ones
        await _wait_until(lambda: run_pass.calls >= 3)
        assert scheduler.active_passes >= 3

        run_pass.gate.set()
        await scheduler.stop()
        assert scheduler.active_passes == 0

    @pytest.mark.asyncio
    async def test_single_flight_skips_ticks(self):
        run_pass = GatedPass()
        scheduler = SyncScheduler(run_pass, interval_seconds=0.03, single_flight=True)

        await scheduler.start()
        await _wait_until(lambda: scheduler.ticks_skipped >= 2)
        assert run_pass.calls == 1

        run_pass.gate.set()
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_raising_pass_keeps_scheduler_alive(self):
        calls = 0

        async def flaky_pass() -> int:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("boom")
            return 7

        scheduler = SyncScheduler(flaky_pass, interval_seconds=0.03)

        await scheduler.start()
        await _wait_until(lambda: scheduler.last_count == 7)
        assert scheduler.is_started
        await scheduler.stop()


class TestManualTrigger:
    """Test manual passes alongside the timer."""

    @pytest.mark.asyncio
    async def test_trigger_returns_count(self):
        scheduler = SyncScheduler(CountingPass(count=3), interval_seconds=60, run_on_start=False)
        assert await scheduler.trigger() == 3
        assert scheduler.passes_started == 1

    @pytest.mark.asyncio
    async def test_trigger_overlaps_running_pass(self):
        run_pass = GatedPass(count=5)
        scheduler = SyncScheduler(run_pass, interval_seconds=60, single_flight=True)

        await scheduler.start()
        await _wait_until(lambda: run_pass.calls == 1)

        manual = asyncio.create_task(scheduler.trigger())
        await _wait_until(lambda: run_pass.calls == 2)
        assert scheduler.active_passes == 2

        run_pass.gate.set()
        assert await manual == 5
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_trigger_sync_counts_as_in_flight(self):
        gate = asyncio.Event()
        timer_pass = CountingPass()

        async def sync_all() -> SyncResult:
            await gate.wait()
            return SyncResult(total_merged=4)

        scheduler = SyncScheduler(
            timer_pass, interval_seconds=0.03, run_on_start=False, single_flight=True
        )
        await scheduler.start()

        manual = asyncio.create_task(scheduler.trigger_sync(sync_all))
        await _wait_until(lambda: scheduler.ticks_skipped >= 2)
        assert scheduler.state == "running-pass"
        assert timer_pass.calls == 0

        gate.set()
        result = await manual
        await scheduler.stop()

        assert result.total_merged == 4
        assert scheduler.last_count == 4

    @pytest.mark.asyncio
    async def test_trigger_with_raising_pass_returns_zero(self):
        async def broken_pass() -> int:
            raise RuntimeError("boom")

        scheduler = SyncScheduler(broken_pass, interval_seconds=60, run_on_start=False)
        assert await scheduler.trigger() == 0
