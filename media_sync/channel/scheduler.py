"""Background scheduler for channel sync passes."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .schemas import SyncResult

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 15 * 60


class SyncScheduler:
    """Run sync passes on process start and on a fixed wall-clock interval.

    Ticks are measured from ``start()``: pass *k* fires at
    ``start + k * interval`` regardless of how long earlier passes take. Each
    pass runs in its own task, so a slow pass never delays the next tick and
    timer passes may overlap each other and manual ``trigger()`` calls.

    With ``single_flight=True`` a timer tick is skipped while any pass is in
    flight. Manual triggers always run.

    Usage:
        scheduler = SyncScheduler(orchestrator.run_pass, interval_seconds=900)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        run_pass: Callable[[], Awaitable[int]],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        run_on_start: bool = True,
        single_flight: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._run_pass_fn = run_pass
        self.interval_seconds = interval_seconds
        self.run_on_start = run_on_start
        self.single_flight = single_flight

        self._tick_task: asyncio.Task | None = None
        self._stopping = asyncio.Event()
        self._pass_tasks: set[asyncio.Task] = set()
        self._active_passes = 0

        self.passes_started = 0
        self.ticks_skipped = 0
        self.last_count: int | None = None

    @property
    def is_started(self) -> bool:
        """Whether the tick loop is running."""
        return self._tick_task is not None and not self._tick_task.done()

    @property
    def active_passes(self) -> int:
        """Number of passes currently in flight (timer and manual)."""
        return self._active_passes

    @property
    def is_running_pass(self) -> bool:
        return self._active_passes > 0

    @property
    def state(self) -> str:
        """``running-pass`` while any pass is in flight, otherwise ``idle``."""
        return "running-pass" if self.is_running_pass else "idle"

    async def start(self) -> None:
        """Start ticking; fires the cold-start pass immediately if enabled."""
        if self.is_started:
            return

        self._stopping.clear()
        self._tick_task = asyncio.create_task(self._tick_loop(), name="sync-scheduler")
        logger.info(
            "Scheduler started. Scheduling YouTube sync every %.0f seconds", self.interval_seconds
        )

    async def stop(self, wait_for_passes: bool = True) -> None:
        """
        Stop ticking.

        Args:
            wait_for_passes: Wait for passes already in flight to finish
        """
        if self._tick_task is None:
            return

        self._stopping.set()
        await self._tick_task
        self._tick_task = None

        if wait_for_passes and self._pass_tasks:
            logger.info("Waiting for %d sync pass(es) to finish", len(self._pass_tasks))
            await asyncio.gather(*self._pass_tasks, return_exceptions=True)

        logger.info("Scheduler stopped")

    async def trigger(self) -> int:
        """
        Run a pass now, alongside any timer-driven pass.

        Returns:
            Number of videos merged by this pass
        """
        logger.info("Manual YouTube sync triggered")
        return await self._run_pass("manual")

    async def trigger_sync(self, sync_all: Callable[[], Awaitable[SyncResult]]) -> SyncResult:
        """
        Run a manual pass that keeps the per-channel breakdown.

        The pass counts as in flight, so single-flight ticks skip while it
        runs and ``state`` reports ``running-pass``.

        Args:
            sync_all: Pass returning a SyncResult (``SyncOrchestrator.sync_all``)

        Returns:
            SyncResult of this pass
        """
        logger.info("Manual YouTube sync triggered")
        self._active_passes += 1
        self.passes_started += 1
        try:
            result = await sync_all()
        finally:
            self._active_passes -= 1

        self.last_count = result.total_merged
        logger.info("Manual sync done. New/updated videos: %d", result.total_merged)
        return result

    async def _run_pass(self, reason: str) -> int:
        self._active_passes += 1
        self.passes_started += 1
        try:
            count = await self._run_pass_fn()
        except Exception:
            # Passes are not supposed to raise; keep the scheduler alive if one does
            logger.exception("%s sync failed", reason.capitalize())
            return 0
        finally:
            self._active_passes -= 1

        self.last_count = count
        logger.info("%s sync done. New/updated videos: %d", reason.capitalize(), count)
        return count

    def _spawn(self, reason: str) -> None:
        if self.single_flight and self.is_running_pass:
            self.ticks_skipped += 1
            logger.info("Skipping %s sync: a pass is still running", reason)
            return

        task = asyncio.create_task(self._run_pass(reason), name=f"sync-pass-{reason}")
        self._pass_tasks.add(task)
        task.add_done_callback(self._pass_tasks.discard)

    async def _tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        started_at = loop.time()

        if self.run_on_start:
            self._spawn("initial")

        tick = 1
        while True:
            deadline = started_at + tick * self.interval_seconds
            try:
                await asyncio.wait_for(
                    self._stopping.wait(), timeout=max(0.0, deadline - loop.time())
                )
                return
            except asyncio.TimeoutError:
                pass

            self._spawn("scheduled")
            # Missed ticks (e.g. a suspended host) collapse into one
            elapsed_ticks = int((loop.time() - started_at) // self.interval_seconds)
            tick = max(tick + 1, elapsed_ticks + 1)
