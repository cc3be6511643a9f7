"""Tick Scheduler - single guarded entry point for running the Tick Engine.

Timer ticks, manual ticks and stale-read ticks all go through
``request_tick``. A request that arrives while a tick is in flight is
dropped, never queued, so the tick body never interleaves with itself.

Usage:
    scheduler = TickScheduler(tick_engine, interval_seconds=60)
    scheduler.start()   # in the FastAPI lifespan
    ...
    await scheduler.stop()
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional

from emabot.application.shared import CommandHandler
from emabot.application.trading.commands import RunTickCommand, TickTrigger
from emabot.application.trading.dtos import TickOutcome, TickResult
from emabot.config import get_logger

logger = get_logger(__name__)


def seconds_until_next_boundary(
    now: datetime, interval_seconds: float, min_delay: float = 0.0
) -> float:
    """Seconds from ``now`` to the next multiple of ``interval_seconds`` since the epoch.

    A boundary closer than ``min_delay`` is skipped in favour of the one after it.

    Example:
        >>> seconds_until_next_boundary(datetime(2024, 1, 1, 12, 0, 45, tzinfo=timezone.utc), 60)
        15.0
    """
    delay = interval_seconds - now.timestamp() % interval_seconds
    if delay < min_delay:
        delay += interval_seconds
    return delay


class TickScheduler:
    def __init__(
        self,
        engine: CommandHandler[RunTickCommand, TickResult],
        interval_seconds: float = 60,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        min_delay_seconds: float = 1.0,
    ) -> None:
        self._engine = engine
        self._interval = interval_seconds
        # Wall clock and loop clock drift apart; never wake twice for one boundary
        self._min_delay = min(min_delay_seconds, interval_seconds / 2)
        self._clock = clock
        self._busy = False
        self._task: Optional[asyncio.Task] = None
        self._stopping = asyncio.Event()

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def request_tick(
        self, trigger: TickTrigger = TickTrigger.TIMER
    ) -> Optional[TickResult]:
        """Run one tick unless one is already in flight.

        Returns:
            The tick result, or None if the request was dropped.
            Never raises: engine failures come back as a FAILED result.
        """
        # Check-and-set with no await in between
        if self._busy:
            logger.info("tick.dropped_busy", trigger=trigger.value)
            return None
        self._busy = True

        try:
            return await self._engine.handle(RunTickCommand(trigger=trigger))
        except Exception as e:
            logger.error(
                "tick.failed",
                trigger=trigger.value,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return TickResult(outcome=TickOutcome.FAILED, error=str(e))
        finally:
            self._busy = False

    def start(self) -> None:
        """Start the timer loop as a background task (idempotent)."""
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="tick-scheduler")
        logger.info("scheduler.started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the timer loop.

        Interrupts the wait between ticks; a tick already running completes.
        """
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None
        logger.info("scheduler.stopped")

    async def _run(self) -> None:
        while not self._stopping.is_set():
            # Re-aligned after every tick: a slow tick delays the next, never queues it
            delay = seconds_until_next_boundary(
                self._clock(), self._interval, self._min_delay
            )
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=delay)
            except asyncio.TimeoutError:
                await self.request_tick(TickTrigger.TIMER)
