"""
Fixed-interval ingestion scheduler.

An asyncio task that invokes a job every ``interval`` seconds until a stop
event is set. Semantics follow a ticker:

- the first run happens one interval after start, never immediately
- a run that overruns the interval is followed by one immediate run;
  further missed ticks are dropped
- stopping prevents new runs but lets a run in progress finish
- a failing run is logged and the ticker keeps going
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


def next_tick_after(previous: float, interval: float, now: float) -> float:
    """
    Return the next tick time after a run that was due at ``previous``.

    Missed ticks collapse into a single pending one, so the result is at most
    one interval in the past.
    """
    next_tick = previous + interval
    while next_tick + interval <= now:
        next_tick += interval
    return next_tick


class SchedulerState(str, Enum):
    IDLE = "idle"
    SLEEPING = "sleeping"
    RUNNING = "running"
    CANCELLED = "cancelled"


class IngestionScheduler:
    """
    Run an async job on a fixed interval.

    Args:
        job: Coroutine function invoked on every tick.
        interval: Seconds between ticks.
        name: Used in log lines.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        interval: float,
        name: str = "ticketmaster",
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.job = job
        self.interval = interval
        self.name = name
        self.clock = clock
        self.state = SchedulerState.IDLE
        self.runs = 0
        self.failures = 0
        self._stop: asyncio.Event | None = None
        self._task: asyncio.Task | None = None

    def start(self, stop_event: asyncio.Event | None = None) -> asyncio.Task:
        """Spawn the ticker on the running loop and return its task."""
        if self._task is not None and not self._task.done():
            raise RuntimeError(f"scheduler {self.name} is already running")
        self._stop = stop_event or asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop), name=f"scheduler-{self.name}")
        return self._task

    def stop(self) -> None:
        """Signal the ticker to stop. Does not wait for or interrupt a running job."""
        if self._stop is not None:
            self._stop.set()

    async def run(self, stop_event: asyncio.Event) -> None:
        """Tick until ``stop_event`` is set."""
        self._stop = stop_event
        logger.info(f"Scheduler {self.name} started: interval={self.interval}s")
        next_tick = self.clock() + self.interval

        while not stop_event.is_set():
            self.state = SchedulerState.SLEEPING
            delay = max(0.0, next_tick - self.clock())
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
                break
            except TimeoutError:
                pass

            self.state = SchedulerState.RUNNING
            await self._run_job()

            next_tick = next_tick_after(next_tick, self.interval, self.clock())

        self.state = SchedulerState.CANCELLED
        logger.info(f"Scheduler {self.name} stopped after {self.runs} run(s)")

    async def _run_job(self) -> None:
        self.runs += 1
        try:
            await self.job()
        except Exception as e:
            self.failures += 1
            logger.error(f"Scheduler {self.name} run failed: {e.__class__.__name__}: {e}")


async def run_after_delay(
    job: Callable[[], Awaitable[Any]],
    delay: float,
    name: str = "initial-fetch",
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Run ``job`` once after ``delay`` seconds, logging instead of raising on failure.

    If ``stop_event`` is set before the delay elapses the job is skipped.
    """
    if stop_event is None:
        await asyncio.sleep(delay)
    else:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=delay)
        except TimeoutError:
            pass
        if stop_event.is_set():
            logger.info(f"{name} skipped: shutting down")
            return
    try:
        await job()
    except Exception as e:
        logger.error(f"{name} failed: {e.__class__.__name__}: {e}")


async def drain_tasks(tasks: set[asyncio.Task], grace: float | None = None) -> None:
    """
    Wait for background tasks to finish, cancelling any still running after ``grace``.

    ``grace=None`` waits for in-flight runs however long they take. Every task
    is awaited before returning so nothing is left pending.
    """
    if not tasks:
        return
    _, pending = await asyncio.wait(tasks, timeout=grace)
    for task in pending:
        logger.warning(f"Cancelling {task.get_name()} after {grace}s shutdown grace period")
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
