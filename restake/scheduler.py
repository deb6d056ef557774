import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable

from core.exception_handler import short_reason


class RepeatingTask:
    """
    Run a job now and then on fixed wall-clock boundaries.

    Boundaries are ``start + k * interval`` regardless of how long a run
    takes. Runs never overlap: boundaries that pass while a run is still in
    flight are dropped and the next run waits for the following boundary.
    A failing run is logged and does not end the schedule.

    Parameters
    ----------
    job : Callable[[], Awaitable[None]]
        Coroutine factory executed on every boundary
    interval : float
        Seconds between boundaries
    logger : logging.Logger
        Logger instance
    sleep : Callable[[float], Awaitable[None]]
        Sleep function, ``asyncio.sleep`` by default
    clock : Callable[[], float]
        Monotonic clock, ``time.monotonic`` by default
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[None]],
        interval: float,
        logger: logging.Logger,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.job = job
        self.interval = interval
        self.logger = logger
        self.sleep = sleep
        self.clock = clock
        self.runs = 0
        self._in_flight = False
        self._stopped = asyncio.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        """Stop the schedule once the current run or wait finishes."""
        self._stopped.set()

    async def run(self, immediately: bool = True) -> None:
        """
        Execute the job on every boundary until stopped.

        Cancelling the awaiting task cancels the wait or the run in
        progress.

        Parameters
        ----------
        immediately : bool
            Also run the job right away, before the first boundary
        """
        start = self.clock()
        if immediately:
            await self._run_guarded()

        boundary = 1
        while not self.stopped:
            now = self.clock()
            due = start + boundary * self.interval
            if now > due:
                missed = math.floor((now - due) / self.interval) + 1
                self.logger.warning(
                    f"Previous run overran the schedule, skipping {missed} trigger(s)"
                )
                boundary += missed
                continue

            await self.sleep(due - now)
            boundary += 1
            if self.stopped:
                break
            await self._run_guarded()

    async def _run_guarded(self) -> None:
        if self._in_flight:
            self.logger.warning("Previous run still in progress, skipping trigger")
            return

        self._in_flight = True
        try:
            await self.job()
        except Exception as e:
            self.logger.error(f"Scheduled run failed: {short_reason(e)}")
            self.logger.debug("Scheduled run failed", exc_info=e)
        finally:
            self._in_flight = False
            self.runs += 1
