"""
Dual-loop measurement scheduler.

Runs the speed-test loop and the ping loop as two asyncio tasks that share
one lock.  Each loop measures and logs while holding the lock, so console
lines and file rows of different measurements never interleave.  The
scheduler lives exactly as long as the first loop to finish; the other is
then cancelled.
"""
from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime
from typing import Awaitable, Callable

from monitor.appender import RetryingAppender
from monitor.models import PingOutcome, SpeedTestOutcome
from monitor.pipeline import MeasurementPipeline
from monitor.sampler import HostRotation, PingSampler
from ui.dashboard import Dashboard
from ui.output import format_ping_row, format_speed_row

logger = logging.getLogger(__name__)

SPEED_LOG_NAME = "logs.csv"
PING_LOG_NAME = "pings.csv"


class DualLoopScheduler:
    def __init__(
        self,
        pipeline: MeasurementPipeline,
        sampler: PingSampler,
        rotation: HostRotation,
        appender: RetryingAppender,
        dashboard: Dashboard,
        log_dir: str,
        speed_interval: float = 10.0,
        ping_interval: float = 3.0,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.pipeline = pipeline
        self.sampler = sampler
        self.rotation = rotation
        self.appender = appender
        self.dashboard = dashboard
        self.speed_path = os.path.join(log_dir, SPEED_LOG_NAME)
        self.ping_path = os.path.join(log_dir, PING_LOG_NAME)
        self.speed_interval = speed_interval
        self.ping_interval = ping_interval
        self._clock = clock
        self._sleep = sleep
        self.lock = asyncio.Lock()

    # -- Loops --------------------------------------------------------------

    async def speed_loop(self) -> None:
        """Speed-test forever; returns only when a result cannot be logged."""
        while True:
            async with self.lock:
                timestamp = self._clock()
                outcome = SpeedTestOutcome(timestamp=timestamp)
                try:
                    outcome = await self.pipeline.run(timestamp)
                except Exception as exc:
                    logger.warning("Speed test failed, logging an empty result: %s", exc)

                try:
                    await self.appender.append(self.speed_path, format_speed_row(outcome))
                except Exception as exc:
                    self.dashboard.log_failure(exc)
                    return

            await self._sleep(self.speed_interval)

    async def ping_loop(self) -> None:
        """Ping forever; a logging error propagates and ends the loop."""
        while True:
            host = self.rotation.next()
            async with self.lock:
                self.dashboard.ping_started(host)
                timestamp = self._clock()
                outcome = PingOutcome(
                    timestamp=timestamp,
                    average_ms=await self.sampler.sample(host),
                    host=host,
                )
                if not outcome.inconclusive:
                    await self.appender.append(self.ping_path, format_ping_row(outcome))
                self.dashboard.ping_result(outcome.average_ms)

                await self._sleep(self.ping_interval)

    # -- Lifecycle ----------------------------------------------------------

    async def run(self) -> str:
        """Run both loops until one ends; return its name or re-raise its error."""
        tasks = {
            asyncio.create_task(self.speed_loop(), name="speed-test"): "speed-test",
            asyncio.create_task(self.ping_loop(), name="ping"): "ping",
        }
        logger.info(
            "Measuring: speed test every %ss, ping every %ss, logging to %s and %s",
            self.speed_interval,
            self.ping_interval,
            self.speed_path,
            self.ping_path,
        )

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        finished = done.pop()
        name = tasks[finished]
        exc = finished.exception()
        if exc is not None:
            logger.error("The %s loop failed: %s", name, exc)
        else:
            logger.error("The %s loop ended", name)

        async with self.lock:
            self.dashboard.loop_ended(name)

        if exc is not None:
            raise exc
        return name
