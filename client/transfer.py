"""
Shared machinery for the parallel download / upload testers.

A tester runs ``connections`` worker coroutines against one server for a
fixed duration, all sharing one ``aiohttp.ClientSession``.  A sampler
coroutine records throughput every ``SAMPLE_INTERVAL`` seconds, discarding
the first ``WARMUP_SECONDS``.  The final speed is the IQM of the post-warmup
samples, falling back to total bytes / duration.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List

import aiohttp

from .api import Server
from .constants import (
    COMMON_HEADERS,
    DEFAULT_DURATION,
    MAX_CONNECTIONS,
    MAX_REASONABLE_KBPS,
    MIN_CONNECTIONS,
    SAMPLE_INTERVAL,
    WARMUP_SECONDS,
)
from .stats import ConnectionStats, TransferResult

logger = logging.getLogger(__name__)


class TransferTester:
    """Base class; subclasses implement :meth:`_transfer` for one connection."""

    direction = "transfer"
    headers: Dict[str, str] = COMMON_HEADERS

    def __init__(self, duration_seconds: float = DEFAULT_DURATION) -> None:
        self.duration_seconds = duration_seconds
        self._total_bytes = 0
        self._end_time = 0.0
        self._stop = asyncio.Event()

    # -- Hooks for subclasses -----------------------------------------------

    async def _transfer(
        self,
        session: aiohttp.ClientSession,
        server: Server,
        stats: ConnectionStats,
    ) -> None:
        raise NotImplementedError

    def _count(self, stats: ConnectionStats, n: int) -> None:
        stats.bytes_transferred += n
        self._total_bytes += n

    def _running(self) -> bool:
        return not self._stop.is_set() and time.perf_counter() < self._end_time

    # -- Public -------------------------------------------------------------

    async def test(self, server: Server, connections: int = 4) -> TransferResult:
        connections = max(MIN_CONNECTIONS, min(connections, MAX_CONNECTIONS))

        self._total_bytes = 0
        self._stop = asyncio.Event()
        conn_stats: List[ConnectionStats] = []
        samples: List[float] = []

        start_time = time.perf_counter()
        self._end_time = start_time + self.duration_seconds

        async def _worker(session: aiohttp.ClientSession, cid: int) -> None:
            stats = ConnectionStats(id=cid, hostname=server.hostname)
            conn_stats.append(stats)
            t0 = time.perf_counter()

            while self._running():
                try:
                    await self._transfer(session, server, stats)
                except asyncio.CancelledError:
                    break
                except (aiohttp.ClientError, OSError) as exc:
                    if self._stop.is_set():
                        break
                    logger.debug("%s connection %d error: %s", self.direction, cid, exc)
                    await asyncio.sleep(0.2)

            stats.duration_ms = (time.perf_counter() - t0) * 1000
            stats.calculate()

        async def _sampler() -> None:
            prev_bytes = 0
            prev_time = start_time

            while self._running():
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=SAMPLE_INTERVAL)
                    break
                except asyncio.TimeoutError:
                    pass

                now = time.perf_counter()
                cur = self._total_bytes
                dt_ms = (now - prev_time) * 1000

                if dt_ms < 50 or cur <= prev_bytes:
                    continue

                speed = ((cur - prev_bytes) * 8) / dt_ms
                prev_bytes = cur
                prev_time = now

                if speed <= MAX_REASONABLE_KBPS and now - start_time >= WARMUP_SECONDS:
                    samples.append(speed)

        connector = aiohttp.TCPConnector(
            ssl=True,
            limit=connections,
            limit_per_host=connections,
            force_close=False,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, connect=5, sock_read=5)

        async with aiohttp.ClientSession(
            headers=self.headers,
            connector=connector,
            timeout=timeout,
        ) as session:
            workers = [asyncio.create_task(_worker(session, i)) for i in range(connections)]
            sampler = asyncio.create_task(_sampler())

            remaining = self._end_time - time.perf_counter()
            if remaining > 0:
                await asyncio.sleep(remaining)

            self._stop.set()

            for t in workers:
                t.cancel()
            sampler.cancel()

            await asyncio.gather(*workers, return_exceptions=True)
            try:
                await sampler
            except (asyncio.CancelledError, RuntimeError):
                pass

        result = TransferResult(
            bytes_total=self._total_bytes,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            connections=conn_stats,
            samples=samples,
        )
        result.calculate_from_samples()

        logger.debug(
            "%s finished: %d bytes over %d connections, %.1f Kbps",
            self.direction,
            result.bytes_total,
            len(conn_stats),
            result.speed_kbps,
        )
        return result
