"""
Upload speed test module.

Each worker streams a pre-generated random buffer to the server's
``/upload`` endpoint with a chunked POST for as long as the test window
is open.
"""
from __future__ import annotations

import asyncio
import os
from typing import AsyncIterator

import aiohttp

from .api import Server
from .constants import CHUNK_SIZE, COMMON_HEADERS, DEFAULT_DURATION, UPLOAD_BUFFER_SIZE
from .stats import ConnectionStats
from .transfer import TransferTester


class UploadTester(TransferTester):
    """Parallel upload speed tester."""

    direction = "upload"
    headers = {**COMMON_HEADERS, "Content-Type": "application/octet-stream"}

    def __init__(self, duration_seconds: float = DEFAULT_DURATION) -> None:
        super().__init__(duration_seconds)
        self._data_buffer = os.urandom(UPLOAD_BUFFER_SIZE)

    async def _stream(self, stats: ConnectionStats) -> AsyncIterator[bytes]:
        """Yield buffer slices, wrapping around, until the window closes."""
        pos = 0
        size = len(self._data_buffer)
        while self._running():
            chunk = self._data_buffer[pos:pos + CHUNK_SIZE]
            pos = (pos + CHUNK_SIZE) % size
            self._count(stats, len(chunk))
            yield chunk
            await asyncio.sleep(0)

    async def _transfer(
        self,
        session: aiohttp.ClientSession,
        server: Server,
        stats: ConnectionStats,
    ) -> None:
        async with session.post(server.upload_url, data=self._stream(stats)) as resp:
            await resp.read()
