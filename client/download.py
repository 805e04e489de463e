"""
Download speed test module.

Each worker opens a long-running HTTPS GET against the server's
``/download`` endpoint and reads ``CHUNK_SIZE`` chunks until the test
window closes.
"""
from __future__ import annotations

import asyncio

import aiohttp

from .api import Server
from .constants import CHUNK_SIZE, COMMON_HEADERS, DOWNLOAD_FILE_SIZE
from .stats import ConnectionStats
from .transfer import TransferTester


class DownloadTester(TransferTester):
    """Parallel download speed tester."""

    direction = "download"
    headers = {**COMMON_HEADERS, "Accept-Encoding": "identity"}

    async def _transfer(
        self,
        session: aiohttp.ClientSession,
        server: Server,
        stats: ConnectionStats,
    ) -> None:
        url = f"{server.download_url}?size={DOWNLOAD_FILE_SIZE}"
        async with session.get(url) as resp:
            resp.raise_for_status()
            while self._running():
                try:
                    chunk = await asyncio.wait_for(
                        resp.content.read(CHUNK_SIZE),
                        timeout=1.0,
                    )
                except asyncio.TimeoutError:
                    continue
                if not chunk:
                    break
                self._count(stats, len(chunk))
