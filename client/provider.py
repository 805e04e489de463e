"""
Measurement provider backed by speedtest.net.

Wraps the API client and the latency / download / upload testers behind
four calls, returning plain numbers (ms, Kbps) so the measurement loop does
not need to know about sessions or result objects.
"""
from __future__ import annotations

from .api import Server, Settings, SpeedtestAPI
from .constants import DEFAULT_CATALOG_SIZE, DEFAULT_CONNECTIONS, DEFAULT_DURATION
from .download import DownloadTester
from .latency import LatencyTester
from .upload import UploadTester


class SpeedtestProvider:
    def __init__(
        self,
        catalog_size: int = DEFAULT_CATALOG_SIZE,
        connections: int = DEFAULT_CONNECTIONS,
        download_duration: float = DEFAULT_DURATION,
        upload_duration: float = DEFAULT_DURATION,
    ) -> None:
        self.catalog_size = catalog_size
        self.connections = connections
        self.download_duration = download_duration
        self.upload_duration = upload_duration
        self._latency = LatencyTester()

    async def get_settings(self) -> Settings:
        """Fetch a fresh server catalog; nothing is cached between calls."""
        async with SpeedtestAPI() as api:
            servers = await api.fetch_servers(limit=self.catalog_size)
        return Settings(
            servers=servers,
            download_threads=self.connections,
            upload_threads=self.connections,
        )

    async def test_server_latency(self, server: Server) -> int:
        result = await self._latency.test_server(server)
        return result.latency_ms

    async def test_download_speed(self, server: Server, threads: int) -> float:
        result = await DownloadTester(self.download_duration).test(server, connections=threads)
        return result.speed_kbps

    async def test_upload_speed(self, server: Server, threads: int) -> float:
        result = await UploadTester(self.upload_duration).test(server, connections=threads)
        return result.speed_kbps
