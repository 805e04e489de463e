"""Outcome records produced by one measurement cycle."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from client.api import Server, Settings


class MeasurementProvider(Protocol):
    """Protocol for the source of server catalogs and throughput numbers."""

    async def get_settings(self) -> Settings:
        ...

    async def test_server_latency(self, server: Server) -> int:
        ...

    async def test_download_speed(self, server: Server, threads: int) -> float:
        ...

    async def test_upload_speed(self, server: Server, threads: int) -> float:
        ...


@dataclass
class SpeedTestOutcome:
    """Result of one speed-test cycle.

    ``server`` is None when the cycle failed before a server was chosen; the
    row is still logged, with zero speeds and blank server fields.
    """

    timestamp: datetime
    download_kbps: float = 0.0
    upload_kbps: float = 0.0
    server: Optional[Server] = None


@dataclass
class PingOutcome:
    """Result of one ping sample; ``average_ms`` is None when inconclusive."""

    timestamp: datetime
    average_ms: Optional[int]
    host: str

    @property
    def inconclusive(self) -> bool:
        return self.average_ms is None
