"""
Speedtest.net API client.

Handles server discovery.  All HTTP work goes through a single
``aiohttp.ClientSession`` managed via async-context-manager protocol
(``async with SpeedtestAPI() as api: ...``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import aiohttp

from .constants import COMMON_HEADERS, DEFAULT_CATALOG_SIZE, DEFAULT_CONNECTIONS, SERVERS_URL


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass
class Server:
    """A single Ookla speedtest server, as a candidate for testing.

    ``distance`` is in meters.  ``latency_ms`` starts at zero and is filled
    in by the latency probe during server selection.
    """

    id: int
    name: str
    sponsor: str
    country: str
    distance: float
    hostname: str = ""
    port: int = 8080
    url: str = ""
    latency_ms: int = 0

    # -- Constructors -------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> Server:
        host_raw = data.get("host", "")
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            sponsor=data.get("sponsor", ""),
            country=data.get("country", ""),
            # The JSON API reports kilometers.
            distance=float(data.get("distance", 0)) * 1000,
            hostname=data.get("hostname", host_raw.split(":")[0]),
            port=int(data.get("port", 8080)),
            url=data.get("url", ""),
        )

    # -- Derived values -----------------------------------------------------

    @property
    def distance_km(self) -> int:
        return int(self.distance) // 1000

    @property
    def ws_url(self) -> str:
        """WebSocket endpoint for latency testing."""
        return f"wss://{self.hostname}:{self.port}/ws?"

    @property
    def download_url(self) -> str:
        return f"https://{self.hostname}:{self.port}/download"

    @property
    def upload_url(self) -> str:
        return f"https://{self.hostname}:{self.port}/upload"


@dataclass
class Settings:
    """Test configuration for one speed-test cycle."""

    servers: List[Server] = field(default_factory=list)
    download_threads: int = DEFAULT_CONNECTIONS
    upload_threads: int = DEFAULT_CONNECTIONS


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

class SpeedtestAPI:
    """Async context-manager wrapping the Speedtest.net REST API."""

    def __init__(self) -> None:
        self._session: Optional[aiohttp.ClientSession] = None
        self.servers: List[Server] = []

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> SpeedtestAPI:
        self._session = aiohttp.ClientSession(headers=COMMON_HEADERS)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._session:
            await self._session.close()
            self._session = None

    # -- Internal helpers ---------------------------------------------------

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "SpeedtestAPI must be used as an async context manager "
                "(async with SpeedtestAPI() as api: ...)"
            )
        return self._session

    # -- Public methods -----------------------------------------------------

    async def fetch_servers(self, limit: int = DEFAULT_CATALOG_SIZE) -> List[Server]:
        """Return up to *limit* servers in the order speedtest.net lists them."""
        session = self._ensure_session()

        params = {
            "engine": "js",
            "https_functional": "true",
            "limit": str(limit),
        }

        async with session.get(SERVERS_URL, params=params) as resp:
            resp.raise_for_status()
            data = await resp.json()

        self.servers = [Server.from_dict(s) for s in data]
        return self.servers
