"""
WebSocket-based latency measurement using the Ookla Speedtest protocol.

Protocol flow::

    1. Connect to  wss://{hostname}:{port}/ws
    2. Receive  HELLO {version}
    3. Receive  YOURIP {ip}
    4. Receive  CAPABILITIES ...
    5. Send     PING {timestamp_ms}
    6. Receive  PONG {server_timestamp}
    7. Repeat 5-6 for the desired number of samples.
"""
from __future__ import annotations

import asyncio
import logging
import statistics
import time
from dataclasses import dataclass, field
from typing import List, Optional

import websockets
import websockets.exceptions

from .api import Server
from .constants import COMMON_HEADERS, LATENCY_PING_COUNT, LATENCY_TIMEOUT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------

_WS_CONNECT_TIMEOUT = 5.0   # seconds to establish the WS connection
_HANDSHAKE_TIMEOUT = 2.0     # max wait for HELLO/YOURIP/CAPABILITIES
_MSG_TIMEOUT = 0.5           # per-message timeout during handshake


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclass
class ServerLatencyResult:
    """Latency samples for one server."""

    server: Server
    pings: List[float] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None

    @property
    def latency_ms(self) -> int:
        """Mean round-trip in whole milliseconds; the probe timeout if none arrived."""
        if not self.success or not self.pings:
            return int(LATENCY_TIMEOUT * 1000)
        return int(statistics.mean(self.pings))


# ---------------------------------------------------------------------------
# Tester
# ---------------------------------------------------------------------------

class LatencyTester:
    """Test ping latency to an Ookla server over WebSocket."""

    def __init__(
        self,
        ping_count: int = LATENCY_PING_COUNT,
        timeout: float = LATENCY_TIMEOUT,
    ) -> None:
        self.ping_count = ping_count
        self.timeout = timeout

    async def test_server(self, server: Server) -> ServerLatencyResult:
        result = ServerLatencyResult(server=server)

        try:
            async with websockets.connect(
                server.ws_url,
                additional_headers=COMMON_HEADERS,
                ping_interval=None,
                close_timeout=2,
                open_timeout=_WS_CONNECT_TIMEOUT,
            ) as ws:
                await self._read_handshake(ws)

                for _ in range(self.ping_count):
                    rtt = await self._ping_once(ws)
                    if rtt is not None:
                        result.pings.append(rtt)

        except asyncio.TimeoutError:
            result.success = False
            result.error = "Connection timeout"
        except (websockets.exceptions.WebSocketException, ConnectionError, OSError) as exc:
            result.success = False
            result.error = str(exc)

        if result.error:
            logger.debug("Latency probe to %s failed: %s", server.hostname, result.error)
        return result

    # -- Internals ----------------------------------------------------------

    @staticmethod
    async def _read_handshake(ws) -> None:  # noqa: ANN001
        """Consume HELLO / YOURIP / CAPABILITIES messages."""
        start = time.perf_counter()
        received = 0

        while time.perf_counter() - start < _HANDSHAKE_TIMEOUT:
            try:
                await asyncio.wait_for(ws.recv(), timeout=_MSG_TIMEOUT)
            except asyncio.TimeoutError:
                break
            except (websockets.exceptions.WebSocketException, ConnectionError, OSError):
                break

            received += 1
            if received >= 3:
                break

    async def _ping_once(self, ws) -> Optional[float]:  # noqa: ANN001
        """Send PING, receive PONG, return the RTT in ms (None on failure)."""
        send_time = time.perf_counter() * 1000
        await ws.send(f"PING {int(send_time)}")

        try:
            msg = await asyncio.wait_for(ws.recv(), timeout=self.timeout)
        except asyncio.TimeoutError:
            return None

        if isinstance(msg, str) and msg.startswith("PONG"):
            return time.perf_counter() * 1000 - send_time
        return None
