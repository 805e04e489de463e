"""Ping sampling: a batch of echo probes reduced to one average."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from client.constants import ICMP_PAYLOAD
from client.icmp import EchoReply, EchoStatus
from client.stats import truncated_mean

logger = logging.getLogger(__name__)

DEFAULT_HOSTS = ("1.1.1.1", "8.8.8.8", "1.0.0.1", "8.8.4.4")

# Statuses that count as a lost probe and are charged the full timeout.
PENALTY_STATUSES = frozenset({
    EchoStatus.TIMED_OUT,
    EchoStatus.TIME_EXCEEDED,
    EchoStatus.TTL_EXPIRED,
    EchoStatus.DESTINATION_UNREACHABLE,
    EchoStatus.DESTINATION_HOST_UNREACHABLE,
    EchoStatus.DESTINATION_PORT_UNREACHABLE,
    EchoStatus.DESTINATION_NETWORK_UNREACHABLE,
    EchoStatus.DESTINATION_PROTOCOL_UNREACHABLE,
})


class Echo(Protocol):
    """Protocol for anything that can send one ICMP echo."""

    async def echo(self, host: str, timeout_ms: int, payload: bytes = ICMP_PAYLOAD) -> EchoReply:
        ...


class HostRotation:
    """Cycles through a fixed host list, one step per call, wrapping around."""

    def __init__(self, hosts: Sequence[str] = DEFAULT_HOSTS, start: int = 3) -> None:
        if not hosts:
            raise ValueError("HostRotation needs at least one host")
        self.hosts = tuple(hosts)
        self._index = start

    def next(self) -> str:
        self._index = (self._index + 1) % len(self.hosts)
        return self.hosts[self._index]


class PingSampler:
    def __init__(
        self,
        echo: Echo,
        attempts: int = 5,
        timeout_ms: int = 2048,
        payload: bytes = ICMP_PAYLOAD,
    ) -> None:
        self.echo = echo
        self.attempts = attempts
        self.timeout_ms = timeout_ms
        self.payload = payload

    async def sample(self, host: str) -> Optional[int]:
        """Probe *host* ``attempts`` times; None means inconclusive.

        Successful probes contribute their round-trip time, lost probes
        contribute ``timeout_ms``, and any other status contributes nothing.
        """
        samples: List[int] = []

        for _ in range(self.attempts):
            reply = await self.echo.echo(host, self.timeout_ms, self.payload)
            if reply.status is EchoStatus.SUCCESS:
                samples.append(reply.round_trip_ms)
            elif reply.status in PENALTY_STATUSES:
                samples.append(self.timeout_ms)
            else:
                logger.debug("Dropping %s probe to %s", reply.status.value, host)

        if not samples:
            return None
        return truncated_mean(samples)
