"""
Single ICMP echo probes via ``icmplib``.

One call to :meth:`IcmpEcho.echo` sends exactly one echo request and turns
whatever happened into an :class:`EchoReply` -- errors are reported as a
status, never raised.
"""
from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass

from icmplib import (
    AsyncSocket,
    DestinationUnreachable,
    ICMPLibError,
    ICMPRequest,
    ICMPv4Socket,
    ICMPv6Socket,
    NameLookupError,
    TimeExceeded,
    TimeoutExceeded,
    async_resolve,
    is_ipv4_address,
    is_ipv6_address,
)

from .constants import ICMP_PAYLOAD

logger = logging.getLogger(__name__)


class EchoStatus(enum.Enum):
    SUCCESS = "success"
    TIMED_OUT = "timed_out"
    TIME_EXCEEDED = "time_exceeded"
    TTL_EXPIRED = "ttl_expired"
    DESTINATION_UNREACHABLE = "destination_unreachable"
    DESTINATION_HOST_UNREACHABLE = "destination_host_unreachable"
    DESTINATION_PORT_UNREACHABLE = "destination_port_unreachable"
    DESTINATION_NETWORK_UNREACHABLE = "destination_network_unreachable"
    DESTINATION_PROTOCOL_UNREACHABLE = "destination_protocol_unreachable"
    BAD_DESTINATION = "bad_destination"
    GENERAL_FAILURE = "general_failure"


@dataclass
class EchoReply:
    status: EchoStatus
    round_trip_ms: int = 0


# ICMP "destination unreachable" codes, per address family.
_V4_UNREACHABLE = {
    0: EchoStatus.DESTINATION_NETWORK_UNREACHABLE,
    1: EchoStatus.DESTINATION_HOST_UNREACHABLE,
    2: EchoStatus.DESTINATION_PROTOCOL_UNREACHABLE,
    3: EchoStatus.DESTINATION_PORT_UNREACHABLE,
}
_V6_UNREACHABLE = {
    0: EchoStatus.DESTINATION_NETWORK_UNREACHABLE,
    3: EchoStatus.DESTINATION_HOST_UNREACHABLE,
    4: EchoStatus.DESTINATION_PORT_UNREACHABLE,
}


def status_from_error(exc: ICMPLibError) -> EchoStatus:
    """Map an icmplib exception onto an echo status."""
    if isinstance(exc, TimeoutExceeded):
        return EchoStatus.TIMED_OUT

    if isinstance(exc, TimeExceeded):
        # Code 0 is "TTL exceeded in transit" for both families.
        if exc.reply.code == 0:
            return EchoStatus.TTL_EXPIRED
        return EchoStatus.TIME_EXCEEDED

    if isinstance(exc, DestinationUnreachable):
        codes = _V6_UNREACHABLE if exc.reply.family == 6 else _V4_UNREACHABLE
        return codes.get(exc.reply.code, EchoStatus.DESTINATION_UNREACHABLE)

    if isinstance(exc, NameLookupError):
        return EchoStatus.BAD_DESTINATION

    return EchoStatus.GENERAL_FAILURE


class IcmpEcho:
    """Sends one echo request per call over an asynchronous icmplib socket."""

    def __init__(self, privileged: bool = False) -> None:
        self.privileged = privileged
        self._id = os.getpid() & 0xFFFF
        self._sequence = 0

    async def _address(self, host: str) -> str:
        if is_ipv4_address(host) or is_ipv6_address(host):
            return host
        return (await async_resolve(host))[0]

    async def echo(
        self,
        host: str,
        timeout_ms: int,
        payload: bytes = ICMP_PAYLOAD,
    ) -> EchoReply:
        self._sequence = (self._sequence + 1) & 0xFFFF

        try:
            address = await self._address(host)
            socket_cls = ICMPv6Socket if is_ipv6_address(address) else ICMPv4Socket
            request = ICMPRequest(
                destination=address,
                id=self._id,
                sequence=self._sequence,
                payload=payload,
            )
            with AsyncSocket(socket_cls(privileged=self.privileged)) as sock:
                sock.send(request)
                reply = await sock.receive(request, timeout_ms / 1000)
                reply.raise_for_status()
        except ICMPLibError as exc:
            status = status_from_error(exc)
            logger.debug("Echo to %s: %s (%s)", host, status.value, exc)
            return EchoReply(status=status)

        return EchoReply(
            status=EchoStatus.SUCCESS,
            round_trip_ms=int((reply.time - request.time) * 1000),
        )
