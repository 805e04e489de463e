"""
Network measurement statistics.

Pure functions and lightweight dataclasses -- no I/O, no side effects.
Everything here is deterministic and easy to unit-test.

Throughput is expressed in Kbps (1 Kbps = 1000 bit/s) throughout, matching
what the measurement loop logs.
"""
from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from typing import List


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ConnectionStats:
    """Per-connection statistics collected by download / upload workers."""

    id: int = 0
    hostname: str = ""
    bytes_transferred: int = 0
    duration_ms: float = 0.0
    speed_kbps: float = 0.0

    def calculate(self) -> None:
        self.speed_kbps = kbps(self.bytes_transferred, self.duration_ms)


@dataclass
class TransferResult:
    """Download or upload test result."""

    speed_kbps: float = 0.0
    bytes_total: int = 0
    duration_ms: float = 0.0
    connections: List[ConnectionStats] = field(default_factory=list)
    samples: List[float] = field(default_factory=list)

    def calculate(self) -> None:
        """Derive speed from total bytes and wall-clock duration."""
        self.speed_kbps = kbps(self.bytes_total, self.duration_ms)

    def calculate_from_samples(self) -> None:
        """Use interquartile mean of speed samples for a more stable result."""
        trimmed = calculate_iqm(self.samples)
        if trimmed > 0:
            self.speed_kbps = trimmed
        else:
            self.calculate()


# ---------------------------------------------------------------------------
# Pure helper functions
# ---------------------------------------------------------------------------

def kbps(byte_count: int, duration_ms: float) -> float:
    """Bits per millisecond is the same number as kilobits per second."""
    if duration_ms <= 0:
        return 0.0
    return (byte_count * 8) / duration_ms


def calculate_iqm(samples: List[float]) -> float:
    """Interquartile mean -- mean of values between Q1 and Q3."""
    if not samples:
        return 0.0
    if len(samples) < 4:
        return statistics.mean(samples)

    ordered = sorted(samples)
    n = len(ordered)
    middle = ordered[n // 4 : (3 * n) // 4]
    return statistics.mean(middle) if middle else statistics.mean(samples)


def truncated_mean(samples: List[int]) -> int:
    """Arithmetic mean of non-negative samples, truncated to an integer."""
    return int(sum(samples) // len(samples))


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_decimal(value: float) -> str:
    """Round to two places and drop trailing zeros (``4.80`` -> ``4.8``)."""
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_speed(speed_kbps: float) -> str:
    """Human-readable speed string, switching to Mbps above 1024 Kbps."""
    if speed_kbps > 1024:
        return f"{format_decimal(speed_kbps / 1024)} Mbps"
    return f"{format_decimal(speed_kbps)} Kbps"
