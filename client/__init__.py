"""Speedtest client library -- networking, measurement, and statistics."""

from .api import Server, Settings, SpeedtestAPI
from .download import DownloadTester
from .icmp import EchoReply, EchoStatus, IcmpEcho
from .latency import LatencyTester, ServerLatencyResult
from .provider import SpeedtestProvider
from .stats import (
    ConnectionStats,
    TransferResult,
    calculate_iqm,
    format_decimal,
    format_speed,
    truncated_mean,
)
from .upload import UploadTester

__all__ = [
    "ConnectionStats",
    "DownloadTester",
    "EchoReply",
    "EchoStatus",
    "IcmpEcho",
    "LatencyTester",
    "Server",
    "ServerLatencyResult",
    "Settings",
    "SpeedtestAPI",
    "SpeedtestProvider",
    "TransferResult",
    "UploadTester",
    "calculate_iqm",
    "format_decimal",
    "format_speed",
    "truncated_mean",
]
