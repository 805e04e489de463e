"""
Log-row formatting -- flat ``;``-separated lines for the two result files.
"""
from __future__ import annotations

from datetime import datetime

from client.stats import format_decimal
from monitor.models import PingOutcome, SpeedTestOutcome

DELIMITER = ";"

# Day.month.year with a 12-hour clock, the format the existing logs use.
TIME_FORMAT = "%d.%m.%Y %I:%M:%S"


def format_timestamp(ts: datetime) -> str:
    return ts.strftime(TIME_FORMAT)


def format_speed_row(outcome: SpeedTestOutcome) -> str:
    """``timestamp;down;up;sponsor name;latency``, speeds in Kbps / 1024.

    With no server the last two fields are left empty.
    """
    fields = [
        format_timestamp(outcome.timestamp),
        format_decimal(outcome.download_kbps / 1024),
        format_decimal(outcome.upload_kbps / 1024),
    ]
    if outcome.server is None:
        fields += ["", ""]
    else:
        fields += [f"{outcome.server.sponsor} {outcome.server.name}", str(outcome.server.latency_ms)]
    return DELIMITER.join(fields)


def format_ping_row(outcome: PingOutcome) -> str:
    """``timestamp;average;host``; only numeric outcomes are ever written."""
    if outcome.average_ms is None:
        raise ValueError("An inconclusive ping outcome has no log row")
    return DELIMITER.join([format_timestamp(outcome.timestamp), str(outcome.average_ms), outcome.host])
