"""UI layer -- Rich console output and log-row formatters."""

from .dashboard import Dashboard, console
from .output import (
    DELIMITER,
    TIME_FORMAT,
    format_ping_row,
    format_speed_row,
    format_timestamp,
)

__all__ = [
    "DELIMITER",
    "Dashboard",
    "TIME_FORMAT",
    "console",
    "format_ping_row",
    "format_speed_row",
    "format_timestamp",
]
