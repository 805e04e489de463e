"""Logging configuration for the measurement agent."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide diagnostic logging.

    Diagnostics go to stderr through ``RichHandler`` so they stay apart from
    the progress lines the dashboard prints on stdout.  Unknown level names
    fall back to INFO.
    """
    log_level = _LEVELS.get(str(level).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(name)s: %(message)s",
        datefmt="[%Y-%m-%d %H:%M:%S]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured: level=%s", logging.getLevelName(log_level))
