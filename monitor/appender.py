"""
Size-capped, retrying line appender for the result logs.

Every append checks the target file's size first; a file above the ceiling
is a hard stop.  Otherwise the write is attempted up to ``attempts`` times,
``backoff`` seconds apart, and the last error is re-raised once all attempts
are used up.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

MAX_LOG_BYTES = 100 * 1024 * 1024
DEFAULT_ATTEMPTS = 5
DEFAULT_BACKOFF = 1.0


class LogFileTooLargeError(IOError):
    """The log file has grown past the size ceiling."""


class RetryingAppender:
    def __init__(
        self,
        max_bytes: int = MAX_LOG_BYTES,
        attempts: int = DEFAULT_ATTEMPTS,
        backoff: float = DEFAULT_BACKOFF,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.max_bytes = max_bytes
        self.attempts = attempts
        self.backoff = backoff
        self._sleep = sleep

    def _check_size(self, path: str) -> None:
        try:
            size = os.stat(path).st_size
        except OSError:
            # Missing or unreadable; the write attempts below report real errors.
            size = 0
        if size > self.max_bytes:
            raise LogFileTooLargeError(f"File {path} is too large (limit {self.max_bytes} bytes)")

    async def append(self, path: str, line: str) -> None:
        """Append *line* plus a newline to *path*, creating the file if needed."""
        self._check_size(path)

        for attempt in range(1, self.attempts + 1):
            try:
                with open(path, "a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
                return
            except Exception as exc:
                if attempt == self.attempts:
                    logger.error("Giving up on %s after %d attempts: %s", path, attempt, exc)
                    raise
                logger.warning(
                    "Write to %s failed (attempt %d/%d): %s", path, attempt, self.attempts, exc
                )
                await self._sleep(self.backoff)
