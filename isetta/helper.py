"""Shared errors and a retry loop with exponential back-off."""

from __future__ import annotations

import time
from collections.abc import Callable

from .simplelogger import logger


class IsettaError(Exception):
    """Raised when setting up the network fails."""


class RetryError(IsettaError):
    """Raised when a retried action never succeeded."""


def retry(description: str, attempts: int, sleep: float, func: Callable[[], bool]) -> None:
    """Call ``func`` until it returns true, at most ``attempts`` times.

    ``sleep`` is the pause in seconds before the second attempt; it doubles
    after every further attempt. Raises RetryError when all attempts fail.
    """
    for attempt in range(attempts):
        if attempt > 0:
            logger.debug("%s: Trying %sst time, backing off for %ss", description, attempt, sleep)
            time.sleep(sleep)
            sleep *= 2
        if func():
            logger.debug("%s: Success", description)
            return
    raise RetryError(f"{description}: failed after {attempts} attempts")