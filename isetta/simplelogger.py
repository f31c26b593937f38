"""A minimal levelled logger that writes plain lines to standard output."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Log levels; a message is shown when its level is at least the current one."""

    TRACE = 1
    DEBUG = 2
    INFO = 4
    WARN = 8
    ERROR = 16


LEVELS: dict[str, LogLevel] = {level.name.lower(): level for level in LogLevel}


def get_valid_log_levels() -> list[str]:
    """Return the names accepted as log levels in the configuration."""
    return list(LEVELS)


@dataclass
class SimpleLogger:
    """Writes ``Label: message`` lines for messages at or above ``current_level``."""

    current_level: LogLevel = LogLevel.TRACE
    stream: TextIO | None = None

    def _log(self, level: LogLevel, message: str, args: tuple) -> None:
        if self.current_level > level:
            return
        text = message % args if args else message
        out = self.stream if self.stream is not None else sys.stdout
        print(f"{level.name.capitalize()}: {text}", file=out)

    def trace(self, message: str, *args) -> None:
        self._log(LogLevel.TRACE, message, args)

    def debug(self, message: str, *args) -> None:
        self._log(LogLevel.DEBUG, message, args)

    def info(self, message: str, *args) -> None:
        self._log(LogLevel.INFO, message, args)

    def warn(self, message: str, *args) -> None:
        self._log(LogLevel.WARN, message, args)

    def error(self, message: str, *args) -> None:
        self._log(LogLevel.ERROR, message, args)


logger = SimpleLogger(LogLevel.TRACE)