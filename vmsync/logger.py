"""Level-filtered, colorized log output for vmsync."""

import sys
import threading
from collections.abc import Iterable
from enum import IntEnum
from typing import IO, Optional

from rich.console import Console
from rich.text import Text


class LogLevel(IntEnum):
    """Log levels in ascending rank. INSTRUCTIONS is always the highest."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    INSTRUCTIONS = 4


LEVEL_NAMES = [level.name for level in LogLevel]

_LEVEL_STYLES = {
    LogLevel.DEBUG: "blue",
    LogLevel.INFO: "green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.INSTRUCTIONS: "bold magenta",
}


def parse_log_level(value: str | LogLevel) -> LogLevel:
    """
    Parse a log level name.

    Args:
        value: Level name (case-insensitive) or LogLevel.

    Returns:
        Matching LogLevel.

    Raises:
        ValueError: If the name is not a known level.
    """
    if isinstance(value, LogLevel):
        return value
    try:
        return LogLevel[value.strip().upper()]
    except KeyError:
        raise ValueError(f"Invalid log level '{value}', expected one of: {', '.join(LEVEL_NAMES)}") from None


def _printable(message: str) -> str:
    """Replace undecodable filename bytes so any console encoding accepts the message."""
    try:
        raw = message.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = message.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


class Logger:
    """Rich console log sink with a level threshold."""

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        console: Optional[Console] = None,
        colored: bool = True,
    ):
        """Initialize logger.

        Args:
            level: Threshold; messages ranked below it are suppressed
            console: Rich Console instance
            colored: Enable colored output
        """
        self.level = level
        self.console = console or Console(no_color=not colored, highlight=False)
        self._lock = threading.Lock()

    def set_level(self, level: str | LogLevel) -> None:
        """Change the threshold."""
        self.level = parse_log_level(level)

    def is_enabled(self, level: LogLevel) -> bool:
        """Check whether a message at level would be emitted."""
        return level >= self.level

    def log(self, level: LogLevel, message: Optional[str] = None, stream: Optional[IO[str]] = None) -> None:
        """Log a message, or every line of a stream when no message is given.

        Args:
            level: Message level
            message: Literal message
            stream: Line-oriented input read when message is None (default stdin)
        """
        if message is not None:
            self.log_lines(level, [message])
            return

        for line in stream if stream is not None else sys.stdin:
            self.log_lines(level, [line.rstrip("\r\n")])

    def log_lines(self, level: LogLevel, lines: Iterable[str]) -> None:
        """Emit lines as one uninterrupted block."""
        if not self.is_enabled(level):
            return

        with self._lock:
            for line in lines:
                self.console.print(self._format(level, line), markup=False, highlight=False, soft_wrap=True)

    def _format(self, level: LogLevel, message: str) -> Text:
        text = Text()
        text.append(f"[{level.name}]", style=_LEVEL_STYLES[level])
        text.append(f" {_printable(message)}")
        return text

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        self.log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def instructions(self, message: str) -> None:
        self.log(LogLevel.INSTRUCTIONS, message)
