"""A minimal leveled logger writing printf-style messages to a stream."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Any, Optional, Sequence, TextIO


class LogLevel(IntEnum):
    """Built-in log levels."""

    INFO = 0
    WARNING = 1
    ERROR = 2


#: The highest built-in level.
LEVEL_BASE = LogLevel.ERROR

_DEFAULT_LABELS = {
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERRR",
}

#: Label used for a level that has no label.
UNRECOGNIZED_LABEL = "URECLVL"


class Logger:
    """Writes ``[LABEL] message`` lines to ``dest`` (standard output if ``None``).

    Levels above the built-in ones take their label from ``alt_labels``,
    indexed by the level itself.
    """

    def __init__(self, dest: Optional[TextIO] = None, alt_labels: Sequence[str] = ()) -> None:
        self.dest = dest
        self.alt_labels = tuple(alt_labels)

    def label(self, level: int) -> str:
        """Return the label printed for ``level``."""
        if 0 <= level < len(_DEFAULT_LABELS):
            return _DEFAULT_LABELS[LogLevel(level)]
        if 0 <= level < len(self.alt_labels):
            return self.alt_labels[level]
        return UNRECOGNIZED_LABEL

    def log(self, level: int, format: str, *args: Any) -> None:
        """Write a message at ``level``, formatted printf-style with ``args``."""
        out = self.dest if self.dest is not None else sys.stdout
        out.write(f"[{self.label(level)}] ")
        out.write(format % args)

    def info(self, format: str, *args: Any) -> None:
        """Write an informational message."""
        self.log(LogLevel.INFO, format, *args)

    def warn(self, format: str, *args: Any) -> None:
        """Write a warning."""
        self.log(LogLevel.WARNING, format, *args)

    def error(self, format: str, *args: Any) -> None:
        """Write an error."""
        self.log(LogLevel.ERROR, format, *args)