"""Boot telemetry: a text stream for diagnostics, with leveled helpers."""

from __future__ import annotations

import inspect
import os
import sys
from typing import Any, Optional, TextIO

from fnkrt import config


class Telemetry:
    """Writes diagnostic text to ``stream`` (standard output if ``None``).

    The leveled helpers only write when ``verbose_level`` allows: errors
    from level 1, warnings from 2, informational messages from 3.
    Every writing method returns the number of characters written.
    """

    def __init__(self, stream: Optional[TextIO] = None, verbose_level: int = config.VERBOSE_LEVEL) -> None:
        self.stream = stream
        self.verbose_level = verbose_level

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def init(self) -> None:
        """Prepare the stream; telemetry to a text stream cannot fail to start."""
        self._out()

    def fini(self) -> None:
        """Flush everything written so far."""
        self._out().flush()

    def puts(self, text: str) -> int:
        """Write ``text`` followed by a newline."""
        return self._out().write(text + "\n")

    def putc(self, char: str) -> int:
        """Write a single character."""
        if len(char) != 1:
            raise ValueError("putc takes exactly one character")
        return self._out().write(char)

    def printf(self, format: str, *args: Any) -> int:
        """Write ``format`` formatted printf-style with ``args``."""
        return self._out().write(format % args)

    def _tagged(self, tag: str, minimum: int, format: str, args: tuple[Any, ...]) -> int:
        if self.verbose_level < minimum:
            return 0
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
        if caller is not None:
            filename = os.path.basename(caller.f_code.co_filename)
            line = caller.f_lineno
        else:
            filename, line = "?", 0
        return self.printf(f"[{tag} %s:%d]" + format, filename, line, *args)

    def info(self, format: str, *args: Any) -> int:
        """Write an informational message tagged with the caller's file and line."""
        return self._tagged("INF", 3, format, args)

    def warn(self, format: str, *args: Any) -> int:
        """Write a warning tagged with the caller's file and line."""
        return self._tagged("WRN", 2, format, args)

    def error(self, format: str, *args: Any) -> int:
        """Write an error tagged with the caller's file and line."""
        return self._tagged("ERR", 1, format, args)