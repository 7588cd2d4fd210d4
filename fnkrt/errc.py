"""Error codes shared by every subsystem, and their descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

#: The code every subsystem uses for success.
ERRC_OK = 0

#: The first code a subsystem may use for its own errors.
ERRC_BASE = 1


class FnkError(Exception):
    """An error carrying a numeric error code."""

    def __init__(self, errc: int, message: Optional[str] = None) -> None:
        self.errc = errc
        self.message = message if message is not None else f"error code {errc}"
        super().__init__(self.message)


@dataclass(frozen=True)
class ErrorTable:
    """Maps error codes starting at ``base`` to human-readable messages.

    Codes below ``ERRC_BASE`` describe as ``"Ok"``. Codes outside the table
    are handed to ``fallback`` when one is given, otherwise they describe
    as ``None``.
    """

    messages: tuple[str, ...]
    base: int = ERRC_BASE
    fallback: Optional[Callable[[int], Optional[str]]] = None

    def describe(self, errc: int) -> Optional[str]:
        """Return the message for ``errc``, ``"Ok"`` for success, or ``None``."""
        if errc < ERRC_BASE:
            return "Ok"
        index = errc - self.base
        if 0 <= index < len(self.messages):
            return self.messages[index]
        if self.fallback is not None:
            return self.fallback(errc)
        return None