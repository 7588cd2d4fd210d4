"""Small arithmetic and string helpers."""

from __future__ import annotations


def ispowertwo(x: int) -> bool:
    """Return whether ``x`` is a positive power of two."""
    return x > 0 and not (x & (x - 1))


def minimum(a: int, b: int) -> int:
    """Return the smaller of two values."""
    return b if a > b else a


def maximum(a: int, b: int) -> int:
    """Return the larger of two values."""
    return a if a > b else b


def strlen(data: str | bytes | bytearray) -> int:
    """Return the length of ``data`` up to its first NUL, or its full length."""
    terminator = "\0" if isinstance(data, str) else b"\0"
    end = data.find(terminator)
    return len(data) if end < 0 else end