"""Byte swapping, alignment and raw memory helpers."""

from __future__ import annotations

_MASK16 = 0xFFFF
_MASK32 = 0xFFFF_FFFF
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF


def bswap(data: bytes | bytearray | memoryview) -> bytes:
    """Return ``data`` with its byte order reversed."""
    return bytes(reversed(bytes(data)))


def _swap(value: int, size: int, mask: int) -> int:
    return int.from_bytes((value & mask).to_bytes(size, "little"), "big")


def bswap16(value: int) -> int:
    """Reverse the byte order of a 16-bit unsigned value."""
    return _swap(value, 2, _MASK16)


def bswap32(value: int) -> int:
    """Reverse the byte order of a 32-bit unsigned value."""
    return _swap(value, 4, _MASK32)


def bswap64(value: int) -> int:
    """Reverse the byte order of a 64-bit unsigned value."""
    return _swap(value, 8, _MASK64)


def alignp2(value: int, toalign: int) -> int:
    """Round ``value`` up to a multiple of ``toalign``, a power of two.

    The result is meaningless when ``toalign`` is not a power of two.
    """
    return (value + toalign - 1) & ~(toalign - 1)


def memcpy(dest: bytearray | memoryview, src: bytes | bytearray | memoryview, length: int) -> None:
    """Copy the first ``length`` bytes of ``src`` into the start of ``dest``."""
    if length < 0 or length > len(dest) or length > len(src):
        raise ValueError("copy length exceeds a buffer")
    dest[:length] = bytes(src[:length])


def memset(dest: bytearray | memoryview, val: int, length: int) -> None:
    """Fill the first ``length`` bytes of ``dest`` with the byte ``val``."""
    if length < 0 or length > len(dest):
        raise ValueError("fill length exceeds the buffer")
    dest[:length] = bytes([val & 0xFF]) * length