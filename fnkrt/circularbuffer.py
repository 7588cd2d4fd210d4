"""A fixed-size byte ring buffer that keeps one slot free."""

from __future__ import annotations


class BufferOverflowError(Exception):
    """A read or write would go past the data or space in the buffer."""


class CircularBuffer:
    """Byte ring buffer of ``length`` bytes holding at most ``length - 1``."""

    def __init__(self, length: int) -> None:
        if length < 1:
            raise ValueError("buffer length must be at least 1")
        self.length = length
        self._buffer = bytearray(length)
        self._writei = 0
        self._readi = 0

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Append ``data``; raise BufferOverflowError if it does not fit."""
        data = bytes(data)
        size = len(data)
        if self._writei >= self._readi:
            used = self._writei - self._readi
            free_until_wrap = self.length - self._writei
        else:
            used = self.length - self._readi + self._writei
            free_until_wrap = self._readi - self._writei
        free = self.length - used - 1

        if free < size:
            raise BufferOverflowError(f"cannot write {size} bytes, {free} free")

        if size >= free_until_wrap:
            self._buffer[self._writei:self.length] = data[:free_until_wrap]
            self._writei = size - free_until_wrap
            self._buffer[:self._writei] = data[free_until_wrap:]
        else:
            self._buffer[self._writei:self._writei + size] = data
            self._writei += size

    def read(self, length: int) -> bytes:
        """Remove and return ``length`` bytes; raise BufferOverflowError if fewer are held."""
        if self._writei >= self._readi:
            used = used_until_wrap = self._writei - self._readi
        else:
            used = self.length - self._readi + self._writei
            used_until_wrap = self.length - self._readi

        if used < length:
            raise BufferOverflowError(f"cannot read {length} bytes, {used} held")

        if length > used_until_wrap:
            out = bytes(self._buffer[self._readi:self._readi + used_until_wrap])
            out += bytes(self._buffer[:length - used_until_wrap])
        else:
            out = bytes(self._buffer[self._readi:self._readi + length])
        self._readi = (self._readi + length) % self.length
        return out

    def is_empty(self) -> bool:
        """Return whether no bytes are held."""
        return self._readi == self._writei

    def is_full(self) -> bool:
        """Return whether no more bytes fit."""
        return (self._writei + 1) % self.length == self._readi

    def used(self) -> int:
        """Return the number of bytes held."""
        if self._writei >= self._readi:
            return self._writei - self._readi
        return self.length - self._readi + self._writei