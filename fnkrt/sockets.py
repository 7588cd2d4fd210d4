"""Sockets: a pair of ring buffers with mailboxes for tracking writes."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from fnkrt.circularbuffer import BufferOverflowError, CircularBuffer
from fnkrt.errc import ERRC_BASE, ErrorTable, FnkError

#: A read or write would go past the data or space in a buffer.
ERRC_RW_BUFFER_WOULD_OVERFLOW = ERRC_BASE + 0
#: Every mailbox of the socket is in use.
ERRC_NO_FREE_MAILBOXES = ERRC_BASE + 1

#: Number of mailbox entries each socket carries.
MBOX_COUNT = 5

_ERRORS = ErrorTable(
    messages=(
        "Attempted to write/read outside buffer",
        "No space to add mailbox entry",
    )
)


def errctostr(errc: int) -> Optional[str]:
    """Return the message for a socket error code, ``"Ok"``, or ``None``."""
    return _ERRORS.describe(errc)


class SocketError(FnkError):
    """A socket operation failed."""

    def __init__(self, errc: int) -> None:
        super().__init__(errc, errctostr(errc))


class MailboxStatus(IntEnum):
    """State of a mailbox entry."""

    FREE = 0
    WORKING = 1


class Socket:
    """A socket with a read buffer (server to user) and a write buffer (user to server).

    Each buffer holds one byte less than its length.
    """

    def __init__(self, readlen: int, writelen: int) -> None:
        self.read_buffer = CircularBuffer(readlen)
        self.write_buffer = CircularBuffer(writelen)
        self.mailboxes: list[MailboxStatus] = [MailboxStatus.FREE] * MBOX_COUNT
        self.ctx: Any = None

    def attach_context(self, ctx: Any) -> None:
        """Attach a driver context object to the socket."""
        self.ctx = ctx

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Queue ``data`` in the write buffer and return a free mailbox index.

        The caller watches ``mailboxes[index]`` and sets it back to
        ``MailboxStatus.FREE`` when done with it.
        """
        index = next(
            (i for i, status in enumerate(self.mailboxes) if status == MailboxStatus.FREE),
            None,
        )
        if index is None:
            raise SocketError(ERRC_NO_FREE_MAILBOXES)
        try:
            self.write_buffer.write(data)
        except BufferOverflowError:
            raise SocketError(ERRC_RW_BUFFER_WOULD_OVERFLOW) from None
        return index

    def read(self, length: int) -> bytes:
        """Take ``length`` bytes from the read buffer."""
        try:
            return self.read_buffer.read(length)
        except BufferOverflowError:
            raise SocketError(ERRC_RW_BUFFER_WOULD_OVERFLOW) from None

    def read_len(self) -> int:
        """Return the number of bytes waiting in the read buffer."""
        return self.read_buffer.used()

    def write_len(self) -> int:
        """Return the number of bytes waiting in the write buffer."""
        return self.write_buffer.used()