"""A socket server that services bound sockets round-robin."""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

from fnkrt.circularbuffer import BufferOverflowError
from fnkrt.errc import ERRC_BASE, ErrorTable, FnkError
from fnkrt.sockets import Socket

#: The socket to remove is not bound to the server.
ERRC_COULD_NOT_REMOVE_SOCKET = ERRC_BASE + 0
#: A read or write would go past the data or space in a buffer.
ERRC_RW_WOULDOVERFLOW = ERRC_BASE + 1
#: The server has no sockets to service.
ERRC_NO_SOCKETS_BOUND = ERRC_BASE + 2

_ERRORS = ErrorTable(
    messages=(
        "Can't remove a socket that is not bound",
        "Attempted to write/read outside buffer",
        "No sockets are bound to the server",
    )
)


def errctostr(errc: int) -> Optional[str]:
    """Return the message for a server error code, ``"Ok"``, or ``None``."""
    return _ERRORS.describe(errc)


class SockServError(FnkError):
    """A socket server operation failed."""

    def __init__(self, errc: int) -> None:
        super().__init__(errc, errctostr(errc))


class SocketServer:
    """Queue of bound sockets; each is serviced and then moved to the back."""

    def __init__(self) -> None:
        self._queue: deque[Socket] = deque()

    def next_in_queue(self) -> Socket:
        """Return the socket at the front of the queue and move it to the back."""
        if not self._queue:
            raise SockServError(ERRC_NO_SOCKETS_BOUND)
        socket = self._queue.popleft()
        self._queue.append(socket)
        return socket

    def bind(self, socket: Socket) -> None:
        """Add ``socket`` to the back of the queue."""
        self._queue.append(socket)

    def remove(self, socket: Socket) -> None:
        """Unbind ``socket``; its buffers are left untouched."""
        try:
            self._queue.remove(socket)
        except ValueError:
            raise SockServError(ERRC_COULD_NOT_REMOVE_SOCKET) from None

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, socket: object) -> bool:
        return socket in self._queue

    def __iter__(self) -> Iterator[Socket]:
        return iter(tuple(self._queue))


def read_write_buffer(socket: Socket, length: int) -> bytes:
    """Take ``length`` bytes that the user wrote to ``socket``."""
    try:
        return socket.write_buffer.read(length)
    except BufferOverflowError:
        raise SockServError(ERRC_RW_WOULDOVERFLOW) from None


def write_read_buffer(socket: Socket, data: bytes | bytearray | memoryview) -> None:
    """Put ``data`` into the read buffer of ``socket`` for the user to take."""
    try:
        socket.read_buffer.write(data)
    except BufferOverflowError:
        raise SockServError(ERRC_RW_WOULDOVERFLOW) from None