"""Jump descriptors: named tables of function slots a library exports."""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Optional, Sequence

from fnkrt import config, sockets, sockserv
from fnkrt.sockets import Socket
from fnkrt.sockserv import SocketServer


@dataclass(frozen=True)
class ProgramJumpDescriptor:
    """A named table of up to ``MAX_LIBFUNCTIONS`` function slots.

    Unused slots hold ``None``; the table is always padded to full size.
    """

    name: str
    functions: tuple[Optional[Callable[..., Any]], ...] = ()

    def __post_init__(self) -> None:
        if len(self.name) > config.NAMESIZE:
            raise ValueError(f"name longer than {config.NAMESIZE} characters")
        slots: Sequence[Optional[Callable[..., Any]]] = tuple(self.functions)
        if len(slots) > config.MAX_LIBFUNCTIONS:
            raise ValueError(f"more than {config.MAX_LIBFUNCTIONS} functions")
        padded = tuple(slots) + (None,) * (config.MAX_LIBFUNCTIONS - len(slots))
        object.__setattr__(self, "functions", padded)

    def function(self, index: int) -> Callable[..., Any]:
        """Return the callable in slot ``index``."""
        if not 0 <= index < config.MAX_LIBFUNCTIONS:
            raise IndexError(f"slot {index} out of range")
        func = self.functions[index]
        if func is None:
            raise LookupError(f"slot {index} is empty")
        return func


def library_jump_descriptor() -> ProgramJumpDescriptor:
    """Return the jump descriptor the socket library exports, in slot order.

    Slots that report structure sizes have no meaning here and are empty.
    """
    return ProgramJumpDescriptor(
        name="fnk",
        functions=(
            Socket,
            sockets.errctostr,
            None,
            Socket.attach_context,
            Socket.write,
            Socket.read,
            Socket.read_len,
            Socket.write_len,
            attrgetter("ctx"),
            SocketServer,
            sockserv.errctostr,
            None,
            SocketServer.next_in_queue,
            SocketServer.bind,
            SocketServer.remove,
            sockserv.read_write_buffer,
            sockserv.write_read_buffer,
        ),
    )