"""The bootloader's main sequence and its memory dump."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from fnkrt.errc import FnkError
from fnkrt.telemetry import Telemetry
from fnkrt.vfs import Vfs, errctostr as vfs_errctostr

_MEMDUMP_FORMAT = "<III"


class ErrorHang(Exception):
    """The boot sequence stopped on an error and would hang here."""

    def __init__(self, errc: int, memdump: "MemDump") -> None:
        self.errc = errc
        self.memdump = memdump
        super().__init__(f"boot halted with error code {errc}")


@dataclass
class MemDump:
    """Error codes gathered during boot, for inspection after a failure."""

    telemetry_init_errc: int = 0
    vfs_init_errc: int = 0
    errcsum: int = 0

    def pack(self) -> bytes:
        """Return the dump as three packed little-endian unsigned 32-bit fields."""
        return struct.pack(
            _MEMDUMP_FORMAT,
            self.telemetry_init_errc & 0xFFFF_FFFF,
            self.vfs_init_errc & 0xFFFF_FFFF,
            self.errcsum & 0xFFFF_FFFF,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "MemDump":
        """Build a dump from the bytes :meth:`pack` produces."""
        return cls(*struct.unpack(_MEMDUMP_FORMAT, data))


class Bootloader:
    """Brings up telemetry and the file system, stopping on the first error."""

    def __init__(self, telemetry: Any = None, vfs: Any = None) -> None:
        self.telemetry = telemetry if telemetry is not None else Telemetry()
        self.vfs = vfs if vfs is not None else Vfs()
        self.memdump = MemDump()

    def _errorhang(self, errc: int) -> None:
        self.telemetry.error("Hanging due to error..\n")
        raise ErrorHang(errc, self.memdump)

    def error_and_sum(self, errc: int, errctostr: Callable[[int], Optional[str]]) -> None:
        """Add ``errc`` to the running sum and halt if the sum shows any error."""
        self.memdump.errcsum += errc
        if self.memdump.errcsum:
            self.telemetry.error("%s\n", errctostr(errc))
            self._errorhang(errc)

    def run(self) -> MemDump:
        """Run the boot sequence and return the memory dump."""
        try:
            self.telemetry.init()
            self.memdump.telemetry_init_errc = 0
        except FnkError as err:
            # Boot carries on without telemetry.
            self.memdump.telemetry_init_errc = err.errc

        try:
            self.vfs.init()
            self.memdump.vfs_init_errc = 0
        except FnkError as err:
            self.memdump.vfs_init_errc = err.errc
        self.memdump.errcsum += self.memdump.vfs_init_errc
        self.error_and_sum(self.memdump.vfs_init_errc, vfs_errctostr)
        return self.memdump


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the bootloader; return 0 on success and 1 if it halted."""
    try:
        Bootloader().run()
    except ErrorHang:
        return 1
    return 0