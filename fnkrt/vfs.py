"""A virtual file system over the host's directories and files."""

from __future__ import annotations

import os
from typing import BinaryIO, Iterator, Optional

from fnkrt.errc import ERRC_BASE, ErrorTable, FnkError

#: The directory to open does not exist or is not a directory.
ERRC_DIR_NOT_FOUND = ERRC_BASE + 0
#: The directory could not be closed.
ERRC_DIR_FAILED_CLOSE = ERRC_BASE + 1
#: The directory holds no further regular files.
ERRC_DIR_NO_NEXT = ERRC_BASE + 2
#: The file to open does not exist or cannot be opened.
ERRC_FILE_NOT_FOUND = ERRC_BASE + 3
#: The file could not be closed.
ERRC_FILE_FAILED_CLOSE = ERRC_BASE + 4

#: First code available to a particular file system implementation.
ERRC_DEF_BASE = ERRC_FILE_FAILED_CLOSE + 1

#: A file found while walking a directory could not be opened.
ERRC_DIRNEXT_FILE_FAIL_OPEN = ERRC_DEF_BASE + 0

_ALT_ERRORS = ErrorTable(
    messages=("Failed to open determined file",),
    base=ERRC_DEF_BASE,
)

_ERRORS = ErrorTable(
    messages=(
        "Directory not found on attempted open",
        "Failed to close directory",
        "Failed to get next file in directory",
        "File not found on attempted open",
        "Failed to close file",
    ),
    fallback=_ALT_ERRORS.describe,
)


def errctostr(errc: int) -> Optional[str]:
    """Return the message for a file system error code, ``"Ok"``, or ``None``."""
    return _ERRORS.describe(errc)


class VfsError(FnkError):
    """A file system operation failed."""

    def __init__(self, errc: int) -> None:
        super().__init__(errc, errctostr(errc))


class VfsFile:
    """An open file read from a tracked position that starts at byte 0."""

    def __init__(self, handle: BinaryIO, path: str) -> None:
        self._handle = handle
        self.path = path

    @property
    def closed(self) -> bool:
        """Whether the file has been closed."""
        return self._handle.closed

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer come back at the end of the file."""
        if size < 0:
            raise ValueError("size must not be negative")
        return self._handle.read(size)

    def seek(self, offset: int) -> None:
        """Move the read position to ``offset`` bytes from the start."""
        if offset < 0:
            raise ValueError("offset must not be negative")
        self._handle.seek(offset, os.SEEK_SET)

    def close(self) -> None:
        """Close the file."""
        try:
            self._handle.close()
        except OSError:
            raise VfsError(ERRC_FILE_FAILED_CLOSE) from None

    def __enter__(self) -> "VfsFile":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class Directory:
    """An open directory whose regular files can be walked one by one."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._entries = self._scan()

    def _scan(self) -> "os._ScandirIterator[str]":
        try:
            return os.scandir(self.path)
        except OSError:
            raise VfsError(ERRC_DIR_NOT_FOUND) from None

    def close(self) -> None:
        """Close the directory."""
        try:
            self._entries.close()
        except OSError:
            raise VfsError(ERRC_DIR_FAILED_CLOSE) from None

    def enumerate(self) -> None:
        """Start walking the directory from its first entry."""
        self._entries.close()
        self._entries = self._scan()

    def next_file(self) -> VfsFile:
        """Open and return the next regular file in the directory."""
        for entry in self._entries:
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            try:
                handle = open(entry.path, "rb")
            except OSError:
                raise VfsError(ERRC_DIRNEXT_FILE_FAIL_OPEN) from None
            return VfsFile(handle, entry.path)
        raise VfsError(ERRC_DIR_NO_NEXT)

    def __iter__(self) -> Iterator[VfsFile]:
        while True:
            try:
                yield self.next_file()
            except VfsError as err:
                if err.errc == ERRC_DIR_NO_NEXT:
                    return
                raise

    def __enter__(self) -> "Directory":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class Vfs:
    """Entry point of the file system: opens directories and files by path."""

    def __init__(self) -> None:
        self.active = False

    def init(self) -> None:
        """Bring the file system up."""
        self.active = True

    def fini(self) -> None:
        """Shut the file system down."""
        self.active = False

    def open_dir(self, path: str) -> Directory:
        """Open the directory at ``path``."""
        return Directory(os.fspath(path))

    def open_file(self, path: str) -> VfsFile:
        """Open the file at ``path`` for reading from its first byte."""
        path = os.fspath(path)
        try:
            handle = open(path, "rb")
        except OSError:
            raise VfsError(ERRC_FILE_NOT_FOUND) from None
        return VfsFile(handle, path)