"""Conversion of small ELF objects into the fnk program format."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from fnkrt import config
from fnkrt.elf import ElfFile, ElfFormatError, Relocation, Section, parse
from fnkrt.errc import ERRC_BASE, ErrorTable
from fnkrt.log import Logger

#: Bytes every fnk file starts with.
MAGIC = bytes([0xFE, 0xED]) + b"FNKY"

#: Sections that are carried over, in fnk order, with whether each is required.
SECTION_LAYOUT = (
    (".ljd", False),
    (".text", True),
    (".pjd", False),
    (".data", False),
    (".rodata", False),
    (".bss", False),
)

SYMTAB_ERRC_FAILED_ALLOCATE_MEMORY = ERRC_BASE + 0
SYMTAB_ERRC_FAILED_PARSE = ERRC_BASE + 1
SYMTAB_ERRC_FAILED_RETRIEVE_SIZE = ERRC_BASE + 2
SYMTAB_ERRC_COULDNT_FREE = ERRC_BASE + 3

LOADF_ERRC_FAILED_ALLOC = ERRC_BASE + 0
LOADF_ERRC_FAILED_PARSE = ERRC_BASE + 1
LOADF_ERRC_FAILED_GET_SIZE = ERRC_BASE + 2

_PROG = "elftofnk"

_SYMTAB_ERRORS = ErrorTable(
    messages=(
        "Could not allocate memory for symbol table",
        "Could not parse symbol table",
        "Failed to retrieve symbol table size",
        "Could not free symbol table (maybe it wasn't allocated in the first place?)",
    )
)

_LOADF_ERRORS = ErrorTable(
    messages=(
        "Failed to allocate enough memory",
        "Failed to parse table data",
        "Failed to get size of table/section (something is very wrong)",
    )
)


def symtab_errctostr(errc: int) -> Optional[str]:
    """Return the message for a symbol table error code, ``"Ok"``, or ``None``."""
    return _SYMTAB_ERRORS.describe(errc)


def loadf_errctostr(errc: int) -> Optional[str]:
    """Return the message for a table loading error code, ``"Ok"``, or ``None``."""
    return _LOADF_ERRORS.describe(errc)


class ConversionError(Exception):
    """The input cannot be turned into a fnk file."""


@dataclass
class MappedSection:
    """A section slot of the fnk format and the ELF section filling it."""

    name: str
    required: bool
    section: Optional[Section] = None
    relocations: tuple[Relocation, ...] = ()


def map_sections(elf: ElfFile, logger: Optional[Logger] = None) -> list[MappedSection]:
    """Match the sections of ``elf`` to the fnk section slots.

    Unknown sections are discarded with a warning; a missing required
    section raises ConversionError.
    """
    logger = logger if logger is not None else Logger()
    mapped = [MappedSection(name, required) for name, required in SECTION_LAYOUT]
    by_name = {slot.name: slot for slot in mapped}

    for section in elf.content_sections:
        slot = by_name.get(section.name)
        if slot is None:
            logger.warn('Unmapable section found with name "%s". Discarding\n', section.name)
            continue
        logger.info("Mapable section %s found\n", slot.name)
        slot.section = section
        if section.has_relocations:
            slot.relocations = tuple(section.relocations)

    for slot in mapped:
        if slot.section is None:
            if slot.required:
                raise ConversionError(f"Required section {slot.name} not found")
            logger.warn("Section %s was not found. Proceeding\n", slot.name)
    return mapped


def build_header(output_name: str, logger: Optional[Logger] = None) -> bytes:
    """Return the fnk descriptor: magic bytes and the zero-padded program name.

    The name is the base name of ``output_name``, cut to ``NAMESIZE`` bytes.
    """
    logger = logger if logger is not None else Logger()
    stripped = os.fspath(output_name).rstrip("/")
    base = os.path.basename(stripped) if stripped else "/"
    name = os.fsencode(base)[:config.NAMESIZE]
    logger.info("Set program name to %s\n", name.decode("utf-8", errors="replace"))
    return MAGIC + name.ljust(config.NAMESIZE, b"\0")


def _convert_elf(elf: ElfFile, output_name: str, logger: Logger) -> bytes:
    map_sections(elf, logger)
    return build_header(output_name, logger)


def convert(elf_data: bytes, output_name: str, logger: Optional[Logger] = None) -> bytes:
    """Convert the ELF object in ``elf_data`` and return the fnk file contents."""
    logger = logger if logger is not None else Logger()
    try:
        elf = parse(elf_data)
    except ElfFormatError as err:
        raise ConversionError(f"Not a valid object file: {err}") from err
    return _convert_elf(elf, output_name, logger)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Convert ``<inputelf>`` to ``<outputfnk>``; return 0 on success, 1 on failure."""
    args = list(sys.argv[1:] if argv is None else argv)
    logger = Logger()
    if len(args) != 2:
        logger.error("Incorrect format! Format should be %s <inputelf> <outputfnk>\n", _PROG)
        return 1
    input_path, output_path = args

    try:
        elf = parse(Path(input_path).read_bytes())
    except (OSError, ElfFormatError):
        logger.error("Failed to open file %s\n", input_path)
        return 1

    try:
        out = open(output_path, "wb")
    except OSError:
        logger.error("Failed to create handle to file %s\n", output_path)
        return 1

    with out:
        try:
            header = _convert_elf(elf, output_path, logger)
        except ConversionError as err:
            logger.error("%s\n", err)
            return 1
        try:
            out.write(header)
            out.flush()
        except OSError:
            logger.error("Failed to flush to file\n")
            return 1
    return 0