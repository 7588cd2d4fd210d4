"""Reading of ELF object files: sections, symbols and relocations."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional

#: The four bytes every ELF file starts with.
ELF_MAGIC = b"\x7fELF"

ELFCLASS32 = 1
ELFCLASS64 = 2
ELFDATA2LSB = 1
ELFDATA2MSB = 2

SHT_NULL = 0
SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHT_RELA = 4
SHT_NOBITS = 8
SHT_REL = 9

_BOOKKEEPING_TYPES = frozenset({SHT_NULL, SHT_SYMTAB, SHT_STRTAB, SHT_REL, SHT_RELA})
_IDENT_SIZE = 16


class ElfFormatError(ValueError):
    """The data is not a well-formed ELF file."""


@dataclass(frozen=True)
class Symbol:
    """An entry of the symbol table."""

    name: str
    value: int
    size: int
    info: int
    other: int
    shndx: int

    @property
    def binding(self) -> int:
        """The symbol binding (local, global, weak...)."""
        return self.info >> 4

    @property
    def kind(self) -> int:
        """The symbol type (object, function, section...)."""
        return self.info & 0xF


@dataclass(frozen=True)
class Relocation:
    """A relocation entry; ``addend`` is ``None`` for entries without one."""

    offset: int
    type: int
    symbol: int
    addend: Optional[int] = None


@dataclass(eq=False)
class Section:
    """A section with its contents and the relocations that apply to it."""

    name: str
    type: int
    flags: int
    address: int
    offset: int
    size: int
    link: int
    info: int
    alignment: int
    entsize: int
    data: bytes
    relocations: list[Relocation] = field(default_factory=list)

    @property
    def has_relocations(self) -> bool:
        """Whether any relocation applies to this section."""
        return bool(self.relocations)

    @property
    def is_content(self) -> bool:
        """Whether this section carries program content rather than bookkeeping."""
        return self.type not in _BOOKKEEPING_TYPES


class _Layout(NamedTuple):
    header: str
    section: str
    symbol: str
    rel: str
    rela: str
    info_shift: int
    type_mask: int
    symbol_fields: Callable[[tuple], tuple]


_LAYOUTS = {
    ELFCLASS64: _Layout(
        header="HHIQQQIHHHHHH",
        section="IIQQQQIIQQ",
        symbol="IBBHQQ",
        rel="QQ",
        rela="QQq",
        info_shift=32,
        type_mask=0xFFFF_FFFF,
        # name, info, other, shndx, value, size -> name, value, size, info, other, shndx
        symbol_fields=lambda f: (f[0], f[4], f[5], f[1], f[2], f[3]),
    ),
    ELFCLASS32: _Layout(
        header="HHIIIIIHHHHHH",
        section="IIIIIIIIII",
        symbol="IIIBBH",
        rel="II",
        rela="IIi",
        info_shift=8,
        type_mask=0xFF,
        symbol_fields=lambda f: f,
    ),
}


@dataclass(frozen=True)
class ElfFile:
    """A parsed ELF file."""

    bits: int
    byteorder: str
    type: int
    machine: int
    sections: tuple[Section, ...]
    symbols: tuple[Symbol, ...]

    @property
    def content_sections(self) -> list[Section]:
        """Sections carrying program content, in file order."""
        return [section for section in self.sections if section.is_content]

    def section(self, name: str) -> Section:
        """Return the first section called ``name``."""
        for section in self.sections:
            if section.name == name:
                return section
        raise KeyError(name)


def _unpack(data: bytes, fmt: str, offset: int) -> tuple:
    layout = struct.Struct(fmt)
    if offset < 0 or offset + layout.size > len(data):
        raise ElfFormatError(f"truncated file: need {layout.size} bytes at offset {offset}")
    return layout.unpack_from(data, offset)


def _slice(data: bytes, offset: int, size: int) -> bytes:
    if offset < 0 or size < 0 or offset + size > len(data):
        raise ElfFormatError(f"section contents at {offset}+{size} run past the end of the file")
    return data[offset:offset + size]


def _cstring(table: bytes, offset: int) -> str:
    if not table:
        return ""
    if offset >= len(table):
        raise ElfFormatError(f"string offset {offset} outside its table")
    end = table.find(b"\0", offset)
    if end < 0:
        end = len(table)
    return table[offset:end].decode("utf-8", errors="replace")


def _entries(blob: bytes, fmt: str, entsize: int, skip_first: bool = False):
    layout = struct.Struct(fmt)
    step = entsize if entsize >= layout.size else layout.size
    start = step if skip_first else 0
    for offset in range(start, len(blob) - layout.size + 1, step):
        yield layout.unpack_from(blob, offset)


def parse(data: bytes | bytearray | memoryview) -> ElfFile:
    """Parse an ELF file held in ``data``."""
    data = bytes(data)
    if len(data) < _IDENT_SIZE or data[:4] != ELF_MAGIC:
        raise ElfFormatError("not an ELF file")
    elf_class, encoding = data[4], data[5]
    if elf_class not in _LAYOUTS:
        raise ElfFormatError(f"unknown ELF class {elf_class}")
    if encoding not in (ELFDATA2LSB, ELFDATA2MSB):
        raise ElfFormatError(f"unknown data encoding {encoding}")
    prefix = "<" if encoding == ELFDATA2LSB else ">"
    layout = _LAYOUTS[elf_class]

    (e_type, e_machine, _version, _entry, _phoff, shoff, _flags, _ehsize,
     _phentsize, _phnum, shentsize, shnum, shstrndx) = _unpack(data, prefix + layout.header, _IDENT_SIZE)

    headers = []
    if shoff:
        if shentsize < struct.calcsize(prefix + layout.section):
            raise ElfFormatError(f"section header entry size {shentsize} too small")
        headers = [_unpack(data, prefix + layout.section, shoff + i * shentsize) for i in range(shnum)]

    contents = [
        b"" if sh_type in (SHT_NULL, SHT_NOBITS) else _slice(data, sh_offset, sh_size)
        for (_name, sh_type, _f, _a, sh_offset, sh_size, _l, _i, _al, _es) in headers
    ]
    names = contents[shstrndx] if 0 < shstrndx < len(contents) else b""

    sections = tuple(
        Section(
            name=_cstring(names, sh_name),
            type=sh_type,
            flags=sh_flags,
            address=sh_addr,
            offset=sh_offset,
            size=sh_size,
            link=sh_link,
            info=sh_info,
            alignment=sh_addralign,
            entsize=sh_entsize,
            data=blob,
        )
        for (sh_name, sh_type, sh_flags, sh_addr, sh_offset, sh_size, sh_link, sh_info,
             sh_addralign, sh_entsize), blob in zip(headers, contents)
    )

    symbols: tuple[Symbol, ...] = ()
    symtab = next((s for s in sections if s.type == SHT_SYMTAB), None)
    if symtab is not None:
        strtab = sections[symtab.link].data if 0 < symtab.link < len(sections) else b""
        symbols = tuple(
            Symbol(_cstring(strtab, name), value, size, info, other, shndx)
            for name, value, size, info, other, shndx in (
                layout.symbol_fields(raw)
                for raw in _entries(symtab.data, prefix + layout.symbol, symtab.entsize, skip_first=True)
            )
        )

    for section in sections:
        if section.type not in (SHT_REL, SHT_RELA):
            continue
        if not 0 < section.info < len(sections):
            continue
        target = sections[section.info]
        with_addend = section.type == SHT_RELA
        fmt = prefix + (layout.rela if with_addend else layout.rel)
        for raw in _entries(section.data, fmt, section.entsize):
            r_offset, r_info = raw[0], raw[1]
            target.relocations.append(
                Relocation(
                    offset=r_offset,
                    type=r_info & layout.type_mask,
                    symbol=r_info >> layout.info_shift,
                    addend=raw[2] if with_addend else None,
                )
            )

    return ElfFile(
        bits=64 if elf_class == ELFCLASS64 else 32,
        byteorder="little" if encoding == ELFDATA2LSB else "big",
        type=e_type,
        machine=e_machine,
        sections=sections,
        symbols=symbols,
    )