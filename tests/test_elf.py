import struct

import pytest

from fnkrt.elf import ELF_MAGIC, ElfFormatError, Relocation, parse


def build_elf(sections, bits=64, order="<"):
    entries_in = list(sections)
    names = b"\0"
    name_offsets = []
    for sec in entries_in + [{"name": ".shstrtab"}]:
        name_offsets.append(len(names))
        names += sec["name"].encode() + b"\0"
    entries = entries_in + [{"name": ".shstrtab", "type": 3, "data": names}]
    ehsize = 64 if bits == 64 else 52
    shfmt = order + ("IIQQQQIIQQ" if bits == 64 else "I" * 10)
    shsize = struct.calcsize(shfmt)
    body = bytearray()
    headers = [struct.pack(shfmt, *([0] * 10))]
    for name_off, sec in zip(name_offsets, entries):
        data = sec.get("data", b"")
        stype = sec["type"]
        size = sec.get("size", len(data))
        headers.append(
            struct.pack(
                shfmt, name_off, stype, sec.get("flags", 0), 0, ehsize + len(body), size,
                sec.get("link", 0), sec.get("info", 0), 1, sec.get("entsize", 0),
            )
        )
        if stype != 8:
            body += data
    shoff = ehsize + len(body)
    ident = b"\x7fELF" + bytes([2 if bits == 64 else 1, 1 if order == "<" else 2, 1]) + bytes(9)
    hfmt = order + ("16sHHIQQQIHHHHHH" if bits == 64 else "16sHHIIIIIHHHHHH")
    header = struct.pack(hfmt, ident, 1, 62, 1, 0, 0, shoff, 0, ehsize, 0, 0, shsize,
                         len(headers), len(headers) - 1)
    return header + bytes(body) + b"".join(headers)


def sample_object():
    strtab = b"\0main\0counter\0"
    symtab = bytes(24)
    symtab += struct.pack("<IBBHQQ", 1, 0x12, 0, 1, 0, 2)
    symtab += struct.pack("<IBBHQQ", 6, 0x11, 0, 2, 0, 4)
    rela = struct.pack("<QQq", 1, (2 << 32) | 2, -4)
    return build_elf([
        {"name": ".text", "type": 1, "data": b"\x90\xc3", "flags": 6},
        {"name": ".data", "type": 1, "data": b"\x01\x02\x03\x04", "flags": 3},
        {"name": ".bss", "type": 8, "size": 16, "flags": 3},
        {"name": ".rela.text", "type": 4, "data": rela, "link": 5, "info": 1, "entsize": 24},
        {"name": ".symtab", "type": 2, "data": symtab, "link": 6, "entsize": 24},
        {"name": ".strtab", "type": 3, "data": strtab},
    ])


def test_parse_sections_and_contents():
    elf = parse(sample_object())
    assert elf.bits == 64
    assert elf.byteorder == "little"
    assert elf.section(".text").data == b"\x90\xc3"
    assert elf.section(".data").data == b"\x01\x02\x03\x04"


def test_nobits_section_keeps_size_but_no_data():
    bss = parse(sample_object()).section(".bss")
    assert bss.data == b""
    assert bss.size == 16


def test_content_sections_skip_bookkeeping():
    elf = parse(sample_object())
    assert [s.name for s in elf.content_sections] == [".text", ".data", ".bss"]


def test_symbols_skip_null_entry():
    elf = parse(sample_object())
    assert [s.name for s in elf.symbols] == ["main", "counter"]
    main = elf.symbols[0]
    assert main.size == 2
    assert main.shndx == 1
    assert main.binding == 1
    assert main.kind == 2


def test_relocations_attach_to_target():
    elf = parse(sample_object())
    text = elf.section(".text")
    assert text.has_relocations
    assert text.relocations == [Relocation(offset=1, type=2, symbol=2, addend=-4)]
    assert not elf.section(".data").has_relocations


def test_missing_section_raises_key_error():
    with pytest.raises(KeyError):
        parse(sample_object()).section(".rodata")


def test_32_bit_big_endian():
    rel = struct.pack(">II", 4, (1 << 8) | 7)
    data = build_elf([
        {"name": ".text", "type": 1, "data": b"\x01\x02\x03"},
        {"name": ".rel.text", "type": 9, "data": rel, "info": 1, "entsize": 8},
    ], bits=32, order=">")
    elf = parse(data)
    assert elf.bits == 32
    assert elf.byteorder == "big"
    assert elf.section(".text").data == b"\x01\x02\x03"
    assert elf.section(".text").relocations == [Relocation(offset=4, type=7, symbol=1)]


def test_bad_magic():
    with pytest.raises(ElfFormatError):
        parse(b"\x7fELG" + bytes(60))


def test_not_elf_at_all():
    with pytest.raises(ElfFormatError):
        parse(b"hello")


def test_unknown_class():
    data = bytearray(sample_object())
    data[4] = 9
    with pytest.raises(ElfFormatError):
        parse(bytes(data))


def test_truncated_section_headers():
    data = sample_object()
    assert data.startswith(ELF_MAGIC)
    with pytest.raises(ElfFormatError):
        parse(data[:70])