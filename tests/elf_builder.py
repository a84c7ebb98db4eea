"""
Synthetic ELF image builder for tests.

Builds small but structurally complete ELF images with :mod:`struct` alone,
independently of the decoders under test, so every field value in a test
is known up front.  Supports ELF32 and ELF64 in either byte order, with
optional program headers and a section header table whose name string
table (``.shstrtab``) can be placed at any index.

Layout of a built image::

    ELF header | program headers | .shstrtab bytes | (pad to 8) | section headers

Usage::

    from tests.elf_builder import Section, Segment, build_elf

    image = build_elf(
        bits=32,
        little=False,
        segments=[Segment(p_type=PT_LOAD, flags=PF_R | PF_X)],
        sections=[Section(".text", SHT_PROGBITS)],
        shstrtab_index=1,
    )
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional, Sequence

# Header constants
ET_REL = 1
ET_EXEC = 2
ET_DYN = 3
EM_X86 = 0x03
EM_ARM = 0x28
EM_X86_64 = 0x3E
EM_AARCH64 = 0xB7
ELFOSABI_SYSV = 0x00
ELFOSABI_LINUX = 0x03

# Segment constants
PT_NULL = 0
PT_LOAD = 1
PT_DYNAMIC = 2
PT_INTERP = 3
PT_NOTE = 4
PT_PHDR = 6
PT_GNU_STACK = 0x6474E551
PF_X = 1
PF_W = 2
PF_R = 4

# Section constants
SHT_NULL = 0
SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHT_NOBITS = 8
SHT_GNU_HASH = 0x6FFFFFF6
SHF_WRITE = 0x1
SHF_ALLOC = 0x2
SHF_EXECINSTR = 0x4

_EHDR = {32: "HHIIIIIHHHHHH", 64: "HHIQQQIHHHHHH"}
_EHDR_SIZE = {32: 52, 64: 64}
_PHDR_SIZE = {32: 32, 64: 56}
_SHDR = {32: "IIIIIIIIII", 64: "IIQQQQIIQQ"}
_SHDR_SIZE = {32: 40, 64: 64}


@dataclass
class Segment:
    p_type: int = PT_LOAD
    flags: int = PF_R
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0x1000


@dataclass
class Section:
    name: str
    sh_type: int = SHT_PROGBITS
    flags: int = 0
    addr: int = 0
    offset: int = 0
    size: int = 0
    link: int = 0
    info: int = 0
    addralign: int = 1
    entsize: int = 0
    # Overrides the computed string table offset when set
    name_offset: Optional[int] = None


def _pack_segment(seg: Segment, bits: int, bo: str) -> bytes:
    if bits == 64:
        return struct.pack(
            bo + "IIQQQQQQ",
            seg.p_type, seg.flags, seg.offset, seg.vaddr,
            seg.paddr, seg.filesz, seg.memsz, seg.align,
        )
    return struct.pack(
        bo + "IIIIIIII",
        seg.p_type, seg.offset, seg.vaddr, seg.paddr,
        seg.filesz, seg.memsz, seg.flags, seg.align,
    )


def _pack_section(sec: Section, name_offset: int, bits: int, bo: str) -> bytes:
    return struct.pack(
        bo + _SHDR[bits],
        name_offset, sec.sh_type, sec.flags, sec.addr, sec.offset,
        sec.size, sec.link, sec.info, sec.addralign, sec.entsize,
    )


def build_elf(
    *,
    bits: int = 64,
    little: bool = True,
    osabi: int = ELFOSABI_SYSV,
    abi_version: int = 0,
    e_type: int = ET_EXEC,
    machine: int = EM_X86_64,
    ident_version: int = 1,
    version: int = 1,
    entry: int = 0x401000,
    e_flags: int = 0,
    segments: Sequence[Segment] = (),
    sections: Optional[Sequence[Section]] = None,
    shstrtab_index: Optional[int] = None,
    shstrndx: Optional[int] = None,
) -> bytearray:
    """Return a complete ELF image.

    Args:
        sections: Sections after the null section.  ``None`` builds an
            image with no section header table at all.
        shstrtab_index: Where ``.shstrtab`` goes in the final table
            (default: last).  Index 0 is always the null section.
        shstrndx: Value written to ``e_shstrndx``; defaults to the real
            position of ``.shstrtab``.
    """
    bo = "<" if little else ">"
    ehsize = _EHDR_SIZE[bits]
    phentsize = _PHDR_SIZE[bits]
    shentsize = _SHDR_SIZE[bits]

    table: list[Section] = []
    strtab = bytearray(b"\x00")
    name_offsets: list[int] = []
    if sections is not None:
        table = [Section("", SHT_NULL, addralign=0)] + list(sections)
        strtab_sec = Section(".shstrtab", SHT_STRTAB)
        position = len(table) if shstrtab_index is None else shstrtab_index
        table.insert(position, strtab_sec)

        for sec in table:
            if sec.name_offset is not None:
                name_offsets.append(sec.name_offset)
            elif sec.name == "":
                name_offsets.append(0)
            else:
                name_offsets.append(len(strtab))
                strtab += sec.name.encode("utf-8") + b"\x00"

        if shstrndx is None:
            shstrndx = position

    phoff = ehsize if segments else 0
    strtab_off = ehsize + phentsize * len(segments)
    shoff = 0
    if table:
        shoff = (strtab_off + len(strtab) + 7) & ~7
        table[position] = Section(
            ".shstrtab", SHT_STRTAB, offset=strtab_off, size=len(strtab)
        )

    ident = bytearray(16)
    ident[0:4] = b"\x7fELF"
    ident[4] = 2 if bits == 64 else 1
    ident[5] = 1 if little else 2
    ident[6] = ident_version
    ident[7] = osabi
    ident[8] = abi_version

    image = bytearray(ident)
    image += struct.pack(
        bo + _EHDR[bits],
        e_type, machine, version, entry, phoff, shoff, e_flags, ehsize,
        phentsize, len(segments), shentsize, len(table), shstrndx or 0,
    )
    for seg in segments:
        image += _pack_segment(seg, bits, bo)

    if table:
        image += strtab
        image += b"\x00" * (shoff - len(image))
        for sec, name_offset in zip(table, name_offsets):
            image += _pack_section(sec, name_offset, bits, bo)

    return image


def section_header_offset(image: bytes, index: int) -> int:
    """File offset of section header slot *index* in a built image."""
    bits = 64 if image[4] == 2 else 32
    bo = "<" if image[5] == 1 else ">"
    shoff = struct.unpack_from(bo + ("Q" if bits == 64 else "I"), image, 0x28 if bits == 64 else 0x20)[0]
    return shoff + index * _SHDR_SIZE[bits]


def program_header_offset(image: bytes, index: int) -> int:
    """File offset of program header slot *index* in a built image."""
    bits = 64 if image[4] == 2 else 32
    return _EHDR_SIZE[bits] + index * _PHDR_SIZE[bits]


def typical_segments() -> list[Segment]:
    """PHDR, a read/exec LOAD and a read/write DYNAMIC segment."""
    return [
        Segment(PT_PHDR, PF_R, offset=0x40, vaddr=0x400040, paddr=0x400040,
                filesz=0xA8, memsz=0xA8, align=8),
        Segment(PT_LOAD, PF_R | PF_X, offset=0, vaddr=0x400000, paddr=0x400000,
                filesz=0x1000, memsz=0x1000, align=0x1000),
        Segment(PT_DYNAMIC, PF_R | PF_W, offset=0x2000, vaddr=0x402000, paddr=0x402000,
                filesz=0x100, memsz=0x100, align=8),
    ]


def typical_sections() -> list[Section]:
    """``.text``, ``.data`` and ``.bss``; the builder adds null and ``.shstrtab``."""
    return [
        Section(".text", SHT_PROGBITS, flags=SHF_ALLOC | SHF_EXECINSTR,
                addr=0x401000, offset=0x1000, size=0x200, addralign=16),
        Section(".data", SHT_PROGBITS, flags=SHF_ALLOC | SHF_WRITE,
                addr=0x403000, offset=0x3000, size=0x40, addralign=8),
        Section(".bss", SHT_NOBITS, flags=SHF_ALLOC | SHF_WRITE,
                addr=0x403040, offset=0x3040, size=0x80, addralign=32),
    ]
