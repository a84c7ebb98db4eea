"""
Word-Size Layouts
==================

ELF32 and ELF64 differ in more than field width: the 64-bit program header
moves ``p_flags`` up next to ``p_type``.  Rather than branching on the class
in every decoder, each class gets one :class:`ClassLayout` strategy holding
the field tables for the header tail, the program header slot and the section
header slot.  Decoders pick the layout once and walk its tables.

Field offsets inside a table are relative to the start of the structure
(or, for the header tail, absolute file offsets starting at ``0x18``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from elfscope.core.errors import MalformedInput
from elfscope.core.models import ElfClass
from elfscope.parsers import byteorder

Buffer = Union[bytes, bytearray, memoryview]

# e_ident and the fixed 16/32-bit fields that precede the class-width tail
EI_MAG: int = 0x00
EI_CLASS: int = 0x04
EI_DATA: int = 0x05
EI_VERSION: int = 0x06
EI_OSABI: int = 0x07
EI_ABIVERSION: int = 0x08
EI_NIDENT: int = 0x10
E_TYPE: int = 0x10
E_MACHINE: int = 0x12
E_VERSION: int = 0x14
E_ENTRY: int = 0x18


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A named unsigned field at a fixed offset.

    Attributes:
        name: Attribute name the value is stored under.
        offset: Byte offset relative to the structure base.
        width: Field width in bytes (2, 4 or 8).
    """
    name: str
    offset: int
    width: int


def _sequential(start: int, *fields: tuple[str, int]) -> tuple[FieldSpec, ...]:
    """Lay out *fields* back to back starting at *start*."""
    specs: list[FieldSpec] = []
    offset = start
    for name, width in fields:
        specs.append(FieldSpec(name, offset, width))
        offset += width
    return tuple(specs)


@dataclass(frozen=True, slots=True)
class ClassLayout:
    """Field tables for one ELF class.

    Attributes:
        header_tail: Header fields from ``e_entry`` to ``e_shstrndx``.
        program_header: Fields of one program header slot.
        section_header: Fields of one section header slot.
    """
    header_tail: tuple[FieldSpec, ...]
    program_header: tuple[FieldSpec, ...]
    section_header: tuple[FieldSpec, ...]


def _build_layout(elf_class: ElfClass, word: int) -> ClassLayout:
    header_tail = _sequential(
        E_ENTRY,
        ("entry_point", word),
        ("program_header_offset", word),
        ("section_header_offset", word),
        ("flags", 4),
        ("header_size", 2),
        ("program_header_entry_size", 2),
        ("program_header_count", 2),
        ("section_header_entry_size", 2),
        ("section_header_count", 2),
        ("section_name_index", 2),
    )

    if elf_class == ElfClass.ELF64:
        program_header = _sequential(
            0,
            ("segment_type", 4),
            ("flags", 4),
            ("offset", 8),
            ("virtual_address", 8),
            ("physical_address", 8),
            ("file_size", 8),
            ("memory_size", 8),
            ("align", 8),
        )
    else:
        program_header = _sequential(
            0,
            ("segment_type", 4),
            ("offset", 4),
            ("virtual_address", 4),
            ("physical_address", 4),
            ("file_size", 4),
            ("memory_size", 4),
            ("flags", 4),
            ("align", 4),
        )

    section_header = _sequential(
        0,
        ("name_offset", 4),
        ("section_type", 4),
        ("flags", word),
        ("address", word),
        ("offset", word),
        ("size", word),
        ("link", 4),
        ("info", 4),
        ("address_align", word),
        ("entry_size", word),
    )

    return ClassLayout(
        header_tail=header_tail,
        program_header=program_header,
        section_header=section_header,
    )


LAYOUTS: dict[ElfClass, ClassLayout] = {
    ElfClass.ELF32: _build_layout(ElfClass.ELF32, 4),
    ElfClass.ELF64: _build_layout(ElfClass.ELF64, 8),
}


def layout_for(elf_class: ElfClass) -> ClassLayout:
    return LAYOUTS[elf_class]


# ---------------------------------------------------------------------------
# Bounds-checked reads
# ---------------------------------------------------------------------------

def read_byte(buffer: Buffer, offset: int) -> int:
    """Read one byte, raising :class:`MalformedInput` past the end."""
    if offset < 0 or offset >= len(buffer):
        raise MalformedInput("byte read past end of buffer", offset)
    return buffer[offset]


def read_uint(buffer: Buffer, offset: int, width: int, little_endian: bool) -> int:
    """Read an unsigned integer of *width* bytes at *offset*.

    Raises:
        MalformedInput: If the field does not lie entirely inside *buffer*.
    """
    end = offset + width
    if offset < 0 or end > len(buffer):
        raise MalformedInput(f"{width}-byte field runs past end of buffer", offset)
    return byteorder.decode(buffer[offset:end], width, little_endian)


def read_fields(
    buffer: Buffer,
    base: int,
    fields: tuple[FieldSpec, ...],
    little_endian: bool,
) -> dict[str, int]:
    """Read every field of a table relative to *base*."""
    return {
        spec.name: read_uint(buffer, base + spec.offset, spec.width, little_endian)
        for spec in fields
    }
