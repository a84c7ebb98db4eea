"""
Program Header Table Decoder
=============================

Walks the fixed-stride program header table located by ``e_phoff``,
``e_phentsize`` and ``e_phnum`` and decodes one :class:`ProgramHeader` per
slot.  The slot layout comes from the class strategy in
:mod:`elfscope.parsers.layout`::

    ELF32  type offset vaddr paddr filesz memsz flags align   (all 4 bytes)
    ELF64  type flags offset vaddr paddr filesz memsz align   (4,4, then 8)

An unknown segment type or a slot past the end of the buffer aborts the
whole table; there is no skip-and-continue.
"""

from __future__ import annotations

from elfscope.core.models import FileHeader, ProgramHeader, SegmentType
from elfscope.parsers.layout import Buffer, layout_for, read_fields


def decode_program_headers(buffer: Buffer, header: FileHeader) -> tuple[ProgramHeader, ...]:
    """Decode every program header slot declared by *header*.

    Returns:
        Program headers in table order; the length always equals
        ``header.program_header_count``.

    Raises:
        MalformedInput: If any slot is truncated or has an unknown type.
    """
    fields = layout_for(header.elf_class).program_header
    little = header.is_little_endian

    segments: list[ProgramHeader] = []
    for index in range(header.program_header_count):
        base = header.program_header_offset + index * header.program_header_entry_size
        raw = read_fields(buffer, base, fields, little)
        segment_type = SegmentType.from_value(raw.pop("segment_type"), base)
        segments.append(ProgramHeader(segment_type=segment_type, **raw))
    return tuple(segments)
