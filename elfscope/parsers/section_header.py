"""
Section Header Table Decoder
=============================

Decodes the section header table in two explicit stages:

1. **Raw pass** -- every slot at ``e_shoff + i * e_shentsize`` becomes a
   :class:`RawSection` holding the numeric fields exactly as stored.  Section
   types are validated here, including the OS, processor and user reserved
   ranges.
2. **Name pass** -- the section named by ``e_shstrndx`` is taken as the name
   string table.  Each record's name is the NUL-terminated byte run at
   ``strtab.sh_offset + sh_name``; it must be valid UTF-8 and must end
   before the buffer does.

The string table is always located through ``e_shstrndx`` and never by its
position in the table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from elfscope.core.errors import MalformedInput
from elfscope.core.models import FileHeader, SectionHeader, SectionType
from elfscope.parsers.layout import Buffer, layout_for, read_fields

# Special section indices
SHN_UNDEF: int = 0
SHN_XINDEX: int = 0xFFFF


@dataclass(frozen=True, slots=True)
class RawSection:
    """A section header slot before name resolution."""
    name_offset: int
    section_type: SectionType
    flags: int
    address: int
    offset: int
    size: int
    link: int
    info: int
    address_align: int
    entry_size: int


# ---------------------------------------------------------------------------
# Pass 1 -- raw records
# ---------------------------------------------------------------------------

def decode_raw_sections(buffer: Buffer, header: FileHeader) -> tuple[RawSection, ...]:
    """Decode every section header slot without resolving names.

    Raises:
        MalformedInput: If any slot is truncated or has an unknown type.
    """
    fields = layout_for(header.elf_class).section_header
    little = header.is_little_endian

    raw_sections: list[RawSection] = []
    for index in range(header.section_header_count):
        base = header.section_header_offset + index * header.section_header_entry_size
        values = read_fields(buffer, base, fields, little)
        section_type = SectionType.from_value(values.pop("section_type"), base + 4)
        raw_sections.append(RawSection(section_type=section_type, **values))
    return tuple(raw_sections)


# ---------------------------------------------------------------------------
# Pass 2 -- names
# ---------------------------------------------------------------------------

def string_table_index(header: FileHeader, raw_sections: tuple[RawSection, ...]) -> Optional[int]:
    """Return the index of the section-name string table.

    ``None`` means the image declares no name table (``SHN_UNDEF``).
    With ``SHN_XINDEX`` the real index lives in section 0's ``sh_link``.

    Raises:
        MalformedInput: If the index points outside the section table.
    """
    index = header.section_name_index
    if index == SHN_UNDEF or not raw_sections:
        return None
    if index == SHN_XINDEX:
        index = raw_sections[0].link
    if index >= len(raw_sections):
        raise MalformedInput(
            f"section name table index {index} outside table of {len(raw_sections)}"
        )
    return index


def read_name(buffer: Buffer, table_offset: int, name_offset: int) -> str:
    """Read the NUL-terminated UTF-8 name at ``table_offset + name_offset``.

    Raises:
        MalformedInput: If the name starts past the buffer, is not
            terminated inside it, or is not valid UTF-8.
    """
    start = table_offset + name_offset
    if start >= len(buffer):
        raise MalformedInput("section name starts past end of buffer", start)

    data = buffer if isinstance(buffer, (bytes, bytearray)) else bytes(buffer)
    end = data.find(b"\x00", start)
    if end == -1:
        raise MalformedInput("unterminated section name", start)

    try:
        return bytes(data[start:end]).decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedInput("section name is not valid UTF-8", start) from None


def resolve_names(
    buffer: Buffer,
    raw_sections: tuple[RawSection, ...],
    strtab_index: Optional[int],
) -> tuple[SectionHeader, ...]:
    """Attach a name to every raw record using the designated string table."""
    if strtab_index is None:
        return tuple(_named(raw, "") for raw in raw_sections)

    table_offset = raw_sections[strtab_index].offset
    return tuple(
        _named(raw, read_name(buffer, table_offset, raw.name_offset))
        for raw in raw_sections
    )


def _named(raw: RawSection, name: str) -> SectionHeader:
    return SectionHeader(
        name=name,
        name_offset=raw.name_offset,
        section_type=raw.section_type,
        flags=raw.flags,
        address=raw.address,
        offset=raw.offset,
        size=raw.size,
        link=raw.link,
        info=raw.info,
        address_align=raw.address_align,
        entry_size=raw.entry_size,
    )


def decode_section_headers(buffer: Buffer, header: FileHeader) -> tuple[SectionHeader, ...]:
    """Decode the section header table and resolve every section name.

    Returns:
        Named section headers in table order (empty when
        ``header.section_header_count`` is zero).

    Raises:
        MalformedInput: On any truncated slot, unknown section type, bad
            string-table index or undecodable name.
    """
    raw_sections = decode_raw_sections(buffer, header)
    return resolve_names(buffer, raw_sections, string_table_index(header, raw_sections))
