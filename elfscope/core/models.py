"""
elfscope Data Models
=====================

Pydantic-based records for the structural metadata of an ELF image: the
file header, the program (segment) headers and the named section headers.
Every record is frozen -- once decoded it is never modified.

Enumerated header fields come in two shapes:

* closed sets (class, byte order, ABI, instruction set) modelled as plain
  :class:`enum.IntEnum` values;
* sets with reserved extension ranges (object type, segment type, section
  type) modelled as a named *kind* plus the offset inside the reserved range
  the raw value fell into.

Both shapes are built through total mapping functions that raise
:class:`~elfscope.core.errors.MalformedInput` for values they do not know.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from typing import ClassVar, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from elfscope.core.errors import MalformedInput


_E = TypeVar("_E", bound=enum.IntEnum)


def enum_member(
    enum_cls: type[_E],
    value: int,
    label: str,
    offset: Optional[int] = None,
) -> _E:
    """Map *value* onto *enum_cls* or raise :class:`MalformedInput`."""
    try:
        return enum_cls(value)
    except ValueError:
        raise MalformedInput(f"unknown {label} 0x{value:x}", offset) from None


# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------

class ElfClass(enum.IntEnum):
    """Word size of the image (``EI_CLASS``)."""
    ELF32 = 1
    ELF64 = 2


class Endian(enum.IntEnum):
    """Data encoding of the image (``EI_DATA``)."""
    LITTLE = 1
    BIG = 2


class TargetABI(enum.IntEnum):
    """Operating system / ABI identification (``EI_OSABI``)."""
    SYSTEM_V = 0x00
    HP_UX = 0x01
    NETBSD = 0x02
    LINUX = 0x03
    GNU_HURD = 0x04
    SOLARIS = 0x06
    AIX = 0x07
    IRIX = 0x08
    FREEBSD = 0x09
    TRU64 = 0x0A
    NOVELL_MODESTO = 0x0B
    OPENBSD = 0x0C
    OPENVMS = 0x0D
    NONSTOP_KERNEL = 0x0E
    AROS = 0x0F
    FENIX_OS = 0x10
    CLOUD_ABI = 0x11


class InstructionSet(enum.IntEnum):
    """Target machine architecture (``e_machine``)."""
    NONE = 0x00
    SPARC = 0x02
    X86 = 0x03
    MIPS = 0x08
    POWERPC = 0x14
    S390 = 0x16
    ARM = 0x28
    SUPERH = 0x2A
    IA_64 = 0x32
    X86_64 = 0x3E
    AARCH64 = 0xB7
    RISC_V = 0xF3


# ---------------------------------------------------------------------------
# Enumerations with reserved ranges
# ---------------------------------------------------------------------------

class ObjectKind(enum.IntEnum):
    NONE = 0
    REL = 1
    EXEC = 2
    DYN = 3
    CORE = 4
    LOOS = 0xFE00
    LOPROC = 0xFF00


class SegmentKind(enum.IntEnum):
    NULL = 0
    LOAD = 1
    DYNAMIC = 2
    INTERP = 3
    NOTE = 4
    SHLIB = 5
    PHDR = 6
    TLS = 7
    LOOS = 0x6000_0000
    LOPROC = 0x7000_0000


class SectionKind(enum.IntEnum):
    NULL = 0
    PROGBITS = 1
    SYMTAB = 2
    STRTAB = 3
    RELA = 4
    HASH = 5
    DYNAMIC = 6
    NOTE = 7
    NOBITS = 8
    REL = 9
    SHLIB = 10
    DYNSYM = 11
    INIT_ARRAY = 14
    FINI_ARRAY = 15
    PREINIT_ARRAY = 16
    GROUP = 17
    SYMTAB_SHNDX = 18
    NUM = 19
    LOOS = 0x6000_0000
    LOPROC = 0x7000_0000
    LOUSER = 0x8000_0000


_RANGE_28 = 0x1000_0000


class _RangeTagged(BaseModel):
    """A value from a fixed set, or a tagged offset inside a reserved range.

    Subclasses declare ``kind`` with their own enumeration and list the
    reserved ranges as ``(kind, span)`` pairs; the range starts at the
    kind's own numeric value.
    """

    model_config = ConfigDict(frozen=True)

    LABEL: ClassVar[str] = "value"
    KINDS: ClassVar[type[enum.IntEnum]]
    RESERVED: ClassVar[tuple[tuple[enum.IntEnum, int], ...]] = ()

    range_offset: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def from_value(cls, value: int, offset: Optional[int] = None):
        """Total mapping from a raw integer to a tagged value.

        Args:
            value: Raw field value read from the image.
            offset: Byte offset of the field, reported on failure.

        Raises:
            MalformedInput: If *value* is neither a named member nor
                inside one of the reserved ranges.
        """
        for kind, span in cls.RESERVED:
            base = int(kind)
            if base <= value < base + span:
                return cls(kind=kind, range_offset=value - base)
        return cls(kind=enum_member(cls.KINDS, value, cls.LABEL, offset))

    @property
    def is_reserved(self) -> bool:
        return self.range_offset is not None

    @property
    def value(self) -> int:
        """The raw integer this value was decoded from."""
        return int(self.kind) + (self.range_offset or 0)  # type: ignore[attr-defined]

    def __str__(self) -> str:
        name = self.kind.name  # type: ignore[attr-defined]
        if self.range_offset is None:
            return name
        return f"{name}+0x{self.range_offset:x}"


class ObjectType(_RangeTagged):
    """Object file type (``e_type``)."""
    LABEL: ClassVar[str] = "object type"
    KINDS: ClassVar[type[enum.IntEnum]] = ObjectKind
    RESERVED: ClassVar[tuple[tuple[enum.IntEnum, int], ...]] = (
        (ObjectKind.LOOS, 0x100),
        (ObjectKind.LOPROC, 0x100),
    )

    kind: ObjectKind


class SegmentType(_RangeTagged):
    """Program header segment type (``p_type``)."""
    LABEL: ClassVar[str] = "segment type"
    KINDS: ClassVar[type[enum.IntEnum]] = SegmentKind
    RESERVED: ClassVar[tuple[tuple[enum.IntEnum, int], ...]] = (
        (SegmentKind.LOOS, _RANGE_28),
        (SegmentKind.LOPROC, _RANGE_28),
    )

    kind: SegmentKind


class SectionType(_RangeTagged):
    """Section header type (``sh_type``)."""
    LABEL: ClassVar[str] = "section type"
    KINDS: ClassVar[type[enum.IntEnum]] = SectionKind
    RESERVED: ClassVar[tuple[tuple[enum.IntEnum, int], ...]] = (
        (SectionKind.LOOS, _RANGE_28),
        (SectionKind.LOPROC, _RANGE_28),
        (SectionKind.LOUSER, _RANGE_28),
    )

    kind: SectionKind


# ---------------------------------------------------------------------------
# Flag letters
# ---------------------------------------------------------------------------

PF_X: int = 0x1
PF_W: int = 0x2
PF_R: int = 0x4

_SECTION_FLAG_LETTERS: tuple[tuple[int, str], ...] = (
    (0x0000_0001, "W"),   # write
    (0x0000_0002, "A"),   # alloc
    (0x0000_0004, "X"),   # execinstr
    (0x0000_0010, "M"),   # merge
    (0x0000_0020, "S"),   # strings
    (0x0000_0040, "I"),   # info link
    (0x0000_0080, "L"),   # link order
    (0x0000_0100, "O"),   # os nonconforming
    (0x0000_0200, "G"),   # group
    (0x0000_0400, "T"),   # tls
    (0x0FF0_0000, "o"),   # os specific
    (0xF000_0000, "p"),   # processor specific
    (0xC000_0000, "x"),   # ordered or exclude
)


# ---------------------------------------------------------------------------
# Decoded records
# ---------------------------------------------------------------------------

class FileHeader(BaseModel):
    """Decoded ELF file header.

    Attributes:
        elf_class: Word size (32 or 64 bit).
        endian: Byte order of every multi-byte field.
        abi: Target operating system ABI.
        abi_version: ABI version byte (opaque).
        object_type: Object file type.
        isa: Target instruction set.
        entry_point: Virtual address of the entry point.
        program_header_offset: File offset of the program header table.
        section_header_offset: File offset of the section header table.
        flags: Processor-specific flags.
        header_size: Size of this header in bytes.
        program_header_entry_size: Size of one program header table slot.
        program_header_count: Number of program header table slots.
        section_header_entry_size: Size of one section header table slot.
        section_header_count: Number of section header table slots.
        section_name_index: Index of the section holding section names.
    """

    model_config = ConfigDict(frozen=True)

    elf_class: ElfClass
    endian: Endian
    abi: TargetABI
    abi_version: int = Field(ge=0, le=0xFF)
    object_type: ObjectType
    isa: InstructionSet
    entry_point: int = Field(ge=0)
    program_header_offset: int = Field(ge=0)
    section_header_offset: int = Field(ge=0)
    flags: int = Field(ge=0)
    header_size: int = Field(ge=0)
    program_header_entry_size: int = Field(ge=0)
    program_header_count: int = Field(ge=0)
    section_header_entry_size: int = Field(ge=0)
    section_header_count: int = Field(ge=0)
    section_name_index: int = Field(ge=0)

    @property
    def is_64bit(self) -> bool:
        return self.elf_class == ElfClass.ELF64

    @property
    def is_little_endian(self) -> bool:
        return self.endian == Endian.LITTLE

    @property
    def word_size(self) -> int:
        """Width in bytes of address, offset and size fields."""
        return 8 if self.is_64bit else 4


class ProgramHeader(BaseModel):
    """One program header table slot (a segment)."""

    model_config = ConfigDict(frozen=True)

    segment_type: SegmentType
    offset: int = Field(ge=0)
    virtual_address: int = Field(ge=0)
    physical_address: int = Field(ge=0)
    file_size: int = Field(ge=0)
    memory_size: int = Field(ge=0)
    flags: int = Field(ge=0)
    align: int = Field(ge=0)

    @property
    def readable(self) -> bool:
        return bool(self.flags & PF_R)

    @property
    def writable(self) -> bool:
        return bool(self.flags & PF_W)

    @property
    def executable(self) -> bool:
        return bool(self.flags & PF_X)

    @property
    def flags_str(self) -> str:
        """Permission flags as ``"RWX"``-style letters, ``"-"`` when empty."""
        parts: list[str] = []
        if self.readable:
            parts.append("R")
        if self.writable:
            parts.append("W")
        if self.executable:
            parts.append("X")
        return "".join(parts) if parts else "-"


class SectionHeader(BaseModel):
    """One section header table slot with its resolved name."""

    model_config = ConfigDict(frozen=True)

    name: str
    name_offset: int = Field(ge=0)
    section_type: SectionType
    flags: int = Field(ge=0)
    address: int = Field(ge=0)
    offset: int = Field(ge=0)
    size: int = Field(ge=0)
    link: int = Field(ge=0)
    info: int = Field(ge=0)
    address_align: int = Field(ge=0)
    entry_size: int = Field(ge=0)

    @property
    def flags_str(self) -> str:
        letters = [ch for mask, ch in _SECTION_FLAG_LETTERS if self.flags & mask]
        return "".join(letters)


class ElfFile(BaseModel):
    """The complete decoded triple for one image.

    Attributes:
        header: The file header.
        program_headers: Segments in table order.
        section_headers: Named sections in table order.
        string_table_index: Index of the section used to resolve names,
            or ``None`` when the image declares no name table.
    """

    model_config = ConfigDict(frozen=True)

    header: FileHeader
    program_headers: tuple[ProgramHeader, ...] = ()
    section_headers: tuple[SectionHeader, ...] = ()
    string_table_index: Optional[int] = None

    @property
    def string_table(self) -> Optional[SectionHeader]:
        if self.string_table_index is None:
            return None
        return self.section_headers[self.string_table_index]

    def get_section(self, name: str) -> Optional[SectionHeader]:
        """Return the first section called *name*, or ``None``."""
        for section in self.section_headers:
            if section.name == name:
                return section
        return None
