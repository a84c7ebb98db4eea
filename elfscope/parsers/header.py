"""
ELF File Header Decoder
========================

Validates the identification bytes and decodes the fixed file header.
The class byte decides the width of ``e_entry``, ``e_phoff`` and ``e_shoff``
and therefore the offsets of every field after them; the data byte decides
the byte order of every multi-byte field.

Decoding is all-or-nothing: any bad byte raises
:class:`~elfscope.core.errors.MalformedInput` and no header is returned.

Header layout (offsets in hex)::

    00  e_ident[EI_MAG0..3]   7f 'E' 'L' 'F'
    04  e_ident[EI_CLASS]     1 = ELF32, 2 = ELF64
    05  e_ident[EI_DATA]      1 = little, 2 = big
    06  e_ident[EI_VERSION]   1
    07  e_ident[EI_OSABI]
    08  e_ident[EI_ABIVERSION]
    10  e_type                16-bit
    12  e_machine             16-bit
    14  e_version             32-bit, 1
    18  e_entry, e_phoff, e_shoff (4 or 8 bytes each), then
        e_flags (32), e_ehsize, e_phentsize, e_phnum,
        e_shentsize, e_shnum, e_shstrndx (16 each)
"""

from __future__ import annotations

from typing import Optional

from elfscope.core.errors import MalformedInput
from elfscope.core.models import (
    ElfClass,
    Endian,
    FileHeader,
    InstructionSet,
    ObjectType,
    TargetABI,
    enum_member,
)
from elfscope.parsers import byteorder
from elfscope.parsers.layout import (
    E_MACHINE,
    E_TYPE,
    E_VERSION,
    EI_ABIVERSION,
    EI_CLASS,
    EI_DATA,
    EI_MAG,
    EI_NIDENT,
    EI_OSABI,
    EI_VERSION,
    Buffer,
    layout_for,
    read_byte,
    read_fields,
    read_uint,
)

ELF_MAGIC: bytes = b"\x7fELF"
EV_CURRENT: int = 1


def peek_class(buffer: Buffer) -> Optional[ElfClass]:
    """Return the class byte's meaning without validating anything else.

    Lets a caller choose a word-size path before committing to a full
    decode.  Returns ``None`` for a short buffer or an unknown class byte.
    """
    if len(buffer) <= EI_CLASS:
        return None
    try:
        return ElfClass(buffer[EI_CLASS])
    except ValueError:
        return None


def decode_header(buffer: Buffer) -> FileHeader:
    """Decode and validate the ELF file header at the start of *buffer*.

    Args:
        buffer: The complete image (or at least its header region).

    Returns:
        The decoded :class:`FileHeader`.

    Raises:
        MalformedInput: On bad magic, unknown class/byte order, wrong
            version, unknown ABI/object type/machine, or a truncated header.
    """
    if bytes(buffer[EI_MAG:EI_MAG + 4]) != ELF_MAGIC:
        raise MalformedInput("bad ELF magic", EI_MAG)

    elf_class = enum_member(ElfClass, read_byte(buffer, EI_CLASS), "ELF class", EI_CLASS)
    endian = enum_member(Endian, read_byte(buffer, EI_DATA), "data encoding", EI_DATA)

    if read_byte(buffer, EI_VERSION) != EV_CURRENT:
        raise MalformedInput("unsupported ELF identification version", EI_VERSION)

    abi = enum_member(TargetABI, read_byte(buffer, EI_OSABI), "OS/ABI", EI_OSABI)
    abi_version = read_byte(buffer, EI_ABIVERSION)

    little = endian == Endian.LITTLE
    object_type = ObjectType.from_value(read_uint(buffer, E_TYPE, 2, little), E_TYPE)
    isa = enum_member(
        InstructionSet,
        read_uint(buffer, E_MACHINE, 2, little),
        "machine",
        E_MACHINE,
    )

    if read_uint(buffer, E_VERSION, 4, little) != EV_CURRENT:
        raise MalformedInput("unsupported ELF object version", E_VERSION)

    tail = read_fields(buffer, 0, layout_for(elf_class).header_tail, little)

    return FileHeader(
        elf_class=elf_class,
        endian=endian,
        abi=abi,
        abi_version=abi_version,
        object_type=object_type,
        isa=isa,
        **tail,
    )


def encode_header(header: FileHeader) -> bytes:
    """Encode the fixed fields of *header* back into header bytes.

    The ``e_ident`` padding is written as zeros, so for an image with
    zero padding the result equals the first ``header_size`` bytes read.
    """
    little = header.is_little_endian
    ident = bytearray(EI_NIDENT)
    ident[EI_MAG:EI_MAG + 4] = ELF_MAGIC
    ident[EI_CLASS] = header.elf_class
    ident[EI_DATA] = header.endian
    ident[EI_VERSION] = EV_CURRENT
    ident[EI_OSABI] = header.abi
    ident[EI_ABIVERSION] = header.abi_version

    out = bytearray(ident)
    out += byteorder.encode16(header.object_type.value, little)
    out += byteorder.encode16(header.isa, little)
    out += byteorder.encode32(EV_CURRENT, little)
    for spec in layout_for(header.elf_class).header_tail:
        out += byteorder.encode(getattr(header, spec.name), spec.width, little)
    return bytes(out)
