"""
ELF Structural Decoder
=======================

Single entry point tying the stage decoders together:

    decode header -> program header table -> raw section table -> names

Both 32-bit (ELF32) and 64-bit (ELF64) images in either byte order are
supported.  Parsing is performed with :mod:`struct` only; no external ELF
library is involved.  Every stage runs to completion or raises
:class:`~elfscope.core.errors.MalformedInput`; no partially decoded result
is ever returned.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from typing import Optional

from elfscope.core.models import ElfClass, ElfFile, FileHeader
from elfscope.parsers.header import decode_header, peek_class
from elfscope.parsers.layout import Buffer
from elfscope.parsers.program_header import decode_program_headers
from elfscope.parsers.section_header import (
    decode_raw_sections,
    resolve_names,
    string_table_index,
)


def decode(buffer: Buffer) -> ElfFile:
    """Decode the header, segments and named sections of an ELF image.

    Args:
        buffer: Complete ELF file contents.

    Returns:
        The fully populated :class:`ElfFile`.

    Raises:
        MalformedInput: If any stage fails.
    """
    header = decode_header(buffer)
    program_headers = decode_program_headers(buffer, header)
    raw_sections = decode_raw_sections(buffer, header)
    strtab_index = string_table_index(header, raw_sections)
    section_headers = resolve_names(buffer, raw_sections, strtab_index)
    return ElfFile(
        header=header,
        program_headers=program_headers,
        section_headers=section_headers,
        string_table_index=strtab_index,
    )


class ELFParser:
    """Object-style wrapper around :func:`decode`.

    Usage::

        parser = ELFParser(raw_bytes)
        if parser.peek_class() is ElfClass.ELF64:
            elf = parser.parse()
            text = elf.get_section(".text")
    """

    def __init__(self, data: Buffer) -> None:
        """Initialise the parser with raw binary data.

        Args:
            data: Complete ELF file contents.  The buffer is only read.
        """
        self._data: Buffer = data
        self._elf: Optional[ElfFile] = None

    def peek_class(self) -> Optional[ElfClass]:
        """Word size declared by the image, without full validation."""
        return peek_class(self._data)

    def parse(self) -> ElfFile:
        """Decode the image, caching the result for repeated calls."""
        if self._elf is None:
            self._elf = decode(self._data)
        return self._elf

    @property
    def header(self) -> FileHeader:
        return self.parse().header
