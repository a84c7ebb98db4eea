"""
elfscope -- ELF Structural Metadata Decoder
============================================

Decodes the file header, program header table and section header table of
ELF object files, shared libraries and executables, for both 32-bit and
64-bit images in either byte order.  Section names are resolved through the
section-name string table designated by the header.

Modules:
    - elfscope.parsers: Header, segment and section decoders
    - elfscope.core.models: Pydantic data models
    - elfscope.core.engine: File intake and batch inspection
    - elfscope.output: Console and JSON report output
    - elfscope.cli: Click-based command-line interface

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
"""

__version__ = "1.0.0"
__tool_name__ = "elfscope"

from elfscope.core.errors import MalformedInput
from elfscope.core.models import ElfClass, ElfFile, FileHeader, ProgramHeader, SectionHeader
from elfscope.parsers import ELFParser, decode, peek_class

__all__ = [
    "ELFParser",
    "ElfClass",
    "ElfFile",
    "FileHeader",
    "MalformedInput",
    "ProgramHeader",
    "SectionHeader",
    "decode",
    "peek_class",
]
