"""
elfscope Parsers
=================

Stage decoders for the ELF file header, program header table and section
header table, plus the byte-order and word-size helpers they share.
"""

from elfscope.parsers.elf_parser import ELFParser, decode
from elfscope.parsers.header import decode_header, encode_header, peek_class
from elfscope.parsers.program_header import decode_program_headers
from elfscope.parsers.section_header import decode_section_headers

__all__ = [
    "ELFParser",
    "decode",
    "decode_header",
    "decode_program_headers",
    "decode_section_headers",
    "encode_header",
    "peek_class",
]
