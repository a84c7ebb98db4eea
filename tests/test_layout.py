"""Tests for the per-class field tables and bounds-checked reads."""

import pytest

from elfscope.core.errors import MalformedInput
from elfscope.core.models import ElfClass
from elfscope.parsers.layout import ClassLayout, layout_for, read_byte, read_fields, read_uint


def _end(fields):
    return fields[-1].offset + fields[-1].width


class TestClassLayout:
    @pytest.mark.parametrize(
        "elf_class, ehsize, phentsize, shentsize",
        [(ElfClass.ELF32, 52, 32, 40), (ElfClass.ELF64, 64, 56, 64)],
    )
    def test_tables_cover_standard_slots(self, elf_class, ehsize, phentsize, shentsize):
        layout = layout_for(elf_class)
        assert _end(layout.header_tail) == ehsize
        assert _end(layout.program_header) == phentsize
        assert _end(layout.section_header) == shentsize

    def test_flags_position_differs_by_class(self):
        flags32 = [f for f in layout_for(ElfClass.ELF32).program_header if f.name == "flags"][0]
        flags64 = [f for f in layout_for(ElfClass.ELF64).program_header if f.name == "flags"][0]
        assert flags32.offset == 0x18
        assert flags64.offset == 0x04

    def test_layout_is_only_field_tables(self):
        assert set(ClassLayout.__slots__) == {"header_tail", "program_header", "section_header"}


class TestReads:
    def test_read_byte_past_end(self):
        with pytest.raises(MalformedInput) as exc:
            read_byte(b"\x01", 1)
        assert exc.value.offset == 1

    def test_read_uint_both_orders(self):
        assert read_uint(b"\x00\x01\x02", 1, 2, True) == 0x0201
        assert read_uint(b"\x00\x01\x02", 1, 2, False) == 0x0102

    def test_read_fields_truncated(self):
        with pytest.raises(MalformedInput):
            read_fields(bytes(10), 0, layout_for(ElfClass.ELF32).section_header, True)
