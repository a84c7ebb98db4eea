"""Tests for range-tagged enumerations and record helpers."""

import pytest
from pydantic import ValidationError

from elfscope.core.errors import MalformedInput
from elfscope.core.models import (
    ObjectKind,
    ObjectType,
    ProgramHeader,
    SectionHeader,
    SectionKind,
    SectionType,
    SegmentKind,
    SegmentType,
)


class TestRangeTagged:
    def test_fixed_member(self):
        t = SegmentType.from_value(1)
        assert t.kind is SegmentKind.LOAD
        assert t.range_offset is None
        assert not t.is_reserved
        assert t.value == 1
        assert str(t) == "LOAD"

    def test_range_member(self):
        t = SectionType.from_value(0x7000_002A)
        assert t.kind is SectionKind.LOPROC
        assert t.range_offset == 0x2A
        assert t.is_reserved
        assert t.value == 0x7000_002A
        assert str(t) == "LOPROC+0x2a"

    def test_range_boundaries(self):
        assert ObjectType.from_value(0xFEFF).kind is ObjectKind.LOOS
        assert ObjectType.from_value(0xFF00).kind is ObjectKind.LOPROC
        assert SegmentType.from_value(0x6FFF_FFFF).range_offset == 0x0FFF_FFFF

    def test_failure_carries_offset(self):
        with pytest.raises(MalformedInput) as exc_info:
            SegmentType.from_value(0x9000_0000, offset=0x40)
        assert exc_info.value.offset == 0x40
        assert "0x90000000" in str(exc_info.value)
        assert "offset 0x40" in str(exc_info.value)

    def test_frozen(self):
        t = SegmentType.from_value(1)
        with pytest.raises(ValidationError):
            t.range_offset = 3

    def test_equality_by_value(self):
        assert SectionType.from_value(0x6000_0001) == SectionType.from_value(0x6000_0001)
        assert SectionType.from_value(0x6000_0001) != SectionType.from_value(0x6000_0002)


def _segment(flags: int) -> ProgramHeader:
    return ProgramHeader(
        segment_type=SegmentType.from_value(1),
        offset=0,
        virtual_address=0,
        physical_address=0,
        file_size=0,
        memory_size=0,
        flags=flags,
        align=0,
    )


class TestFlagStrings:
    @pytest.mark.parametrize(
        "flags, expected",
        [(0, "-"), (4, "R"), (5, "RX"), (6, "RW"), (7, "RWX"), (1, "X")],
    )
    def test_segment_permissions(self, flags, expected):
        assert _segment(flags).flags_str == expected

    def test_section_flag_letters(self):
        section = SectionHeader(
            name=".tdata",
            name_offset=1,
            section_type=SectionType.from_value(1),
            flags=0x1 | 0x2 | 0x400 | 0x8000_0000,
            address=0,
            offset=0,
            size=0,
            link=0,
            info=0,
            address_align=0,
            entry_size=0,
        )
        assert section.flags_str == "WATpx"

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            _segment(-1)


class TestMalformedInput:
    def test_without_offset(self):
        err = MalformedInput("bad ELF magic")
        assert err.reason == "bad ELF magic"
        assert err.offset is None
        assert str(err) == "bad ELF magic"

    def test_with_offset(self):
        err = MalformedInput("unknown machine 0x1", 0x12)
        assert str(err) == "unknown machine 0x1 (at offset 0x12)"
