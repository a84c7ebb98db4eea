"""Tests for fixed-width byte-order conversion."""

import struct

import pytest

from elfscope.parsers import byteorder


class TestDecode:
    def test_little_endian_widths(self):
        assert byteorder.decode16(b"\x34\x12", True) == 0x1234
        assert byteorder.decode32(b"\x78\x56\x34\x12", True) == 0x12345678
        assert byteorder.decode64(bytes(range(1, 9)), True) == 0x0807060504030201

    def test_big_endian_widths(self):
        assert byteorder.decode16(b"\x12\x34", False) == 0x1234
        assert byteorder.decode32(b"\x12\x34\x56\x78", False) == 0x12345678
        assert byteorder.decode64(bytes(range(1, 9)), False) == 0x0102030405060708

    def test_unsigned(self):
        assert byteorder.decode32(b"\xff\xff\xff\xff", True) == 0xFFFFFFFF

    def test_wrong_slice_length_is_caller_error(self):
        with pytest.raises(struct.error):
            byteorder.decode32(b"\x00\x00", True)


class TestEncode:
    @pytest.mark.parametrize("little", [True, False])
    def test_inverse_of_decode(self, little):
        for width, value in ((2, 0xBEEF), (4, 0xDEADBEEF), (8, 0x0123456789ABCDEF)):
            raw = byteorder.encode(value, width, little)
            assert len(raw) == width
            assert byteorder.decode(raw, width, little) == value

    def test_byte_order_differs(self):
        assert byteorder.encode16(0x0102, True) == b"\x02\x01"
        assert byteorder.encode16(0x0102, False) == b"\x01\x02"
