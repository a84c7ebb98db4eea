"""
Byte-Order Decoder
===================

Pure conversions between fixed-width byte slices and unsigned integers in
either byte order.  Callers are responsible for slicing exactly 2, 4 or 8
bytes; a wrongly sized slice raises :class:`struct.error`, which is a bug in
the caller rather than a property of the input.
"""

from __future__ import annotations

import struct

_FORMATS: dict[int, str] = {2: "H", 4: "I", 8: "Q"}


def _fmt(width: int, little_endian: bool) -> str:
    return ("<" if little_endian else ">") + _FORMATS[width]


def decode(data: bytes, width: int, little_endian: bool) -> int:
    """Decode an unsigned integer of *width* bytes from *data*."""
    return struct.unpack(_fmt(width, little_endian), data)[0]


def decode16(data: bytes, little_endian: bool) -> int:
    return decode(data, 2, little_endian)


def decode32(data: bytes, little_endian: bool) -> int:
    return decode(data, 4, little_endian)


def decode64(data: bytes, little_endian: bool) -> int:
    return decode(data, 8, little_endian)


def encode(value: int, width: int, little_endian: bool) -> bytes:
    """Encode *value* as an unsigned integer of *width* bytes."""
    return struct.pack(_fmt(width, little_endian), value)


def encode16(value: int, little_endian: bool) -> bytes:
    return encode(value, 2, little_endian)


def encode32(value: int, little_endian: bool) -> bytes:
    return encode(value, 4, little_endian)


def encode64(value: int, little_endian: bool) -> bytes:
    return encode(value, 8, little_endian)
