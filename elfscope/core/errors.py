"""
elfscope Errors
================

The decoding engine has exactly one failure outcome.  Bad magic, an
unsupported class or byte order, a wrong version, an unknown enumerated
value, a read past the end of the buffer and an undecodable section name
all surface as :class:`MalformedInput`.  Callers treat it as "not a file
this engine understands" and stop.
"""

from __future__ import annotations

from typing import Optional


class MalformedInput(Exception):
    """Raised when a buffer cannot be decoded as an ELF image.

    Attributes:
        reason: Human-readable description of what failed.
        offset: Byte offset in the buffer where the failure was detected,
                when one applies.
    """

    def __init__(self, reason: str, offset: Optional[int] = None) -> None:
        self.reason = reason
        self.offset = offset
        if offset is None:
            super().__init__(reason)
        else:
            super().__init__(f"{reason} (at offset 0x{offset:x})")
