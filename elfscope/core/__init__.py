"""
elfscope Core Module
=====================

Error type and data models shared by the decoders, the engine and the
output layer.  The engine lives in :mod:`elfscope.core.engine` and is
imported from there.
"""

from elfscope.core.errors import MalformedInput
from elfscope.core.models import (
    ElfClass,
    ElfFile,
    Endian,
    FileHeader,
    InstructionSet,
    ObjectKind,
    ObjectType,
    ProgramHeader,
    SectionHeader,
    SectionKind,
    SectionType,
    SegmentKind,
    SegmentType,
    TargetABI,
)

__all__ = [
    "ElfClass",
    "ElfFile",
    "Endian",
    "FileHeader",
    "InstructionSet",
    "MalformedInput",
    "ObjectKind",
    "ObjectType",
    "ProgramHeader",
    "SectionHeader",
    "SectionKind",
    "SectionType",
    "SegmentKind",
    "SegmentType",
    "TargetABI",
]
