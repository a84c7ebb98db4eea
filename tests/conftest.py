"""Shared fixtures: synthetic ELF images and quiet engine plumbing."""

from __future__ import annotations

from pathlib import Path

import pytest

from shared.config import ScopeConfig
from shared.logger import ScopeLogger

from elfscope.core.engine import ScopeEngine
from tests.elf_builder import build_elf, typical_sections, typical_segments


@pytest.fixture
def elf64_le() -> bytearray:
    return build_elf(segments=typical_segments(), sections=typical_sections())


@pytest.fixture
def elf32_be() -> bytearray:
    return build_elf(
        bits=32,
        little=False,
        machine=0x08,
        entry=0x00400120,
        segments=typical_segments(),
        sections=typical_sections(),
    )


@pytest.fixture
def quiet_logger() -> ScopeLogger:
    return ScopeLogger("test", log_level="DEBUG", console_output=False)


@pytest.fixture
def engine(quiet_logger: ScopeLogger) -> ScopeEngine:
    return ScopeEngine(config=ScopeConfig(), logger=quiet_logger)


@pytest.fixture
def elf_file(tmp_path: Path, elf64_le: bytearray) -> Path:
    path = tmp_path / "sample.elf"
    path.write_bytes(bytes(elf64_le))
    return path
