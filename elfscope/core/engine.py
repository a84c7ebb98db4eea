"""
elfscope Inspection Engine
===========================

Coordinates file intake around the pure decoding core:

    1. Check the file size against ``[inspect] max_file_size``
    2. Read the file into memory
    3. Compute the SHA-256 digest
    4. Decode header, segments and named sections
    5. Wrap everything in an :class:`InspectionResult`

Single files raise on failure.  Batches run one file per worker thread and
record each failure on its own result so one bad file never aborts the
rest.
"""

from __future__ import annotations

import asyncio
import hashlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.config import ScopeConfig
from shared.logger import ScopeLogger

from elfscope.core.errors import MalformedInput
from elfscope.core.models import ElfFile
from elfscope.parsers.elf_parser import decode


class FileTooLargeError(OSError):
    """Raised when a file exceeds ``[inspect] max_file_size``."""


class InspectionResult(BaseModel):
    """Outcome of inspecting one file.

    Attributes:
        path: Path as given by the caller (``"<memory>"`` for raw buffers).
        size: File size in bytes.
        sha256: Hex SHA-256 digest of the contents, empty if unread.
        elf: Decoded image, or ``None`` when decoding failed.
        error: Failure description, or ``None`` on success.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    size: int = Field(default=0, ge=0)
    sha256: str = ""
    elf: Optional[ElfFile] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.elf is not None and self.error is None


# ---------------------------------------------------------------------------
# ScopeEngine
# ---------------------------------------------------------------------------

class ScopeEngine:
    """Reads files from disk and decodes them.

    Usage::

        engine = ScopeEngine()
        result = engine.inspect("/usr/bin/ls")
        print(result.elf.header.isa.name)

    Or for many files at once::

        results = engine.inspect_many_sync(["/bin/ls", "/bin/cat"])
    """

    def __init__(
        self,
        config: ScopeConfig | None = None,
        logger: ScopeLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: elfscope configuration.  Defaults are used if not provided.
            logger: Logger instance.  One is built from ``config`` if not
                provided.
        """
        self._config: ScopeConfig = config or ScopeConfig()
        g = self._config.global_settings
        self._logger: ScopeLogger = logger or ScopeLogger(
            "engine",
            log_level="DEBUG" if g.debug else g.log_level,
            log_file=g.log_file,
            json_logs=g.log_json,
        )

    @property
    def config(self) -> ScopeConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  Single file
    # ------------------------------------------------------------------ #

    def inspect(self, path: str | Path) -> InspectionResult:
        """Read and decode one file.

        Raises:
            FileTooLargeError: If the file exceeds the configured limit.
            OSError: If the file cannot be read.
            MalformedInput: If the contents are not a decodable ELF image.
        """
        file_path = Path(path)
        with self._logger.operation("inspect"):
            size = file_path.stat().st_size
            limit = self._config.inspect.max_file_size
            if size > limit:
                self._logger.error(
                    "File too large: %s (%d bytes, max %d)", file_path, size, limit
                )
                raise FileTooLargeError(
                    f"File too large: {size:,} bytes (max: {limit:,} bytes)"
                )

            data = file_path.read_bytes()
            return self._decode(data, str(path))

    def inspect_data(self, data: bytes, path: str = "<memory>") -> InspectionResult:
        """Decode a buffer already in memory.

        Raises:
            MalformedInput: If *data* is not a decodable ELF image.
        """
        with self._logger.operation("inspect"):
            return self._decode(data, path)

    def _decode(self, data: bytes, path: str) -> InspectionResult:
        digest = hashlib.sha256(data).hexdigest()
        try:
            with self._logger.timed(f"decode {path}"):
                elf = decode(data)
        except MalformedInput as exc:
            self._logger.error("Malformed ELF %s: %s", path, exc, offset=exc.offset)
            raise

        self._logger.debug(
            "Decoded %s",
            path,
            elf_class=elf.header.elf_class.name,
            segments=len(elf.program_headers),
            sections=len(elf.section_headers),
        )
        return InspectionResult(path=path, size=len(data), sha256=digest, elf=elf)

    # ------------------------------------------------------------------ #
    #  Batches
    # ------------------------------------------------------------------ #

    async def inspect_many(self, paths: Iterable[str | Path]) -> list[InspectionResult]:
        """Inspect independent files concurrently.

        Each file is decoded on a worker thread of a pool sized by
        ``[global] max_workers``.  Results come back in input order; a file
        that fails yields a result with ``error`` set and ``elf`` left
        ``None``.
        """
        targets = [str(p) for p in paths]
        if not targets:
            return []

        loop = asyncio.get_running_loop()
        workers = max(1, self._config.global_settings.max_workers)
        self._logger.info("Inspecting %d file(s) with %d worker(s)", len(targets), workers)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                loop.run_in_executor(pool, self._inspect_captured, target)
                for target in targets
            ]
            return list(await asyncio.gather(*futures))

    def inspect_many_sync(self, paths: Iterable[str | Path]) -> list[InspectionResult]:
        """Synchronous wrapper around :meth:`inspect_many`.

        Must not be called from inside a running event loop.
        """
        return asyncio.run(self.inspect_many(paths))

    def _inspect_captured(self, path: str) -> InspectionResult:
        try:
            return self.inspect(path)
        except MalformedInput as exc:
            return InspectionResult(path=path, error=str(exc))
        except OSError as exc:
            if not isinstance(exc, FileTooLargeError):
                self._logger.error("Cannot read %s: %s", path, exc)
            return InspectionResult(path=path, error=str(exc))
