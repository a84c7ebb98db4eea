"""
elfscope Report Generator
==========================

Generates structured JSON reports from inspection results.  Enumerated
fields are written by name (``"X86_64"``, ``"LOOS+0x4e"``) next to their
raw numeric value so the report is readable without an ELF reference at
hand and still lossless.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from elfscope import __version__
from elfscope.core.engine import InspectionResult
from elfscope.core.models import ElfFile, FileHeader, ProgramHeader, SectionHeader


class ElfReportGenerator:
    """Builds JSON documents from :class:`InspectionResult` objects.

    Usage::

        gen = ElfReportGenerator()
        gen.generate_json(results, "report.json")
    """

    def generate_json(
        self,
        results: Iterable[InspectionResult],
        output_path: str | Path,
    ) -> str:
        """Write a JSON report covering every result.

        Args:
            results: Inspection results, in the order they should appear.
            output_path: Filesystem path for the output JSON file.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render_json(results))

        return str(path.resolve())

    def render_json(self, results: Iterable[InspectionResult]) -> str:
        """Return the JSON report as a string."""
        items = [self.to_dict(r) for r in results]
        report_data: dict[str, Any] = {
            "report_type": "elfscope_inspection",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "file_count": len(items),
            "failed_count": sum(1 for item in items if item["error"] is not None),
            "files": items,
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False, default=str)

    def to_dict(self, result: InspectionResult) -> dict[str, Any]:
        """Convert one result into plain JSON-ready data."""
        data: dict[str, Any] = {
            "path": result.path,
            "size": result.size,
            "sha256": result.sha256,
            "error": result.error,
        }
        if result.elf is not None:
            data.update(self._elf_dict(result.elf))
        return data

    # ------------------------------------------------------------------ #
    #  Section builders
    # ------------------------------------------------------------------ #

    def _elf_dict(self, elf: ElfFile) -> dict[str, Any]:
        return {
            "header": self._header_dict(elf.header),
            "string_table_index": elf.string_table_index,
            "program_headers": [self._segment_dict(p) for p in elf.program_headers],
            "section_headers": [self._section_dict(s) for s in elf.section_headers],
        }

    @staticmethod
    def _header_dict(header: FileHeader) -> dict[str, Any]:
        return {
            "class": header.elf_class.name,
            "endian": header.endian.name,
            "abi": header.abi.name,
            "abi_version": header.abi_version,
            "type": str(header.object_type),
            "type_value": header.object_type.value,
            "machine": header.isa.name,
            "machine_value": int(header.isa),
            "entry_point": header.entry_point,
            "program_header_offset": header.program_header_offset,
            "section_header_offset": header.section_header_offset,
            "flags": header.flags,
            "header_size": header.header_size,
            "program_header_entry_size": header.program_header_entry_size,
            "program_header_count": header.program_header_count,
            "section_header_entry_size": header.section_header_entry_size,
            "section_header_count": header.section_header_count,
            "section_name_index": header.section_name_index,
        }

    @staticmethod
    def _segment_dict(segment: ProgramHeader) -> dict[str, Any]:
        return {
            "type": str(segment.segment_type),
            "type_value": segment.segment_type.value,
            "offset": segment.offset,
            "virtual_address": segment.virtual_address,
            "physical_address": segment.physical_address,
            "file_size": segment.file_size,
            "memory_size": segment.memory_size,
            "flags": segment.flags,
            "permissions": segment.flags_str,
            "align": segment.align,
        }

    @staticmethod
    def _section_dict(section: SectionHeader) -> dict[str, Any]:
        return {
            "name": section.name,
            "name_offset": section.name_offset,
            "type": str(section.section_type),
            "type_value": section.section_type.value,
            "flags": section.flags,
            "flag_letters": section.flags_str,
            "address": section.address,
            "offset": section.offset,
            "size": section.size,
            "link": section.link,
            "info": section.info,
            "address_align": section.address_align,
            "entry_size": section.entry_size,
        }
