"""
elfscope Console Output
========================

Rich-powered terminal display for decoded ELF images: a file header
panel, a program header (segment) table and a section header table.
Which parts are drawn follows the ``[inspect]`` configuration table.

Uses the :class:`~shared.console.ScopeConsole` abstraction for consistent
styling.

References:
    - Rich library: https://github.com/Textualize/rich
    - Linux man page: readelf(1).
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.config import InspectConfig
from shared.console import ScopeConsole

from elfscope.core.engine import InspectionResult
from elfscope.core.models import FileHeader, ProgramHeader, SectionHeader


# ---------------------------------------------------------------------------
# Colour helpers
# ---------------------------------------------------------------------------

_SEGMENT_COLOURS: dict[str, str] = {
    "LOAD": "bright_green",
    "DYNAMIC": "bright_magenta",
    "INTERP": "bright_yellow",
    "NOTE": "dim",
    "PHDR": "bright_blue",
    "TLS": "bright_cyan",
}


def _segment_colour(segment: ProgramHeader) -> str:
    if segment.segment_type.is_reserved:
        return "yellow"
    return _SEGMENT_COLOURS.get(segment.segment_type.kind.name, "white")


def _perm_colour(flags: str) -> str:
    if "W" in flags and "X" in flags:
        return "bright_red"
    if "X" in flags:
        return "bright_green"
    if "W" in flags:
        return "yellow"
    return "white"


def _hex(value: int, width: int) -> str:
    return f"0x{value:0{width}x}"


# ---------------------------------------------------------------------------
# ElfConsoleOutput
# ---------------------------------------------------------------------------

class ElfConsoleOutput:
    """Rich terminal display for :class:`InspectionResult` objects.

    Usage::

        output = ElfConsoleOutput()
        output.display(engine.inspect("/usr/bin/ls"))
    """

    def __init__(
        self,
        console: ScopeConsole | None = None,
        settings: InspectConfig | None = None,
    ) -> None:
        """Initialise the output renderer.

        Args:
            console: Optional ScopeConsole.  A new one is created if not
                     provided.
            settings: ``[inspect]`` settings controlling which tables are
                      drawn.  Defaults show everything.
        """
        self._console: ScopeConsole = console or ScopeConsole()
        self._settings: InspectConfig = settings or InspectConfig()

    def display(self, result: InspectionResult) -> None:
        """Display one inspection result.

        Failed results are reported as a single error line.
        """
        self._console.section(escape(result.path))

        if result.elf is None:
            self._console.error(escape(result.error or "not decoded"))
            self._console.blank()
            return

        elf = result.elf
        if self._settings.show_header:
            self.display_header(elf.header, result)

        if self._settings.show_segments:
            self.display_segments(elf.program_headers, elf.header.word_size)

        if self._settings.show_sections:
            self.display_sections(elf.section_headers, elf.header.word_size)

        self._console.divider()

    def display_header(self, header: FileHeader, result: InspectionResult) -> None:
        """Display the file header panel."""
        bits = 64 if header.is_64bit else 32
        endian = "little-endian" if header.is_little_endian else "big-endian"
        width = header.word_size * 2

        lines: list[str] = [
            f"[bold]File:[/bold]                {escape(result.path)}",
            f"[bold]Size:[/bold]                {result.size:,} bytes",
            f"[bold]Class:[/bold]               {header.elf_class.name} ({bits}-bit, {endian})",
            f"[bold]OS/ABI:[/bold]              {header.abi.name} (version {header.abi_version})",
            f"[bold]Type:[/bold]                {header.object_type}",
            f"[bold]Machine:[/bold]             {header.isa.name}",
            f"[bold]Entry Point:[/bold]         {_hex(header.entry_point, width)}",
            f"[bold]Flags:[/bold]               0x{header.flags:x}",
            f"[bold]Segments:[/bold]            {header.program_header_count} "
            f"x {header.program_header_entry_size} bytes at 0x{header.program_header_offset:x}",
            f"[bold]Sections:[/bold]            {header.section_header_count} "
            f"x {header.section_header_entry_size} bytes at 0x{header.section_header_offset:x}",
            f"[bold]Name Table Index:[/bold]    {header.section_name_index}",
        ]
        if result.sha256:
            lines.append(f"[bold]SHA-256:[/bold]             {result.sha256}")

        panel = Panel(
            "\n".join(lines),
            title="[bold bright_cyan]ELF Header[/bold bright_cyan]",
            border_style="bright_cyan",
            padding=(1, 2),
        )
        self._console.rich.print(panel)
        self._console.blank()

    def display_segments(self, segments: tuple[ProgramHeader, ...], word_size: int) -> None:
        """Display the program header table."""
        if not segments:
            self._console.info("No program headers")
            return

        width = word_size * 2
        tbl = Table(
            title="Program Headers",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Type", min_width=8)
        tbl.add_column("Offset", justify="right")
        tbl.add_column("VirtAddr", justify="right")
        tbl.add_column("PhysAddr", justify="right")
        tbl.add_column("FileSiz", justify="right")
        tbl.add_column("MemSiz", justify="right")
        tbl.add_column("Flags")
        tbl.add_column("Align", justify="right")

        for i, seg in enumerate(segments):
            colour = _segment_colour(seg)
            perm = seg.flags_str
            perm_colour = _perm_colour(perm)
            tbl.add_row(
                str(i),
                f"[{colour}]{seg.segment_type}[/{colour}]",
                _hex(seg.offset, width),
                _hex(seg.virtual_address, width),
                _hex(seg.physical_address, width),
                _hex(seg.file_size, width),
                _hex(seg.memory_size, width),
                f"[{perm_colour}]{perm}[/{perm_colour}]",
                f"0x{seg.align:x}",
            )

        self._console.rich.print(tbl)
        self._console.blank()

    def display_sections(self, sections: tuple[SectionHeader, ...], word_size: int) -> None:
        """Display the section header table."""
        if not sections:
            self._console.info("No section headers")
            return

        width = word_size * 2
        tbl = Table(
            title="Section Headers",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Name", style="bold", min_width=12)
        tbl.add_column("Type")
        tbl.add_column("Address", justify="right")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("Size", justify="right")
        tbl.add_column("EntSize", justify="right")
        tbl.add_column("Flags")
        tbl.add_column("Link", justify="right")
        tbl.add_column("Info", justify="right")
        tbl.add_column("Align", justify="right")

        for i, sec in enumerate(sections):
            tbl.add_row(
                str(i),
                escape(sec.name),
                str(sec.section_type),
                _hex(sec.address, width),
                f"0x{sec.offset:x}",
                f"0x{sec.size:x}",
                f"0x{sec.entry_size:x}",
                sec.flags_str,
                str(sec.link),
                str(sec.info),
                str(sec.address_align),
            )

        self._console.rich.print(tbl)
        self._console.blank()
