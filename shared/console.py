"""
elfscope Console Interface
===========================

Rich-powered console abstraction shared by the CLI and the renderers in
:mod:`elfscope.output`.

The class wraps :class:`rich.console.Console` and adds section rules,
severity-coloured one-line messages and a status spinner, all with one
consistent palette.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from rich.console import Console
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all elfscope output
# ---------------------------------------------------------------------------
_SCOPE_THEME = Theme(
    {
        "scope.section": "bold bright_magenta",
        "scope.success": "bold green",
        "scope.warning": "bold yellow",
        "scope.error": "bold red",
        "scope.info": "bold bright_blue",
    }
)


class ScopeConsole:
    """Unified console interface for elfscope.

    Usage::

        con = ScopeConsole()
        con.section("/usr/bin/ls")
        con.success("3 files decoded")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (library / test mode).
            record: Enable Rich recording so output can be exported.
            width:  Fixed render width; ``None`` auto-detects the terminal.
        """
        self._console = Console(
            theme=_SCOPE_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section rule titled *title*."""
        self._console.rule(
            f"  {title}  ",
            style="scope.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[scope.success][✔] SUCCESS:[/scope.success] {message}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[scope.warning][⚠] WARNING:[/scope.warning] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[scope.error][✘] ERROR:[/scope.error] {message}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[scope.info][ℹ] INFO:[/scope.info] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Status spinner
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(
        self, message: str = "Working..."
    ) -> Generator[Any, None, None]:
        """Context-manager showing a spinner with a status message.

        Example::

            with con.status("Decoding 12 files..."):
                results = engine.inspect_many_sync(paths)
        """
        with self._console.status(
            f"[scope.info]{message}[/scope.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as status_obj:
            yield status_obj

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def divider(self, style: str = "dim") -> None:
        """Print a thin horizontal rule."""
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
