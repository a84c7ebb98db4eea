"""
elfscope CLI -- ELF Structural Metadata Decoder
================================================

Click-based command-line interface.  Decodes one or more ELF files and
prints their header, segments and sections, or emits a JSON report.

Usage::

    # Inspect one binary
    elfscope /usr/bin/ls

    # Several files, sections only
    elfscope /usr/lib/*.so --no-segments

    # JSON to stdout
    elfscope /usr/bin/ls --json

    # JSON report file
    elfscope /usr/bin/ls /usr/bin/cat --output report.json

Exit status is 0 when every file decodes and 1 otherwise.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys

import click
from rich.markup import escape

from shared.config import ScopeConfig
from shared.console import ScopeConsole
from shared.logger import ScopeLogger

from elfscope import __version__
from elfscope.core.engine import ScopeEngine
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("elfscope")
@click.argument("paths", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the JSON report to stdout instead of tables.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write the JSON report to this file.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (TOML).  Default: elfscope.toml.",
)
@click.option(
    "--no-segments",
    is_flag=True,
    default=False,
    help="Do not display the program header table.",
)
@click.option(
    "--no-sections",
    is_flag=True,
    default=False,
    help="Do not display the section header table.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose/debug output.",
)
@click.version_option(__version__, prog_name="elfscope")
def elfscope_cli(
    paths: tuple[str, ...],
    json_output: bool,
    output_path: str | None,
    config_path: str | None,
    no_segments: bool,
    no_sections: bool,
    verbose: bool,
) -> None:
    """elfscope -- ELF Structural Metadata Decoder.

    Decode the file header, program headers and section headers of each
    PATH (32/64-bit, little/big-endian).

    Examples:

    \b
        # Full display
        elfscope /usr/bin/ls

    \b
        # Machine-readable output
        elfscope /usr/bin/ls --json
    """
    console = ScopeConsole()

    try:
        config = ScopeConfig.load(config_path)
    except ValueError as exc:
        console.error(escape(f"Invalid configuration: {exc}"))
        sys.exit(1)

    g = config.global_settings
    log_level = "DEBUG" if (verbose or g.debug) else g.log_level
    logger = ScopeLogger(
        "engine",
        log_level=log_level,
        log_file=g.log_file,
        json_logs=g.log_json,
    )

    if no_segments:
        config.inspect.show_segments = False
    if no_sections:
        config.inspect.show_sections = False
    json_output = json_output or config.inspect.output_format == "json"

    engine = ScopeEngine(config=config, logger=logger)

    try:
        with console.status(f"Decoding {len(paths)} file(s)..."):
            results = engine.inspect_many_sync(paths)
    except KeyboardInterrupt:
        console.warning("Inspection interrupted by user.")
        sys.exit(130)

    report_gen = ElfReportGenerator()
    failed = [r for r in results if not r.ok]

    if json_output:
        click.echo(report_gen.render_json(results))
    else:
        output_display = ElfConsoleOutput(console=console, settings=config.inspect)
        for result in results:
            output_display.display(result)

        console.info(f"Files: {len(results)}  Decoded: {len(results) - len(failed)}")
        for result in failed:
            console.error(escape(f"{result.path}: {result.error}"))

    if output_path:
        report_path = report_gen.generate_json(results, output_path)
        if not json_output:
            console.success(f"JSON report saved: {report_path}")

    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfscope`` console script."""
    elfscope_cli()


if __name__ == "__main__":
    main()
