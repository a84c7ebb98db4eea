"""Tests for the ``elfscope`` command."""

import json

from click.testing import CliRunner

from elfscope.cli import elfscope_cli


def _run(*args):
    return CliRunner().invoke(elfscope_cli, [str(a) for a in args])


class TestCli:
    def test_decodes_file(self, elf_file):
        result = _run(elf_file)
        assert result.exit_code == 0, result.output
        assert "ELF Header" in result.output
        assert "Decoded: 1" in result.output

    def test_malformed_exit_code(self, tmp_path, elf_file):
        bad = tmp_path / "bad.bin"
        bad.write_bytes(b"not an elf at all")
        result = _run(elf_file, bad)
        assert result.exit_code == 1
        assert "bad ELF magic" in result.output

    def test_missing_file_exit_code(self, tmp_path):
        result = _run(tmp_path / "absent.elf")
        assert result.exit_code == 1

    def test_requires_a_path(self):
        result = _run()
        assert result.exit_code == 2

    def test_json_stdout(self, elf_file):
        result = _run(elf_file, "--json")
        assert result.exit_code == 0
        assert '"report_type": "elfscope_inspection"' in result.output
        assert "ELF Header" not in result.output

    def test_output_report(self, elf_file, tmp_path):
        report = tmp_path / "report.json"
        result = _run(elf_file, "--output", report)
        assert result.exit_code == 0
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["files"][0]["header"]["machine"] == "X86_64"
        assert "JSON report saved" in result.output

    def test_hide_tables(self, elf_file):
        result = _run(elf_file, "--no-segments", "--no-sections")
        assert result.exit_code == 0
        assert "Program Headers" not in result.output
        assert "Section Headers" not in result.output

    def test_config_file(self, elf_file, tmp_path):
        cfg = tmp_path / "elfscope.toml"
        cfg.write_text("[inspect]\nmax_file_size = 8\n", encoding="utf-8")
        result = _run(elf_file, "--config", cfg)
        assert result.exit_code == 1
        assert "too large" in result.output

    def test_invalid_config_file(self, elf_file, tmp_path):
        cfg = tmp_path / "broken.toml"
        cfg.write_text("[inspect\n", encoding="utf-8")
        result = _run(elf_file, "--config", cfg)
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_unknown_output_format(self, elf_file, tmp_path):
        cfg = tmp_path / "elfscope.toml"
        cfg.write_text('[inspect]\noutput_format = "xml"\n', encoding="utf-8")
        result = _run(elf_file, "--config", cfg)
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "output_format" in result.output

    def test_version(self):
        result = _run("--version")
        assert result.exit_code == 0
        assert "elfscope" in result.output
