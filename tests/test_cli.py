"""Tests for the crosstype CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from crosstype import __version__
from crosstype.cli import generate_files, main
from crosstype.reasonml import ReasonML


@pytest.fixture
def runner():
    return CliRunner()


def _write_ir(path: Path, module: str, declarations: list) -> Path:
    path.write_text(json.dumps({"module": module, "declarations": declarations}))
    return path


@pytest.fixture
def good_ir(tmp_path):
    return _write_ir(tmp_path / "users.json", "users", [
        {"kind": "struct", "id": "User", "fields": [
            {"id": "name", "type": {"special": "string"}},
            {"id": "id", "type": "Uuid"},
        ]},
    ])


@pytest.fixture
def wide_ir(tmp_path):
    return _write_ir(tmp_path / "ledger.json", "ledger", [
        {"kind": "const", "id": "Total", "type": {"special": "u64"}, "value": 1},
    ])


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "languages" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_languages(self, runner):
        result = runner.invoke(main, ["languages"])
        assert result.exit_code == 0
        assert "reasonml (.re)" in result.output
        assert "typescript (.ts)" in result.output

    def test_generate_to_stdout(self, runner, good_ir, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                main, ["generate", "--lang", "typescript", "--no-version-header", str(good_ir)],
            )
        assert result.exit_code == 0
        assert result.output == (
            "export interface User {\n\tname: string;\n\tid: Uuid;\n}\n\n"
        )

    def test_generate_with_banner(self, runner, good_ir, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["generate", "-l", "reasonml", str(good_ir)])
        assert result.exit_code == 0
        assert f"Generated by crosstype {__version__}" in result.output
        assert "type user = {" in result.output

    def test_generate_with_config(self, runner, good_ir, tmp_path):
        config = tmp_path / "crosstype.toml"
        config.write_text(
            '[output]\nno_version_header = true\n[reasonml.type_mappings]\nUuid = "string"\n'
        )
        result = runner.invoke(
            main, ["generate", "-l", "reasonml", "--config", str(config), str(good_ir)],
        )
        assert result.exit_code == 0
        assert result.output.startswith("type user = {")
        assert "  id: string," in result.output

    def test_generate_to_output_dir(self, runner, good_ir, tmp_path):
        out_dir = tmp_path / "out"
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                main, ["generate", "-l", "reasonml", "-o", str(out_dir), str(good_ir)],
            )
        assert result.exit_code == 0
        written = out_dir / "users.re"
        assert written.exists()
        assert f"wrote {written}" in result.output

    def test_failed_module_does_not_stop_others(self, runner, good_ir, wide_ir, tmp_path):
        out_dir = tmp_path / "out"
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                main,
                ["generate", "-l", "typescript", "-o", str(out_dir), str(wide_ir), str(good_ir)],
            )
        assert result.exit_code == 1
        assert (out_dir / "users.ts").exists()
        assert not (out_dir / "ledger.ts").exists()
        assert "error[E100]" in result.output
        assert "ledger::Total" in result.output

    def test_malformed_ir_reported_and_others_emitted(self, runner, good_ir, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"module": "bad", "imports": ["geometry"]}))
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(
                main, ["generate", "-l", "typescript", "--no-version-header", str(bad), str(good_ir)],
            )
        assert result.exit_code == 1
        assert "export interface User {" in result.output
        assert "error[E200]" in result.output

    def test_bad_config_reported(self, runner, good_ir, tmp_path):
        config = tmp_path / "crosstype.toml"
        config.write_text("[output\n")
        result = runner.invoke(
            main, ["generate", "-l", "reasonml", "--config", str(config), str(good_ir)],
        )
        assert result.exit_code == 1
        assert "error:" in result.output

    def test_unknown_language_rejected(self, runner, good_ir):
        result = runner.invoke(main, ["generate", "-l", "cobol", str(good_ir)])
        assert result.exit_code != 0


class TestGenerateFiles:
    def test_collects_diagnostics(self, good_ir, wide_ir, tmp_path):
        result = generate_files(ReasonML(), [good_ir, wide_ir], tmp_path)
        assert not result.ok
        assert [d.code for d in result.diagnostics] == ["E100"]
        assert result.written == [tmp_path / "users.re"]

    def test_malformed_ir_does_not_stop_others(self, good_ir, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"module": "bad", "imports": ["geometry"]}))
        (tmp_path / "out").mkdir()
        result = generate_files(ReasonML(), [bad, good_ir], tmp_path / "out")
        assert [d.code for d in result.diagnostics] == ["E200"]
        assert result.written == [tmp_path / "out" / "users.re"]

    def test_write_failure_is_reported(self, good_ir, tmp_path):
        out_dir = tmp_path / "out"
        (out_dir / "users.re").mkdir(parents=True)
        other = _write_ir(tmp_path / "tags.json", "tags", [
            {"kind": "alias", "id": "Tag", "type": {"special": "string"}},
        ])
        result = generate_files(ReasonML(), [good_ir, other], out_dir)
        assert [d.code for d in result.diagnostics] == ["E102"]
        assert result.diagnostics[0].labels[0].location == str(out_dir / "users.re")
        assert result.written == [out_dir / "tags.re"]

    def test_module_name_cannot_leave_output_dir(self, tmp_path):
        ir = _write_ir(tmp_path / "escape.json", "../escape", [])
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        result = generate_files(ReasonML(), [ir], out_dir)
        assert [d.code for d in result.diagnostics] == ["E102"]
        assert "not a plain file name" in result.diagnostics[0].message
        assert not (tmp_path / "escape.re").exists()
