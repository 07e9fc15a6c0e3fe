"""Tests for scripts/reference_tool.py."""
from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from scripts.reference_tool import (
    EXIT_INVALID,
    EXIT_OK,
    EXIT_USAGE,
    main,
    read_reference_lines,
)


def _stdout_json(capsys: pytest.CaptureFixture[str]) -> object:
    return json.loads(capsys.readouterr().out)


class TestParseCommand:
    def test_valid_reference(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "BA-AAAACD-AAAAAEGF"]) == EXIT_OK
        rows = _stdout_json(capsys)
        assert isinstance(rows, list)
        assert rows[0]["valid"] is True
        assert rows[0]["reference"]["object_id"] == 1125

    def test_any_invalid_sets_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--compact", "parse", "BA-AAAACD-AAAAAEGF", "ZZ-A"]) == EXIT_INVALID
        rows = _stdout_json(capsys)
        assert isinstance(rows, list)
        assert [row["valid"] for row in rows] == [True, False]
        assert rows[1]["error"]["kind"] == "unknown_tag"


class TestFormatCommand:
    def test_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([
            "format", "--type", "BA",
            "--company-space-id", "35", "--object-id", "0x465",
        ])
        assert code == EXIT_OK
        row = _stdout_json(capsys)
        assert isinstance(row, dict)
        assert row["reference"] == "BA-" + "A" * 14 + "CD-" + "A" * 13 + "EGF"
        assert row["revision"] is None

    def test_format_logs_formatted_reference(
        self,
        caplog: pytest.LogCaptureFixture,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="reference_tool"):
            assert main(["format", "--type", "GO", "--object-id", "1"]) == EXIT_OK
        row = _stdout_json(capsys)
        assert isinstance(row, dict)
        assert any(row["reference"] in rec.getMessage() for rec in caplog.records)

    def test_unknown_type(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["format", "--type", "ZZ", "--object-id", "1"]) == EXIT_USAGE
        assert capsys.readouterr().out == ""

    def test_missing_field(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["format", "--type", "BA", "--object-id", "1"]) == EXIT_USAGE
        assert capsys.readouterr().out == ""

    def test_negative_value_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["format", "--type", "GO", "--object-id", "-1"])
        assert excinfo.value.code == 2


class TestCheckCommand:
    def test_input_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        refs = tmp_path / "refs.txt"
        refs.write_text("BA-AAAACD-AAAAAEGF\n\nCS-AAAAAAA!\nGO-B\n", encoding="utf-8")
        assert main(["check", "--input", str(refs)]) == EXIT_INVALID
        lines = capsys.readouterr().out.splitlines()
        rows = [json.loads(line) for line in lines]
        assert [row["valid"] for row in rows] == [True, False, True]
        assert rows[1]["error"]["kind"] == "invalid_character"

    def test_all_valid_from_stdin(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("GO-B\nCS-C\n"))
        assert main(["check"]) == EXIT_OK
        assert len(capsys.readouterr().out.splitlines()) == 2

    def test_missing_input_file(self, tmp_path: Path) -> None:
        assert main(["check", "--input", str(tmp_path / "missing.txt")]) == EXIT_USAGE

    def test_non_utf8_input_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        refs = tmp_path / "refs.txt"
        refs.write_bytes(b"BA-AAAACD-AAAAAEGF\n\xff\xfe-AAAA\n")
        assert main(["check", "--input", str(refs)]) == EXIT_USAGE
        assert capsys.readouterr().out == ""

    def test_non_utf8_stdin(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        stdin = io.TextIOWrapper(io.BytesIO(b"GO-B\n\xff\n"), encoding="utf-8")
        monkeypatch.setattr("sys.stdin", stdin)
        assert main(["check"]) == EXIT_USAGE
        assert capsys.readouterr().out == ""

    def test_read_reference_lines_skips_blanks(self) -> None:
        handle = io.StringIO("  GO-B \n\n\t\nCS-C\n")
        assert read_reference_lines(handle) == ["GO-B", "CS-C"]


class TestTypesCommand:
    def test_lists_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["types"]) == EXIT_OK
        rows = _stdout_json(capsys)
        assert isinstance(rows, list)
        by_tag = {row["tag"]: row for row in rows}
        assert by_tag["BA"]["slots"] == ["company_space_id", "object_id"]
        assert by_tag["BA"]["width"] == 16
        assert by_tag["BA"]["provisional"] is False
        assert by_tag["AO"]["provisional"] is True
