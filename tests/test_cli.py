"""Tests for the command-line interface."""

import io
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jsdocgen import __version__
from jsdocgen.main import _line_column_to_offset, main, report, run_with_cancellation
from jsdocgen.models.declaration_kind import GenerationScope
from jsdocgen.models.generation_result import FileFailure, GenerationResult
from ts_fixtures import FakeParser, tree, variable

SOURCE = "export const answer = 42;\n"
HEADER = "/**\n * Description placeholder\n *\n * @export\n * @type {number}\n */\n"


def answer_tree(text):
    statement = "export const answer = 42;"
    before = text[: text.index(statement)].rstrip()
    doc = before[before.rindex("/**"):] if before.endswith("*/") else None
    return tree(text, variable(statement, "answer", modifiers=["export"], jsDoc=doc, inferredType="number"))


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture
def fake_parser():
    parser = FakeParser(
        builders={"answer.ts": answer_tree, "other.js": answer_tree},
        errors={"broken.ts": SyntaxError("Expression expected.")},
    )
    with patch("jsdocgen.main.TypeScriptParser", return_value=parser):
        yield parser


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "answer.ts"
    path.write_text(SOURCE)
    return path


class TestCLI:
    """Test suite for command-line interface."""

    def test_main_no_command(self, capsys):
        """Test that running without command shows help."""
        exit_code = main([])
        captured = capsys.readouterr()

        assert exit_code == 1
        assert "usage:" in captured.out

    def test_main_help(self, capsys):
        """Test help flag."""
        with pytest.raises(SystemExit) as exc:
            main(["--help"])

        assert exc.value.code == 0
        captured = capsys.readouterr()
        assert "position" in captured.out
        assert "workspace" in captured.out

    def test_main_version(self, capsys):
        """Test version flag."""
        with pytest.raises(SystemExit) as exc:
            main(["--version"])

        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_position_requires_location(self, source_file):
        """Test that position needs --offset or --line."""
        with pytest.raises(SystemExit) as exc:
            main(["position", str(source_file)])

        assert exc.value.code == 2


class TestFileCommand:
    """Test the file subcommand."""

    def test_inserts_headers(self, fake_parser, source_file, capsys):
        exit_code = main(["file", str(source_file)])
        captured = capsys.readouterr()

        assert exit_code == 0
        assert source_file.read_text() == HEADER + SOURCE
        assert captured.out.strip() == "Generated 1 JSDoc header."

    def test_json_output(self, fake_parser, source_file, capsys):
        exit_code = main(["file", str(source_file), "--format", "json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["scope"] == "file"
        assert data["generated"] == 1
        assert data["applied"] is True
        assert data["message"] == "Generated 1 JSDoc header."

    def test_nothing_to_generate_warns(self, fake_parser, source_file, capsys):
        source_file.write_text(HEADER + SOURCE)

        exit_code = main(["file", str(source_file)])

        assert exit_code == 0
        assert "Warning: No JSDoc generated." in capsys.readouterr().err

    def test_unsupported_file_type(self, fake_parser, tmp_path, capsys):
        notes = tmp_path / "notes.md"
        notes.write_text("# Notes\n")

        exit_code = main(["file", str(notes)])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_settings_file_is_used(self, fake_parser, source_file):
        settings = source_file.parent / "settings.json"
        settings.write_text(json.dumps({"includeExport": False}))

        main(["file", str(source_file), "--config", str(settings)])

        assert " * @export\n" not in source_file.read_text()

    def test_invalid_settings_file(self, fake_parser, source_file, capsys):
        settings = source_file.parent / "settings.json"
        settings.write_text("{broken")

        exit_code = main(["file", str(source_file), "--config", str(settings)])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err


class TestPositionCommand:
    """Test the position subcommand."""

    def test_inserts_into_file(self, fake_parser, source_file):
        exit_code = main(["position", str(source_file), "--line", "1", "--column", "14"])

        assert exit_code == 0
        assert source_file.read_text() == HEADER + SOURCE

    def test_print_leaves_file_untouched(self, fake_parser, source_file, capsys):
        exit_code = main(["position", str(source_file), "--offset", "0", "--print"])
        captured = capsys.readouterr()

        assert exit_code == 0
        assert captured.out == HEADER
        assert "Generated 1 JSDoc header." in captured.err
        assert source_file.read_text() == SOURCE

    def test_stdin_snippet(self, fake_parser, source_file, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO(SOURCE))

        exit_code = main(["position", str(source_file), "--offset", "0", "--stdin", "--snippet"])

        assert exit_code == 0
        assert capsys.readouterr().out.startswith("/**\n * ${1:Description placeholder}\n")

    def test_line_outside_file(self, fake_parser, source_file, capsys):
        exit_code = main(["position", str(source_file), "--line", "40"])

        assert exit_code == 1
        assert "Line 40 is outside the file" in capsys.readouterr().err


class TestFolderCommands:
    """Test the folder and workspace subcommands."""

    def test_folder_reports_failures(self, fake_parser, source_file, capsys):
        (source_file.parent / "broken.ts").write_text("let = ;")
        (source_file.parent / "other.js").write_text(SOURCE)

        exit_code = main(["folder", str(source_file.parent)])
        captured = capsys.readouterr()

        assert exit_code == 0
        assert "Generated 2 JSDoc headers." in captured.out
        assert "broken.ts: Expression expected." in captured.err
        assert (source_file.parent / "other.js").read_text() == HEADER + SOURCE

    def test_workspace_glob(self, fake_parser, source_file):
        (source_file.parent / "other.js").write_text(SOURCE)

        exit_code = main(["workspace", str(source_file.parent), "--glob", "**/*.js"])

        assert exit_code == 0
        assert source_file.read_text() == SOURCE
        assert (source_file.parent / "other.js").read_text() == HEADER + SOURCE

    def test_folder_must_exist(self, fake_parser, tmp_path, capsys):
        exit_code = main(["folder", str(tmp_path / "missing")])

        assert exit_code == 1
        assert "not a directory" in capsys.readouterr().err


class TestReport:
    """Test result reporting and exit codes."""

    def test_unapplied_edits_fail(self, capsys):
        result = GenerationResult(GenerationScope.FOLDER, generated=3)

        assert report(result, "summary") == 1
        assert "could not be applied" in capsys.readouterr().out

    def test_cancelled_run_succeeds(self, capsys):
        result = GenerationResult(GenerationScope.WORKSPACE, generated=2, cancelled=True)

        assert report(result, "summary") == 0
        assert "no edits were applied" in capsys.readouterr().out

    def test_failures_go_to_stderr(self, capsys):
        result = GenerationResult(GenerationScope.FOLDER, generated=1, applied=True)
        result.failures.append(FileFailure(filepath="a.ts", error="boom"))

        assert report(result, "summary") == 0
        assert "Warning: Failed to process a.ts: boom" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "line,column,expected",
        [(1, 1, 0), (1, 4, 3), (2, 1, 7), (3, 1, 14)],
    )
    def test_line_column_to_offset(self, line, column, expected):
        assert _line_column_to_offset("let a;\nlet b;\n", line, column) == expected

    def test_column_outside_line(self):
        with pytest.raises(ValueError, match="Column 9"):
            _line_column_to_offset("let a;\n", 1, 9)


class TestRunWithCancellation:
    """Test running a request and releasing its connections."""

    def test_orchestrator_closed_after_result(self):
        orchestrator = MagicMock()
        orchestrator.close = AsyncMock()
        expected = GenerationResult(GenerationScope.FILE, generated=1, applied=True)

        async def generate():
            return expected

        assert run_with_cancellation(generate(), orchestrator) is expected
        orchestrator.close.assert_awaited_once()

    def test_orchestrator_closed_after_error(self):
        orchestrator = MagicMock()
        orchestrator.close = AsyncMock()

        async def generate():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            run_with_cancellation(generate(), orchestrator)
        orchestrator.close.assert_awaited_once()
