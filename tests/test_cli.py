"""
revparse CLI Tests
==================

Tests for the revparse command using click's CliRunner.
"""

import pytest
from click.testing import CliRunner
from revc import __version__
from revc.cli.errors import ExitCode
from revc.cli.revparse import main


@pytest.fixture
def runner(monkeypatch):
    for name in ("REVC_MAX_ERRORS", "REVC_DEDUPLICATE", "REVC_SUPPRESS_EOF_ERRORS"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def write(tmp_path, name: str, source: str):
    path = tmp_path / name
    path.write_text(source)
    return path


class TestRevparseCLI:

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Parse revc programs" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_valid_file(self, runner, tmp_path):
        path = write(tmp_path, "ok.rc", "tni x = 2 + 3;\ntnirp x;\n")
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Parsing input: {path}" in result.output
        assert "Abstract Syntax Tree:" in result.output
        assert "  VarDecl: x" in result.output
        assert "    BinaryOp: +" in result.output
        assert "error" not in result.output

    def test_errors_reported_without_failing(self, runner, tmp_path):
        path = write(tmp_path, "bad.rc", "tni x = 5")
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.SUCCESS
        assert f"{path}:1:10: error: missing ';' before end of input" in result.output
        assert "1 error, 0 warnings" in result.output
        assert "VarDecl: x" in result.output

    def test_strict_fails_on_errors(self, runner, tmp_path):
        path = write(tmp_path, "bad.rc", "tni x = 5")
        result = runner.invoke(main, ["--strict", str(path)])
        assert result.exit_code == ExitCode.PARSE_ERROR

    def test_strict_passes_clean_file(self, runner, tmp_path):
        path = write(tmp_path, "ok.rc", "tni x;")
        result = runner.invoke(main, ["--strict", str(path)])
        assert result.exit_code == ExitCode.SUCCESS

    def test_strict_ignores_warnings(self, runner, tmp_path):
        path = write(tmp_path, "warn.rc", "tni x = 1 @;")
        result = runner.invoke(main, ["--strict", str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "warning: skipped invalid token '@'" in result.output

    def test_tokens(self, runner, tmp_path):
        path = write(tmp_path, "t.rc", "tni x; // note\n")
        result = runner.invoke(main, ["--tokens", str(path)])

        assert result.exit_code == 0
        assert "Token Stream:" in result.output
        assert "Token(INT, 'tni', 1:1)" in result.output
        assert "Token(EOF, '', 2:1)" in result.output
        assert "COMMENT" not in result.output

    def test_max_errors(self, runner, tmp_path):
        path = write(tmp_path, "many.rc", "} } } }")
        result = runner.invoke(main, ["--max-errors", "1", str(path)])
        assert "1 error, 0 warnings" in result.output

    def test_max_errors_from_environment(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("REVC_MAX_ERRORS", "2")
        path = write(tmp_path, "many.rc", "} } } }")
        result = runner.invoke(main, [str(path)])
        assert "2 errors, 0 warnings" in result.output

    def test_invalid_max_errors(self, runner, tmp_path):
        path = write(tmp_path, "ok.rc", "tni x;")
        result = runner.invoke(main, ["--max-errors", "0", str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_multiple_files(self, runner, tmp_path):
        first = write(tmp_path, "a.rc", "tni a;")
        second = write(tmp_path, "b.rc", "tni b")
        result = runner.invoke(main, ["--strict", str(first), str(second)])

        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "VarDecl: a" in result.output
        assert "VarDecl: b" in result.output
        assert f"{second}:1:6: error:" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "nope.rc")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_no_files(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_invalid_utf8(self, runner, tmp_path):
        path = tmp_path / "binary.rc"
        path.write_bytes(b"tni \xff\xfe;")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "not valid UTF-8" in result.output

    def test_deep_nesting(self, runner, tmp_path):
        depth = 20000
        path = write(tmp_path, "deep.rc", "x = " + "(" * depth + "1" + ")" * depth + ";")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "cannot build syntax tree: nesting too deep" in result.output

    def test_long_expression(self, runner, tmp_path):
        terms = 2000
        path = write(tmp_path, "sum.rc", "tnirp " + " + ".join(["1"] * terms) + ";")
        result = runner.invoke(main, ["--strict", str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.count("Number: 1") == terms

    def test_verbose(self, runner, tmp_path):
        path = write(tmp_path, "ok.rc", "tni x;")
        result = runner.invoke(main, ["-v", str(path)])
        assert result.exit_code == 0
