"""
Diagnostics Tests
=================

Tests for Diagnostic formatting and the DiagnosticReporter policy:
deduplication, trailing end-of-input suppression, the error limit and
temporary suppression.
"""

import logging

import pytest
from revc.errors import DiagnosticsError
from revc.frontend.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticReporter,
    Severity,
)
from revc.frontend.tokens import Token, TokenKind


def tok(text: str, line: int = 1, column: int = 1, kind: TokenKind = TokenKind.IDENTIFIER) -> Token:
    return Token(kind, text, line, column)


EOF = Token(TokenKind.EOF, "", 3, 1)


class TestMessages:

    def test_missing_semicolon_message(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.MISSING_SEMICOLON, tok("tni", 2, 1, TokenKind.INT))

        diagnostic = reporter.diagnostics[0]
        assert diagnostic.message == "missing ';' before 'tni'"
        assert diagnostic.lexeme == "tni"
        assert (diagnostic.line, diagnostic.column) == (2, 1)
        assert diagnostic.severity == Severity.ERROR

    def test_unexpected_token_message(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("}", kind=TokenKind.RBRACE))
        assert reporter.diagnostics[0].message == "unexpected token '}'"

    def test_end_of_input_message(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.MISSING_SEMICOLON, EOF)
        assert reporter.diagnostics[0].message == "missing ';' before end of input"

    def test_custom_message(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("x"), "expected 'litnu' before 'x'")
        assert reporter.diagnostics[0].message == "expected 'litnu' before 'x'"

    def test_format(self):
        diagnostic = Diagnostic(
            kind=DiagnosticKind.MISSING_EQUALS,
            severity=Severity.ERROR,
            line=4,
            column=7,
            message="expected '=' before '5'",
        )
        assert diagnostic.format("prog.rc") == "prog.rc:4:7: error: expected '=' before '5'"
        assert str(diagnostic) == "<input>:4:7: error: expected '=' before '5'"


class TestReportingPolicy:

    def test_same_position_reported_once(self):
        reporter = DiagnosticReporter()
        token = tok("5", 1, 9)
        assert reporter.error(DiagnosticKind.INVALID_FUNCTION_CALL, token)
        assert not reporter.error(DiagnosticKind.MISSING_SEMICOLON, token)

        assert [d.kind for d in reporter.diagnostics] == [DiagnosticKind.INVALID_FUNCTION_CALL]
        assert reporter.suppressed_count == 1

    def test_deduplication_can_be_disabled(self):
        reporter = DiagnosticReporter(deduplicate=False)
        token = tok("5", 1, 9)
        reporter.error(DiagnosticKind.INVALID_FUNCTION_CALL, token)
        reporter.error(DiagnosticKind.MISSING_SEMICOLON, token)
        assert reporter.error_count() == 2

    def test_only_previous_position_is_deduplicated(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("a", 1, 1))
        reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("b", 1, 3))
        reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("a", 1, 1))
        assert reporter.error_count() == 3

    def test_first_error_at_eof_is_reported(self):
        reporter = DiagnosticReporter()
        assert reporter.error(DiagnosticKind.MISSING_SEMICOLON, EOF)
        assert reporter.error_count() == 1

    def test_trailing_eof_error_suppressed(self):
        reporter = DiagnosticReporter()
        reporter.error(DiagnosticKind.MISSING_IDENTIFIER, tok(";", 1, 5))
        assert not reporter.error(DiagnosticKind.BLOCK_BRACES, EOF)
        assert reporter.error_count() == 1
        assert reporter.suppressed_count == 1

    def test_trailing_eof_suppression_can_be_disabled(self):
        reporter = DiagnosticReporter(suppress_eof_errors=False)
        reporter.error(DiagnosticKind.MISSING_IDENTIFIER, tok(";", 1, 5))
        reporter.error(DiagnosticKind.BLOCK_BRACES, EOF)
        assert reporter.error_count() == 2

    def test_error_limit(self, caplog):
        reporter = DiagnosticReporter(max_errors=2)
        with caplog.at_level(logging.WARNING, logger="revc.frontend.diagnostics"):
            for column in range(1, 6):
                reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("}", 1, column))

        assert reporter.error_count() == 2
        assert reporter.suppressed_count == 3
        assert caplog.text.count("Error limit of 2 reached") == 1

    def test_suppressed_context(self):
        reporter = DiagnosticReporter()
        with reporter.suppressed():
            assert not reporter.enabled
            reporter.error(DiagnosticKind.UNEXPECTED_TOKEN, tok("x"))
            reporter.warning(DiagnosticKind.LEXICAL_ERROR, tok("@"))
        assert reporter.enabled
        assert reporter.diagnostics == []

    def test_suppressed_context_restores_on_exception(self):
        reporter = DiagnosticReporter()
        with pytest.raises(RuntimeError):
            with reporter.suppressed():
                raise RuntimeError("boom")
        assert reporter.enabled

    def test_warnings_not_deduplicated(self):
        reporter = DiagnosticReporter()
        reporter.warning(DiagnosticKind.LEXICAL_ERROR, tok("@", 1, 1))
        reporter.warning(DiagnosticKind.LEXICAL_ERROR, tok("@", 1, 1))
        assert reporter.warning_count() == 2
        assert not reporter.has_errors()


class TestReport:

    def test_report_summary(self):
        reporter = DiagnosticReporter(filename="prog.rc")
        reporter.error(DiagnosticKind.MISSING_SEMICOLON, tok("tni", 2, 1, TokenKind.INT))
        reporter.warning(DiagnosticKind.LEXICAL_ERROR, tok("@", 1, 5))

        assert reporter.report().splitlines() == [
            "prog.rc:2:1: error: missing ';' before 'tni'",
            "prog.rc:1:5: warning: skipped invalid token '@'",
            "1 error, 1 warning",
        ]

    def test_empty_report(self):
        assert DiagnosticReporter().report() == "0 errors, 0 warnings"

    def test_raise_if_errors(self):
        reporter = DiagnosticReporter()
        reporter.raise_if_errors()

        reporter.error(DiagnosticKind.MISSING_EQUALS, tok("5", 1, 3))
        with pytest.raises(DiagnosticsError) as exc_info:
            reporter.raise_if_errors()
        assert exc_info.value.error_count == 1
        assert "expected '=' before '5'" in str(exc_info.value)

    def test_warnings_do_not_raise(self):
        reporter = DiagnosticReporter()
        reporter.warning(DiagnosticKind.LEXICAL_ERROR, tok("@"))
        reporter.raise_if_errors()
