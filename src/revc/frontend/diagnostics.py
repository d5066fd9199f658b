"""
revc Parse Diagnostics
======================

Syntax problems never abort a parse. Each one becomes a Diagnostic that
is handed to the DiagnosticReporter owned by the parser instance, and the
parser resynchronizes and carries on.

Reporting Policy
----------------
The reporter keeps error cascades out of the output:

- An error at the same line and column as the previous one is dropped.
- An error positioned on the end-of-input token is dropped once another
  error has been reported (a truncated program otherwise produces a tail
  of "expected X before end of input" noise).
- Reporting can be switched off for a region with suppressed().
- After max_errors errors, further errors are dropped.

Warnings (lexical errors skipped by the token cursor) bypass the
deduplication and EOF rules; they are always recorded.

Diagnostic Format
-----------------
    prog.rc:3:9: error: missing ';' before 'tni'
    prog.rc:1:5: warning: skipped invalid token '@'
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from revc.errors import DiagnosticsError, SourceLocation
from revc.frontend.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


# =============================================================================
# Diagnostic Kinds
# =============================================================================

class DiagnosticKind(Enum):
    """Categories of parse diagnostics."""

    UNEXPECTED_TOKEN = "unexpected token"
    MISSING_SEMICOLON = "missing semicolon"
    MISSING_IDENTIFIER = "missing identifier"
    MISSING_EQUALS = "missing '='"
    MISSING_PARENTHESES = "missing parenthesis"
    MISSING_CONDITION = "missing condition"
    BLOCK_BRACES = "missing block brace"
    INVALID_OPERATOR = "invalid operator"
    INVALID_FUNCTION_CALL = "invalid function call"
    INVALID_EXPRESSION = "invalid expression"
    LEXICAL_ERROR = "invalid token"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


# Default message templates, formatted with the offending token's display text
MESSAGES: dict[DiagnosticKind, str] = {
    DiagnosticKind.UNEXPECTED_TOKEN: "unexpected token {found}",
    DiagnosticKind.MISSING_SEMICOLON: "missing ';' before {found}",
    DiagnosticKind.MISSING_IDENTIFIER: "expected identifier before {found}",
    DiagnosticKind.MISSING_EQUALS: "expected '=' before {found}",
    DiagnosticKind.MISSING_PARENTHESES: "expected parenthesis before {found}",
    DiagnosticKind.MISSING_CONDITION: "expected condition before {found}",
    DiagnosticKind.BLOCK_BRACES: "missing block brace before {found}",
    DiagnosticKind.INVALID_OPERATOR: "invalid operator {found}",
    DiagnosticKind.INVALID_FUNCTION_CALL: "invalid function call at {found}",
    DiagnosticKind.INVALID_EXPRESSION: "expected expression before {found}",
    DiagnosticKind.LEXICAL_ERROR: "skipped invalid token {found}",
}


# =============================================================================
# Diagnostic Record
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    One reported parse problem.

    Attributes:
        kind: What went wrong
        severity: ERROR for grammar problems, WARNING for skipped tokens
        line: Line of the offending token (1-indexed)
        column: Column of the offending token (1-indexed)
        message: Human-readable description
        lexeme: Text of the offending token
    """
    kind: DiagnosticKind
    severity: Severity
    line: int
    column: int
    message: str
    lexeme: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def format(self, filename: str = "<input>") -> str:
        location = SourceLocation(filename, self.line, self.column)
        return f"{location}: {self.severity.value}: {self.message}"

    def __str__(self) -> str:
        return self.format()


# =============================================================================
# Reporter
# =============================================================================

class DiagnosticReporter:
    """
    Collects diagnostics for one parse, applying the reporting policy.

    Example:
        reporter = DiagnosticReporter(max_errors=50)
        reporter.error(DiagnosticKind.MISSING_SEMICOLON, token)
        for diagnostic in reporter.diagnostics:
            print(diagnostic)

    Attributes:
        diagnostics: Surfaced diagnostics in report order
        max_errors: Errors kept before the rest are dropped
        deduplicate: Drop an error repeating the previous error's position
        suppress_eof_errors: Drop trailing errors positioned on EOF
        filename: Used when formatting the report
    """

    def __init__(
        self,
        max_errors: int = 100,
        deduplicate: bool = True,
        suppress_eof_errors: bool = True,
        filename: str = "<input>",
    ):
        self.diagnostics: list[Diagnostic] = []
        self.max_errors = max_errors
        self.deduplicate = deduplicate
        self.suppress_eof_errors = suppress_eof_errors
        self.filename = filename

        self._enabled = True
        self._last_position: Optional[tuple[int, int]] = None
        self._suppressed_count = 0
        self._limit_logged = False

    # =========================================================================
    # Reporting
    # =========================================================================

    def error(
        self,
        kind: DiagnosticKind,
        token: Token,
        message: Optional[str] = None,
    ) -> bool:
        """
        Report a grammar error at token.

        Args:
            kind: The error category
            token: The offending token (its position locates the error)
            message: Overrides the default message for kind

        Returns:
            True if the diagnostic was recorded, False if the policy
            dropped it
        """
        if not self._enabled:
            return self._drop(kind, token, "reporting disabled")

        position = (token.line, token.column)
        if self.deduplicate and position == self._last_position:
            return self._drop(kind, token, "duplicate position")

        if (
            self.suppress_eof_errors
            and token.kind == TokenKind.EOF
            and self.error_count() > 0
        ):
            return self._drop(kind, token, "trailing end of input")

        if self.error_count() >= self.max_errors:
            if not self._limit_logged:
                logger.warning(f"Error limit of {self.max_errors} reached; further errors dropped")
                self._limit_logged = True
            return self._drop(kind, token, "error limit")

        self._last_position = position
        self._record(kind, Severity.ERROR, token, message)
        return True

    def warning(
        self,
        kind: DiagnosticKind,
        token: Token,
        message: Optional[str] = None,
    ) -> bool:
        """Report a non-fatal warning at token."""
        if not self._enabled:
            return self._drop(kind, token, "reporting disabled")
        self._record(kind, Severity.WARNING, token, message)
        return True

    def _record(
        self,
        kind: DiagnosticKind,
        severity: Severity,
        token: Token,
        message: Optional[str],
    ) -> None:
        text = message or MESSAGES[kind].format(found=token.display())
        diagnostic = Diagnostic(
            kind=kind,
            severity=severity,
            line=token.line,
            column=token.column,
            message=text,
            lexeme=token.text,
        )
        self.diagnostics.append(diagnostic)
        logger.debug(f"Reported {diagnostic.format(self.filename)}")

    def _drop(self, kind: DiagnosticKind, token: Token, reason: str) -> bool:
        self._suppressed_count += 1
        logger.debug(f"Suppressed {kind.name} at {token.line}:{token.column} ({reason})")
        return False

    @contextmanager
    def suppressed(self) -> Iterator[None]:
        """Disable reporting for the duration of the with block."""
        previous = self._enabled
        self._enabled = False
        try:
            yield
        finally:
            self._enabled = previous

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def suppressed_count(self) -> int:
        """Number of diagnostics dropped by the policy."""
        return self._suppressed_count

    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.is_error)

    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if not d.is_error)

    def has_errors(self) -> bool:
        return self.error_count() > 0

    def report(self) -> str:
        """Format all diagnostics followed by a summary line."""
        lines = [d.format(self.filename) for d in self.diagnostics]

        errors = self.error_count()
        warnings = self.warning_count()
        error_word = "error" if errors == 1 else "errors"
        warning_word = "warning" if warnings == 1 else "warnings"
        lines.append(f"{errors} {error_word}, {warnings} {warning_word}")

        return "\n".join(lines)

    def raise_if_errors(self) -> None:
        """Raise DiagnosticsError if any error was reported."""
        if self.has_errors():
            raise DiagnosticsError(self.report(), self.error_count())
