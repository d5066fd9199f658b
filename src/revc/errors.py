"""
revc Error Hierarchy
====================

This module defines the exception hierarchy for the revc toolchain.
All exceptions inherit from RevcError, allowing callers to catch every
revc-related failure with a single except clause if desired.

Exception Hierarchy
-------------------
RevcError (base)
├── DiagnosticsError - a parse produced error diagnostics and the caller
│                      asked for them to be raised
└── ParserResourceError - the tree could not be built (memory or
                          recursion exhausted); the only fatal condition

Syntax problems are NOT exceptions. The parser records them as
Diagnostic values (see revc.frontend.diagnostics) and keeps going, so a
complete tree is produced for any input. Exceptions are reserved for the
situations above.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class RevcError(Exception):
    """
    Base exception for all revc errors.

    This class provides common functionality for error messages including
    source location tracking, source line context and optional hints.

        try:
            result.raise_if_errors()
        except RevcError as e:
            print(f"Error: {e}")

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional["SourceLocation"] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.rc:3:9: error: missing ';' before 'tni'
                x = 42
                    ^
            hint: terminate the statement with ';'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens, AST nodes and diagnostics all point back into the source
    through this class. The immutable (frozen) design ensures locations
    cannot be accidentally modified.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Parser Exceptions
# =============================================================================

class DiagnosticsError(RevcError):
    """
    Aggregate error raised on request when a parse produced errors.

    The message is already a formatted report from DiagnosticReporter and
    is passed through without another prefix.
    """

    def __init__(self, report: str, error_count: int = 0):
        self.error_count = error_count
        super().__init__(report)

    def _format_message(self) -> str:
        """Return message as-is - it's already a formatted report."""
        return self.message


class ParserResourceError(RevcError):
    """
    Unrecoverable resource exhaustion while building the syntax tree.

    Raised when the interpreter runs out of memory or recursion depth
    (for example on input nested thousands of parentheses deep). Unlike
    syntax problems this cannot be recovered from, so the parse stops.
    """

    def __init__(
        self,
        reason: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.reason = reason
        super().__init__(
            f"cannot build syntax tree: {reason}",
            location=location,
            hint="simplify deeply nested expressions or blocks",
            source_line=source_line,
        )
