"""
revc - Resilient Parser for a Reversed-Keyword Teaching Language
================================================================

revc reads programs written in a small C-like language whose keywords
are spelled backwards and builds an abstract syntax tree, reporting
every syntax problem it finds instead of stopping at the first one.

    tni total = 0;
    elihw (total < 10) {
        total = total + lairotcaf(3);
    }
    tnirp total;

Main Components
---------------
- **frontend**: lexer, token cursor, parser, AST and diagnostics
- **cli**: the revparse command

Quick Start
-----------
    >>> from revc import parse_program, format_tree
    >>> result = parse_program("tni x = 2 + 3 * 4;")
    >>> print(format_tree(result.program))
    Program
      VarDecl: x
        BinaryOp: +
          Number: 2
          BinaryOp: *
            Number: 3
            Number: 4

Or from the command line:
    $ revparse program.rc
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from revc.errors import DiagnosticsError, ParserResourceError, RevcError, SourceLocation
from revc.frontend import (
    Diagnostic,
    DiagnosticKind,
    ParseResult,
    Parser,
    ParserOptions,
    ProgramNode,
    format_tree,
    parse_program,
    parse_source,
    render_tree,
)

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticsError",
    "ParseResult",
    "Parser",
    "ParserOptions",
    "ParserResourceError",
    "ProgramNode",
    "RevcError",
    "SourceLocation",
    "format_tree",
    "parse_program",
    "parse_source",
    "render_tree",
]
