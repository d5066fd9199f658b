"""
revc Front End
==============

Lexing and parsing for the reversed-keyword teaching language.

Pipeline
--------
    Source → next_token() → TokenCursor → Parser → ProgramNode + Diagnostics

The parser only needs a next_token(source, position) function; the lexer
in revc.frontend.lexer is the default one and can be swapped out.

Usage
-----
>>> from revc.frontend import parse_program, format_tree
>>> result = parse_program("fi (x > 1) { tnirp x; }")
>>> print(format_tree(result.program))
Program
  If
    BinaryOp: >
      Identifier: x
      Number: 1
    Block
      Print
        Identifier: x
"""

from revc.frontend.ast import ASTNode, ASTVisitor, NodeKind, ProgramNode, format_tree, render_tree
from revc.frontend.cursor import TokenCursor
from revc.frontend.diagnostics import Diagnostic, DiagnosticKind, DiagnosticReporter, Severity
from revc.frontend.lexer import Lexer, next_token
from revc.frontend.options import ParserOptions
from revc.frontend.parser import ParseResult, Parser, parse_program, parse_source
from revc.frontend.tokens import Token, TokenKind

__all__ = [
    "ASTNode",
    "ASTVisitor",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticReporter",
    "Lexer",
    "NodeKind",
    "ParseResult",
    "Parser",
    "ParserOptions",
    "ProgramNode",
    "Severity",
    "Token",
    "TokenCursor",
    "TokenKind",
    "format_tree",
    "next_token",
    "parse_program",
    "parse_source",
    "render_tree",
]
