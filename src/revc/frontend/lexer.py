"""
revc Lexer (Tokenizer)
======================

Reference implementation of the lexer the parser consumes. The contract
is a single pure function:

    next_token(source, position) -> (Token, new_position)

It never raises on bad input. Malformed lexemes come back as ERROR
tokens and comments as COMMENT tokens; the token cursor filters both out
(reporting a warning for errors) so the parser only sees significant
tokens.

Token Categories
----------------
- Keywords: reversed spellings (tni, elihw, lairotcaf, ...)
- Identifiers: variable and function names
- Numbers: 42, 3.14
- Strings: "double quoted" with backslash escapes
- Operators: + - * / % < > ! = == != <= >= && ||
- Delimiters: ( ) { } , ;

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */

Example Usage
-------------
>>> from revc.frontend.lexer import Lexer
>>> for token in Lexer("tni x = 42;").tokenize():
...     print(token)
Token(INT, 'tni', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(EQUALS, '=', 1:7)
Token(NUMBER, '42', 1:9)
Token(SEMICOLON, ';', 1:11)
Token(EOF, '', 1:12)
"""

import bisect
import string
from functools import lru_cache
from typing import Iterator

from revc.frontend.tokens import KEYWORDS, MAX_LEXEME_LENGTH, Token, TokenKind


# Characters that can start an identifier
IDENT_START = string.ascii_letters + "_"

# Characters that can continue an identifier
IDENT_CHARS = string.ascii_letters + string.digits + "_"

# ASCII only; str.isdigit() would also accept characters such as "²"
DIGITS = string.digits

WHITESPACE = " \t\r\n\f\v"

# Two-character operators, checked before single characters
DOUBLE_TOKENS = {
    "==": TokenKind.EQ,
    "!=": TokenKind.NE,
    ">=": TokenKind.GE,
    "<=": TokenKind.LE,
    "&&": TokenKind.AND,
    "||": TokenKind.OR,
}

SINGLE_TOKENS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "=": TokenKind.EQUALS,
    "*": TokenKind.POINTER,
    "+": TokenKind.OPERATOR,
    "-": TokenKind.OPERATOR,
    "/": TokenKind.OPERATOR,
    "%": TokenKind.OPERATOR,
    "<": TokenKind.OPERATOR,
    ">": TokenKind.OPERATOR,
    "!": TokenKind.OPERATOR,
}


# =============================================================================
# Position Tracking
# =============================================================================

@lru_cache(maxsize=8)
def _line_starts(source: str) -> tuple[int, ...]:
    """Offsets at which each line of source begins."""
    starts = [0]
    index = source.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = source.find("\n", index + 1)
    return tuple(starts)


def line_and_column(source: str, position: int) -> tuple[int, int]:
    """Convert an offset into a 1-based (line, column) pair."""
    starts = _line_starts(source)
    line_index = bisect.bisect_right(starts, position) - 1
    return line_index + 1, position - starts[line_index] + 1


# =============================================================================
# Token Scanning
# =============================================================================

def _make(kind: TokenKind, source: str, start: int, end: int) -> Token:
    line, column = line_and_column(source, start)
    return Token(kind, source[start:end][:MAX_LEXEME_LENGTH], line, column)


def next_token(source: str, position: int) -> tuple[Token, int]:
    """
    Scan the token starting at or after position.

    Args:
        source: Complete source text
        position: Offset to resume scanning from

    Returns:
        The token and the offset just past it. At end of input the EOF
        token is returned and the position does not move.
    """
    length = len(source)
    while position < length and source[position] in WHITESPACE:
        position += 1

    if position >= length:
        return _make(TokenKind.EOF, source, length, length), length

    start = position
    char = source[position]

    # Identifiers and keywords
    if char in IDENT_START:
        while position < length and source[position] in IDENT_CHARS:
            position += 1
        text = source[start:position]
        kind = KEYWORDS.get(text, TokenKind.IDENTIFIER)
        return _make(kind, source, start, position), position

    # Numbers: digits with an optional fractional part
    if char in DIGITS:
        return _scan_number(source, start)

    # String literal
    if char == '"':
        return _scan_string(source, start)

    # Comments
    if source.startswith("//", position):
        end = source.find("\n", position)
        end = length if end == -1 else end
        return _make(TokenKind.COMMENT, source, start, end), end

    if source.startswith("/*", position):
        end = source.find("*/", position + 2)
        if end == -1:
            # Unterminated comment swallows the rest of the input
            return _make(TokenKind.ERROR, source, start, length), length
        return _make(TokenKind.COMMENT, source, start, end + 2), end + 2

    # Operators and delimiters
    pair = source[position:position + 2]
    if pair in DOUBLE_TOKENS:
        return _make(DOUBLE_TOKENS[pair], source, start, start + 2), start + 2

    if char in SINGLE_TOKENS:
        return _make(SINGLE_TOKENS[char], source, start, start + 1), start + 1

    # Unknown character (including a lone '&' or '|')
    return _make(TokenKind.ERROR, source, start, start + 1), start + 1


def _scan_number(source: str, start: int) -> tuple[Token, int]:
    """
    Scan a numeric literal.

    A second decimal point or letters glued to the digits turn the whole
    run into a single ERROR token ("1.2.3", "12abc").
    """
    length = len(source)
    position = start
    seen_dot = False
    malformed = False

    while position < length:
        char = source[position]
        if char in DIGITS:
            position += 1
        elif char == ".":
            if seen_dot:
                malformed = True
            seen_dot = True
            position += 1
        elif char in IDENT_CHARS:
            malformed = True
            position += 1
        else:
            break

    if source[position - 1] == ".":
        malformed = True

    kind = TokenKind.ERROR if malformed else TokenKind.NUMBER
    return _make(kind, source, start, position), position


def _scan_string(source: str, start: int) -> tuple[Token, int]:
    """
    Scan a double-quoted string literal.

    The lexeme keeps the surrounding quotes and escapes verbatim. A
    newline or end of input before the closing quote yields an ERROR
    token covering the text scanned so far.
    """
    length = len(source)
    position = start + 1

    while position < length:
        char = source[position]
        if char == "\\" and position + 1 < length:
            position += 2
            continue
        if char == '"':
            return _make(TokenKind.STRING, source, start, position + 1), position + 1
        if char == "\n":
            break
        position += 1

    return _make(TokenKind.ERROR, source, start, position), position


# =============================================================================
# Lexer Class
# =============================================================================

class Lexer:
    """
    Iterates over every token of a source text.

    The parser pulls tokens one at a time through next_token(); this
    wrapper exists for callers that want the whole stream, such as the
    CLI's --tokens dump.

    Usage:
        tokens = list(Lexer(source).tokenize())

    Attributes:
        source: The source code being tokenized
    """

    def __init__(self, source: str):
        self.source = source

    def tokenize(self, include_trivia: bool = True) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Args:
            include_trivia: If False, COMMENT and SKIP tokens are omitted

        Yields:
            Token objects ending with a single EOF token
        """
        position = 0
        while True:
            token, position = next_token(self.source, position)
            if not include_trivia and token.kind in (TokenKind.COMMENT, TokenKind.SKIP):
                continue
            yield token
            if token.kind == TokenKind.EOF:
                return
