"""
revc Token Cursor
=================

The cursor sits between the lexer function and the parser. It owns the
scan position, pulls tokens on demand, and hides the tokens the grammar
never looks at:

- COMMENT and SKIP tokens are dropped silently.
- ERROR tokens are dropped after a LEXICAL_ERROR warning is reported.

Significant tokens are buffered, so peek() can look several tokens ahead
without re-lexing and without disturbing the current token. Each raw
token is lexed and filtered exactly once.
"""

import logging
from typing import Callable, Optional

from revc.frontend import lexer
from revc.frontend.diagnostics import DiagnosticKind, DiagnosticReporter
from revc.frontend.tokens import FILTERED_KINDS, Token, TokenKind

logger = logging.getLogger(__name__)

# Signature of the lexer function the cursor drives
NextTokenFn = Callable[[str, int], tuple[Token, int]]


class TokenCursor:
    """
    Current-token view over a lexer with buffered lookahead.

    Usage:
        cursor = TokenCursor("tni x = 1;")
        while not cursor.at_end():
            print(cursor.current)
            cursor.advance()

    Attributes:
        source: The text being scanned
        reporter: Receives LEXICAL_ERROR warnings for skipped ERROR tokens
        position: Raw scan offset just past the last lexed token
    """

    def __init__(
        self,
        source: str,
        next_token: NextTokenFn = lexer.next_token,
        reporter: Optional[DiagnosticReporter] = None,
    ):
        self.source = source
        self.reporter = reporter if reporter is not None else DiagnosticReporter()
        self.position = 0

        self._next_token = next_token
        self._buffer: list[Token] = []
        self._index = 0
        self._mark: Optional[int] = None

    # =========================================================================
    # Lexing
    # =========================================================================

    def _lex_significant(self) -> Token:
        """Pull raw tokens until one the parser should see."""
        while True:
            token, self.position = self._next_token(self.source, self.position)
            if token.kind not in FILTERED_KINDS:
                return token
            if token.kind == TokenKind.ERROR:
                logger.debug(f"Skipping lexical error {token!r}")
                self.reporter.warning(DiagnosticKind.LEXICAL_ERROR, token)

    def _token_at(self, index: int) -> Token:
        while len(self._buffer) <= index:
            if self._buffer and self._buffer[-1].kind == TokenKind.EOF:
                return self._buffer[-1]
            self._buffer.append(self._lex_significant())
        return self._buffer[index]

    # =========================================================================
    # Navigation
    # =========================================================================

    def prime(self) -> Token:
        """Fetch the first significant token (if not fetched yet)."""
        return self._token_at(self._index)

    @property
    def current(self) -> Token:
        """The active token, not consumed."""
        return self._token_at(self._index)

    def peek(self, offset: int = 1) -> Token:
        """
        Look ahead without consuming.

        Args:
            offset: 0 is the current token, 1 the one after it, and so on

        Returns:
            The significant token offset positions ahead, or EOF if the
            stream ends first
        """
        return self._token_at(self._index + offset)

    def advance(self) -> Token:
        """
        Move to the next significant token.

        Returns:
            The token that was current before advancing. At EOF the cursor
            stays put and EOF is returned.
        """
        token = self.current
        if token.kind == TokenKind.EOF:
            return token

        self._index += 1
        if self._mark is None:
            # Nothing can rewind past here, so drop the consumed prefix
            del self._buffer[:self._index]
            self._index = 0
        return token

    def match(self, kind: TokenKind) -> bool:
        """Return True if the current token is of the given kind."""
        return self.current.kind == kind

    def at_end(self) -> bool:
        return self.current.kind == TokenKind.EOF

    # =========================================================================
    # Backtracking
    # =========================================================================

    def save_position(self) -> int:
        """
        Mark the current token for a later restore_position().

        Only one mark is held at a time; saving again replaces it. Tokens
        consumed while a mark is held stay buffered until the mark is
        restored or released.
        """
        self._mark = self._index
        return self._index

    def restore_position(self, mark: int) -> None:
        """Rewind to a mark from save_position() and release it."""
        if self._mark is None or mark > len(self._buffer):
            raise ValueError(f"no saved cursor position {mark}")
        self._index = mark
        self._mark = None

    def release_position(self) -> None:
        """Drop the saved mark without rewinding."""
        self._mark = None
        del self._buffer[:self._index]
        self._index = 0
