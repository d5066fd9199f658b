"""
revc Tokens
===========

Token kinds and the Token value type shared by the lexer and the parser.

The parser never depends on a particular lexer implementation: anything
that returns these Token values from next_token(source, position) can
drive it. The keyword table below is the one used by the reference lexer
in revc.frontend.lexer.

Keywords
--------
The teaching language spells its keywords backwards:

| Keyword     | Meaning   | Keyword    | Meaning   |
|-------------|-----------|------------|-----------|
| tni         | int       | fi         | if        |
| taolf       | float     | esle       | else      |
| rahc        | char      | elihw      | while     |
| diov        | void      | taeper     | repeat    |
| gnol        | long      | litnu      | until     |
| trohs       | short     | tnirp      | print     |
| elbuod      | double    | nruter     | return    |
| dengis      | signed    | lairotcaf  | factorial |
| dengisnu    | unsigned  |            |           |
"""

from dataclasses import dataclass
from enum import Enum, auto

from revc.errors import SourceLocation


# Lexemes longer than this are truncated by the lexer
MAX_LEXEME_LENGTH = 100

# Built-in call recognised on a plain identifier followed by '('
FACTORIAL_BUILTIN = "factorial"


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Lexical categories produced by the lexer."""

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Integer or decimal literals
    STRING = auto()         # String literals "..."

    # === Operators ===
    OPERATOR = auto()       # Generic operator: + - / % < > !
    POINTER = auto()        # * (multiplication or pointer star)
    EQUALS = auto()         # =
    EQ = auto()             # ==
    NE = auto()             # !=
    GE = auto()             # >=
    LE = auto()             # <=
    AND = auto()            # &&
    OR = auto()             # ||

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    COMMA = auto()          # ,
    SEMICOLON = auto()      # ;

    # === Keywords - Type Specifiers ===
    INT = auto()            # tni
    FLOAT = auto()          # taolf
    CHAR = auto()           # rahc
    VOID = auto()           # diov
    LONG = auto()           # gnol
    SHORT = auto()          # trohs
    DOUBLE = auto()         # elbuod
    SIGNED = auto()         # dengis
    UNSIGNED = auto()       # dengisnu

    # === Keywords - Statements ===
    IF = auto()             # fi
    ELSE = auto()           # esle
    WHILE = auto()          # elihw
    REPEAT = auto()         # taeper
    UNTIL = auto()          # litnu
    PRINT = auto()          # tnirp
    RETURN = auto()         # nruter
    FACTORIAL = auto()      # lairotcaf

    # === Filtered by the token cursor ===
    ERROR = auto()          # Malformed input, surfaced as a warning
    COMMENT = auto()        # // ... and /* ... */
    SKIP = auto()           # Trivia a lexer chooses to surface


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, TokenKind] = {
    # Type specifiers
    "tni": TokenKind.INT,
    "taolf": TokenKind.FLOAT,
    "rahc": TokenKind.CHAR,
    "diov": TokenKind.VOID,
    "gnol": TokenKind.LONG,
    "trohs": TokenKind.SHORT,
    "elbuod": TokenKind.DOUBLE,
    "dengis": TokenKind.SIGNED,
    "dengisnu": TokenKind.UNSIGNED,

    # Statements
    "fi": TokenKind.IF,
    "esle": TokenKind.ELSE,
    "elihw": TokenKind.WHILE,
    "taeper": TokenKind.REPEAT,
    "litnu": TokenKind.UNTIL,
    "tnirp": TokenKind.PRINT,
    "nruter": TokenKind.RETURN,
    "lairotcaf": TokenKind.FACTORIAL,
}

TYPE_KEYWORDS = frozenset({
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.CHAR,
    TokenKind.VOID,
    TokenKind.LONG,
    TokenKind.SHORT,
    TokenKind.DOUBLE,
    TokenKind.SIGNED,
    TokenKind.UNSIGNED,
})

# Tokens the cursor drops before the parser sees them
FILTERED_KINDS = frozenset({TokenKind.ERROR, TokenKind.COMMENT, TokenKind.SKIP})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Attributes:
        kind: The TokenKind classification
        text: The lexeme as it appeared in the source
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
    """
    kind: TokenKind
    text: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    def location(self, filename: str = "<input>") -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(filename, self.line, self.column)

    def is_type_keyword(self) -> bool:
        """Return True if this token is a type keyword."""
        return self.kind in TYPE_KEYWORDS

    def display(self) -> str:
        """Lexeme as shown in diagnostics."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"'{self.text}'"
