# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the revc reference lexer.
#
# Test coverage includes:
#   - Reversed keywords, identifiers, numbers and strings
#   - Operators and delimiters, including two-character operators
#   - Comments surfaced as COMMENT tokens
#   - Malformed input surfaced as ERROR tokens
#   - Line and column tracking
# =============================================================================

import pytest
from revc.frontend.lexer import Lexer, line_and_column, next_token
from revc.frontend.tokens import KEYWORDS, MAX_LEXEME_LENGTH, Token, TokenKind


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str, include_trivia: bool = True) -> list[Token]:
    """Tokenize source and drop the trailing EOF token."""
    tokens = list(Lexer(source).tokenize(include_trivia=include_trivia))
    assert tokens[-1].kind == TokenKind.EOF
    return tokens[:-1]


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source should produce only EOF."""
        tokens = list(Lexer("").tokenize())
        assert tokens == [Token(TokenKind.EOF, "", 1, 1)]

    def test_whitespace_only(self):
        assert tokenize("  \t\n  \r\n") == []

    def test_declaration(self):
        """A full declaration with positions."""
        tokens = list(Lexer("tni x = 42;").tokenize())
        assert tokens == [
            Token(TokenKind.INT, "tni", 1, 1),
            Token(TokenKind.IDENTIFIER, "x", 1, 5),
            Token(TokenKind.EQUALS, "=", 1, 7),
            Token(TokenKind.NUMBER, "42", 1, 9),
            Token(TokenKind.SEMICOLON, ";", 1, 11),
            Token(TokenKind.EOF, "", 1, 12),
        ]

    @pytest.mark.parametrize("text,kind", sorted(KEYWORDS.items()))
    def test_keywords(self, text, kind):
        """Every reversed keyword maps to its token kind."""
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].kind == kind
        assert tokens[0].text == text

    def test_forward_spellings_are_identifiers(self):
        """The ordinary C spellings are not keywords."""
        assert kinds("int while print") == [TokenKind.IDENTIFIER] * 3

    def test_factorial_builtin_is_identifier(self):
        """'factorial' is reserved by the parser, not the lexer."""
        assert kinds("factorial lairotcaf") == [TokenKind.IDENTIFIER, TokenKind.FACTORIAL]

    def test_type_keywords(self):
        tokens = tokenize("tni diov dengisnu elihw main")
        assert [t.is_type_keyword() for t in tokens] == [True, True, True, False, False]

    def test_identifiers(self):
        for ident in ["main", "_tmp", "x1", "tni2", "_"]:
            tokens = tokenize(ident)
            assert tokens[0].kind == TokenKind.IDENTIFIER
            assert tokens[0].text == ident

    def test_long_lexeme_truncated(self):
        name = "a" * (MAX_LEXEME_LENGTH + 50)
        token = tokenize(name)[0]
        assert token.kind == TokenKind.IDENTIFIER
        assert len(token.text) == MAX_LEXEME_LENGTH


# =============================================================================
# Literal Tests
# =============================================================================

class TestLiterals:
    """Numbers and strings."""

    def test_integer(self):
        assert tokenize("123")[0] == Token(TokenKind.NUMBER, "123", 1, 1)

    def test_decimal(self):
        assert tokenize("3.14")[0].kind == TokenKind.NUMBER

    @pytest.mark.parametrize("text", ["1.2.3", "12abc", "5."])
    def test_malformed_numbers(self, text):
        """Malformed numbers become a single ERROR token."""
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.ERROR
        assert tokens[0].text == text

    def test_string(self):
        token = tokenize('"hello world"')[0]
        assert token.kind == TokenKind.STRING
        assert token.text == '"hello world"'

    def test_string_with_escaped_quote(self):
        token = tokenize(r'"say \"hi\""')[0]
        assert token.kind == TokenKind.STRING
        assert token.text == r'"say \"hi\""'

    def test_unterminated_string(self):
        tokens = tokenize('"oops\ntni')
        assert tokens[0].kind == TokenKind.ERROR
        assert tokens[0].text == '"oops'
        assert tokens[1].kind == TokenKind.INT

    @pytest.mark.parametrize("text", ["²", "٣"])
    def test_non_ascii_digits_rejected(self, text):
        """Only ASCII 0-9 start a number."""
        tokens = tokenize(text)
        assert [t.kind for t in tokens] == [TokenKind.ERROR]
        assert tokens[0].text == text

    def test_number_followed_by_superscript(self):
        assert tokenize("12²") == [
            Token(TokenKind.NUMBER, "12", 1, 1),
            Token(TokenKind.ERROR, "²", 1, 3),
        ]


# =============================================================================
# Operator and Delimiter Tests
# =============================================================================

class TestOperators:

    def test_two_character_operators(self):
        assert kinds("== != >= <= && ||") == [
            TokenKind.EQ,
            TokenKind.NE,
            TokenKind.GE,
            TokenKind.LE,
            TokenKind.AND,
            TokenKind.OR,
        ]

    def test_generic_operators(self):
        tokens = tokenize("+ - / % < > !")
        assert all(t.kind == TokenKind.OPERATOR for t in tokens)
        assert [t.text for t in tokens] == ["+", "-", "/", "%", "<", ">", "!"]

    def test_star_is_pointer(self):
        assert kinds("a*b") == [TokenKind.IDENTIFIER, TokenKind.POINTER, TokenKind.IDENTIFIER]

    def test_delimiters(self):
        assert kinds("( ) { } , ; =") == [
            TokenKind.LPAREN,
            TokenKind.RPAREN,
            TokenKind.LBRACE,
            TokenKind.RBRACE,
            TokenKind.COMMA,
            TokenKind.SEMICOLON,
            TokenKind.EQUALS,
        ]

    def test_no_space_needed(self):
        assert kinds("x<=y") == [TokenKind.IDENTIFIER, TokenKind.LE, TokenKind.IDENTIFIER]

    @pytest.mark.parametrize("char", ["@", "#", "$", "&", "|"])
    def test_unknown_character(self, char):
        tokens = tokenize(char)
        assert tokens == [Token(TokenKind.ERROR, char, 1, 1)]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:

    def test_line_comment(self):
        tokens = tokenize("// note\ntni")
        assert tokens[0].kind == TokenKind.COMMENT
        assert tokens[0].text == "// note"
        assert tokens[1] == Token(TokenKind.INT, "tni", 2, 1)

    def test_block_comment(self):
        tokens = tokenize("x /* a\nb */ y")
        assert [t.kind for t in tokens] == [
            TokenKind.IDENTIFIER,
            TokenKind.COMMENT,
            TokenKind.IDENTIFIER,
        ]
        assert (tokens[2].line, tokens[2].column) == (2, 6)

    def test_trivia_can_be_omitted(self):
        assert kinds("x // c") == [TokenKind.IDENTIFIER, TokenKind.COMMENT]
        tokens = tokenize("x // c", include_trivia=False)
        assert [t.kind for t in tokens] == [TokenKind.IDENTIFIER]

    def test_unterminated_block_comment(self):
        """An unterminated comment is an error covering the rest of input."""
        tokens = tokenize("x /* never closed\ntni y;")
        assert [t.kind for t in tokens] == [TokenKind.IDENTIFIER, TokenKind.ERROR]

    def test_division_is_not_comment(self):
        assert kinds("a / b") == [TokenKind.IDENTIFIER, TokenKind.OPERATOR, TokenKind.IDENTIFIER]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:

    def test_line_and_column(self):
        source = "ab\ncd\n\nef"
        assert line_and_column(source, 0) == (1, 1)
        assert line_and_column(source, 1) == (1, 2)
        assert line_and_column(source, 3) == (2, 1)
        assert line_and_column(source, 7) == (4, 1)

    def test_multiline_tokens(self):
        tokens = tokenize("tni x;\n  tnirp x;")
        tnirp = tokens[3]
        assert tnirp.kind == TokenKind.PRINT
        assert (tnirp.line, tnirp.column) == (2, 3)

    def test_eof_does_not_advance(self):
        """next_token at the end returns EOF and keeps the position."""
        token, position = next_token("x", 1)
        assert token.kind == TokenKind.EOF
        assert position == 1
        assert next_token("x", position)[1] == 1

    def test_next_token_resumes_from_position(self):
        token, position = next_token("tni x", 3)
        assert token == Token(TokenKind.IDENTIFIER, "x", 1, 5)
        assert position == 5

    def test_token_display(self):
        assert Token(TokenKind.EOF, "", 1, 1).display() == "end of input"
        assert Token(TokenKind.INT, "tni", 1, 1).display() == "'tni'"
