"""
revc Recursive Descent Parser
=============================

This module turns the token stream of a revc program into an AST. It is
a resilient parser: malformed input is reported as diagnostics, replaced
by ErrorStatement/ErrorExpression placeholders, and parsing resumes at
the next statement boundary. A complete ProgramNode is returned for any
input.

Grammar (Simplified EBNF)
-------------------------
program         ::= statement*
statement       ::= var_decl | function_decl | assignment | if_stmt
                  | while_stmt | repeat_stmt | print_stmt | return_stmt
                  | block
var_decl        ::= type IDENTIFIER ('=' expr)? ';'
function_decl   ::= type IDENTIFIER '(' ('diov' | params) ')' block
params          ::= (type IDENTIFIER? ','?)*
assignment      ::= IDENTIFIER '=' expr ';'
if_stmt         ::= 'fi' '(' expr ')' block ('esle' block)?
while_stmt      ::= 'elihw' '(' expr ')' block
repeat_stmt     ::= 'taeper' block 'litnu' '(' expr ')' ';'
print_stmt      ::= 'tnirp' expr ';'
return_stmt     ::= 'nruter' expr? ';'
block           ::= '{' statement* '}'

A type keyword starts a function declaration when the next two tokens
are an identifier and '('; otherwise it starts a variable declaration.

Expression Precedence (lowest to highest)
-----------------------------------------
1. logical_or      ||
2. logical_and     &&
3. comparison      < > == != >= <=
4. additive        + -
5. multiplicative  * / %
6. primary         NUMBER, STRING, IDENTIFIER, call, factorial, '(' expr ')'

All binary operators are left-associative.

Error Recovery
--------------
After most errors the parser synchronizes: the offending token is
discarded (unless it is end of input), then tokens are skipped until a
';' (consumed), a '}' (left in place), a token that starts a statement
(left in place) or end of input.

Example Usage
-------------
>>> from revc.frontend.parser import parse_program
>>> result = parse_program("tni x = 2 + 3 * 4;")
>>> result.program.statements
[VarDecl@1:5]
>>> result.diagnostics
[]
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from revc.errors import ParserResourceError
from revc.frontend import lexer
from revc.frontend.ast import (
    Assign,
    BinaryOp,
    Block,
    Else,
    ErrorExpression,
    ErrorStatement,
    Expression,
    Factorial,
    FunctionCall,
    FunctionDecl,
    Identifier,
    If,
    Number,
    Parameter,
    Print,
    ProgramNode,
    RepeatUntil,
    Return,
    Statement,
    String,
    VarDecl,
    While,
)
from revc.frontend.cursor import NextTokenFn, TokenCursor
from revc.frontend.diagnostics import Diagnostic, DiagnosticKind, DiagnosticReporter
from revc.frontend.options import ParserOptions
from revc.frontend.tokens import FACTORIAL_BUILTIN, TYPE_KEYWORDS, Token, TokenKind

logger = logging.getLogger(__name__)


# Lexemes of the generic OPERATOR token, by precedence level
MULTIPLICATIVE_OPERATORS = frozenset({"/", "%"})
ADDITIVE_OPERATORS = frozenset({"+", "-"})
COMPARISON_OPERATORS = frozenset({"<", ">"})

# Dedicated comparison token kinds
COMPARISON_KINDS = frozenset({TokenKind.EQ, TokenKind.NE, TokenKind.GE, TokenKind.LE})

# Tokens that can begin a statement; synchronization stops in front of them
STATEMENT_START_KINDS = TYPE_KEYWORDS | {
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.REPEAT,
    TokenKind.PRINT,
    TokenKind.RETURN,
    TokenKind.IDENTIFIER,
}


# =============================================================================
# Operator Classification
# =============================================================================

def _is_multiplicative(token: Token) -> bool:
    if token.kind == TokenKind.POINTER:
        return True
    return token.kind == TokenKind.OPERATOR and token.text in MULTIPLICATIVE_OPERATORS


def _is_additive(token: Token) -> bool:
    return token.kind == TokenKind.OPERATOR and token.text in ADDITIVE_OPERATORS


def _is_comparison(token: Token) -> bool:
    if token.kind in COMPARISON_KINDS:
        return True
    return token.kind == TokenKind.OPERATOR and token.text in COMPARISON_OPERATORS


def _is_logical_and(token: Token) -> bool:
    return token.kind == TokenKind.AND


def _is_logical_or(token: Token) -> bool:
    return token.kind == TokenKind.OR


# =============================================================================
# Parse Result
# =============================================================================

@dataclass
class ParseResult:
    """
    Result of parsing one source text.

    Attributes:
        program: The tree; always present, even for malformed input
        reporter: The reporter that collected the diagnostics
    """
    program: ProgramNode
    reporter: DiagnosticReporter

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.reporter.diagnostics

    @property
    def errors(self) -> list[Diagnostic]:
        return self.reporter.errors()

    @property
    def warnings(self) -> list[Diagnostic]:
        return self.reporter.warnings()

    @property
    def has_errors(self) -> bool:
        return self.reporter.has_errors()

    def report(self) -> str:
        return self.reporter.report()

    def raise_if_errors(self) -> None:
        """
        Raise DiagnosticsError if the parse produced any error.

        Raises:
            DiagnosticsError: With the formatted report as its message
        """
        self.reporter.raise_if_errors()


# =============================================================================
# Parser Class
# =============================================================================

class Parser:
    """
    Resilient recursive descent parser for revc.

    A Parser instance holds all state for one parse (token cursor,
    lookahead buffer, reporter), so separate instances can run side by
    side without interfering.

    Usage:
        parser = Parser(source, ParserOptions(filename="prog.rc"))
        program = parser.parse()
        for diagnostic in parser.diagnostics:
            print(diagnostic.format("prog.rc"))

    Attributes:
        source: The text being parsed
        options: Parser configuration
        reporter: Collects diagnostics under the options' policy
        cursor: Token cursor over the source
    """

    def __init__(
        self,
        source: str,
        options: Optional[ParserOptions] = None,
        next_token: NextTokenFn = lexer.next_token,
    ):
        self.source = source
        self.options = options or ParserOptions()
        self.reporter = DiagnosticReporter(
            max_errors=self.options.max_errors,
            deduplicate=self.options.deduplicate,
            suppress_eof_errors=self.options.suppress_eof_errors,
            filename=self.options.filename,
        )
        self.cursor = TokenCursor(source, next_token, self.reporter)

        # Token the last synchronization stopped on
        self._resume_token: Optional[Token] = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.reporter.diagnostics

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def parse(self) -> ProgramNode:
        """
        Parse the whole source into a ProgramNode.

        Returns:
            The root of the tree; statements that could not be parsed
            appear as ErrorStatement nodes

        Raises:
            ParserResourceError: If memory or recursion depth runs out
        """
        logger.debug(f"Parsing {self.options.filename} ({len(self.source)} chars)")
        try:
            return self._parse_program()
        except (MemoryError, RecursionError) as e:
            reason = "nesting too deep" if isinstance(e, RecursionError) else "out of memory"
            location = self.cursor.current.location(self.options.filename)
            lines = self.source.splitlines()
            source_line = lines[location.line - 1] if 0 < location.line <= len(lines) else None
            logger.error(f"Parse of {self.options.filename} aborted: {reason}")
            raise ParserResourceError(reason, location, source_line) from e

    def _parse_program(self) -> ProgramNode:
        if self.options.report_priming_errors:
            first = self.cursor.prime()
        else:
            with self.reporter.suppressed():
                first = self.cursor.prime()

        program = ProgramNode(token=first)
        while not self.cursor.at_end():
            program.statements.append(self._parse_statement())

        logger.debug(
            f"Parsed {len(program.statements)} statements from {self.options.filename}: "
            f"{self.reporter.error_count()} errors, {self.reporter.warning_count()} warnings"
        )
        return program

    # =========================================================================
    # Token Helpers
    # =========================================================================

    def _check(self, *kinds: TokenKind) -> bool:
        """Check if current token is one of the given kinds."""
        return self.cursor.current.kind in kinds

    def _match(self, *kinds: TokenKind) -> Optional[Token]:
        """
        Consume current token if it matches one of the kinds.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*kinds):
            return self.cursor.advance()
        return None

    def _expect(self, kind: TokenKind, error: DiagnosticKind) -> Optional[Token]:
        """
        Consume a token of the given kind, or report error at the current
        token and leave it in place.
        """
        token = self._match(kind)
        if token is None:
            self._error(error)
        return token

    def _error(
        self,
        kind: DiagnosticKind,
        token: Optional[Token] = None,
        message: Optional[str] = None,
    ) -> None:
        self.reporter.error(kind, token or self.cursor.current, message)

    def _synchronize(self) -> None:
        """
        Skip to a likely statement boundary after an error.

        The offending token is always discarded unless it is end of
        input, so every call either makes progress or sits at EOF.
        """
        offending = self.cursor.current
        if offending.kind == TokenKind.EOF:
            self._resume_token = offending
            return
        self.cursor.advance()
        skipped = 1

        if offending.kind != TokenKind.SEMICOLON:
            while not self.cursor.at_end():
                if self._match(TokenKind.SEMICOLON):
                    skipped += 1
                    break
                if self._check(TokenKind.RBRACE, *STATEMENT_START_KINDS):
                    break
                self.cursor.advance()
                skipped += 1

        self._resume_token = self.cursor.current
        logger.debug(f"Synchronized after {offending!r}, skipped {skipped} tokens")

    def _expect_semicolon(self) -> None:
        """
        Consume the ';' ending a statement.

        If an error inside the statement already synchronized to the
        current token, the statement has been terminated and nothing is
        reported.
        """
        if self._match(TokenKind.SEMICOLON):
            return
        if self.cursor.current is self._resume_token:
            return
        self._error(DiagnosticKind.MISSING_SEMICOLON)
        self._synchronize()

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse one statement, dispatching on the current token."""
        token = self.cursor.current

        if token.is_type_keyword():
            if self._is_function_declaration():
                return self._parse_function_declaration()
            return self._parse_variable_declaration()

        if token.kind == TokenKind.IDENTIFIER:
            return self._parse_assignment()
        if token.kind == TokenKind.IF:
            return self._parse_if()
        if token.kind == TokenKind.WHILE:
            return self._parse_while()
        if token.kind == TokenKind.REPEAT:
            return self._parse_repeat()
        if token.kind == TokenKind.PRINT:
            return self._parse_print()
        if token.kind == TokenKind.RETURN:
            return self._parse_return()
        if token.kind == TokenKind.LBRACE:
            return self._parse_block()

        if token.kind == TokenKind.ELSE:
            # Orphan 'esle': consume it and its block so the braces stay balanced
            self._error(DiagnosticKind.UNEXPECTED_TOKEN, token)
            self.cursor.advance()
            self._parse_block()
            return ErrorStatement(token=token)

        self._error(DiagnosticKind.UNEXPECTED_TOKEN, token)
        self._synchronize()
        return ErrorStatement(token=token)

    def _is_function_declaration(self) -> bool:
        """Type keyword followed by IDENTIFIER '(' starts a function."""
        return (
            self.cursor.peek(1).kind == TokenKind.IDENTIFIER
            and self.cursor.peek(2).kind == TokenKind.LPAREN
        )

    def _parse_variable_declaration(self) -> Statement:
        """
        Parse a variable declaration.

            tni x;
            taolf rate = 1.5;
        """
        var_type = self.cursor.advance()

        name = self._match(TokenKind.IDENTIFIER)
        if name is None:
            self._error(DiagnosticKind.MISSING_IDENTIFIER)
            self._synchronize()
            return ErrorStatement(token=var_type)

        initializer = None
        if self._match(TokenKind.EQUALS):
            initializer = self._parse_expression()

        node = VarDecl(token=name, var_type=var_type, initializer=initializer)
        self._expect_semicolon()
        return node

    def _parse_function_declaration(self) -> FunctionDecl:
        """
        Parse a function definition. The caller has already seen
        type IDENTIFIER '(' through lookahead.
        """
        return_type = self.cursor.advance()
        name = self.cursor.advance()
        self.cursor.advance()  # '('

        parameters = []
        if self._check(TokenKind.VOID) and self.cursor.peek(1).kind == TokenKind.RPAREN:
            self.cursor.advance()  # 'diov' marks an empty parameter list
        else:
            parameters = self._parse_parameters()

        self._expect(TokenKind.RPAREN, DiagnosticKind.MISSING_PARENTHESES)
        body = self._parse_block()

        logger.debug(f"Parsed function '{name.text}' with {len(parameters)} parameters")
        return FunctionDecl(
            token=name,
            return_type=return_type,
            parameters=parameters,
            body=body,
        )

    def _parse_parameters(self) -> list[Parameter]:
        """
        Parse parameters best-effort: type, optional name, optional comma.
        Stops at the first parameter not followed by a comma.
        """
        parameters = []
        while self.cursor.current.is_type_keyword():
            param_type = self.cursor.advance()
            name = self._match(TokenKind.IDENTIFIER)
            parameters.append(Parameter(token=name or param_type, param_type=param_type))
            if self._match(TokenKind.COMMA) is None:
                break
        return parameters

    def _parse_assignment(self) -> Statement:
        name = self.cursor.advance()

        equals = self._match(TokenKind.EQUALS)
        if equals is None:
            self._error(DiagnosticKind.MISSING_EQUALS)
            self._synchronize()
            return ErrorStatement(token=name)

        value = self._parse_expression()
        node = Assign(token=equals, target=Identifier(token=name), value=value)
        self._expect_semicolon()
        return node

    def _parse_condition(self) -> Expression:
        """
        Parse a parenthesized statement condition.

        Missing parentheses are reported but not synchronized on, so the
        statement body can still be parsed.
        """
        self._expect(TokenKind.LPAREN, DiagnosticKind.MISSING_PARENTHESES)

        if self._check(TokenKind.RPAREN):
            token = self.cursor.current
            self._error(DiagnosticKind.MISSING_CONDITION, token)
            condition = ErrorExpression(token=token, reason="missing condition")
        else:
            condition = self._parse_expression()

        self._expect(TokenKind.RPAREN, DiagnosticKind.MISSING_PARENTHESES)
        return condition

    def _parse_if(self) -> If:
        """
        Parse an if statement.

        With an 'esle' branch the If's body is an Else node holding both
        blocks; without one it is the then-block itself.
        """
        keyword = self.cursor.advance()
        condition = self._parse_condition()
        then_block = self._parse_block()

        else_keyword = self._match(TokenKind.ELSE)
        if else_keyword is None:
            return If(token=keyword, condition=condition, body=then_block)

        else_block = self._parse_block()
        body = Else(token=else_keyword, then_block=then_block, else_block=else_block)
        return If(token=keyword, condition=condition, body=body)

    def _parse_while(self) -> While:
        keyword = self.cursor.advance()
        condition = self._parse_condition()
        body = self._parse_block()
        return While(token=keyword, condition=condition, body=body)

    def _parse_repeat(self) -> RepeatUntil:
        """Parse 'taeper' block 'litnu' '(' condition ')' ';'."""
        keyword = self.cursor.advance()
        body = self._parse_block()

        if self._match(TokenKind.UNTIL) is None:
            found = self.cursor.current
            self._error(
                DiagnosticKind.UNEXPECTED_TOKEN,
                found,
                f"expected 'litnu' before {found.display()}",
            )

        condition = self._parse_condition()
        node = RepeatUntil(token=keyword, body=body, condition=condition)
        self._expect_semicolon()
        return node

    def _parse_print(self) -> Print:
        keyword = self.cursor.advance()
        value = self._parse_expression()
        node = Print(token=keyword, value=value)
        self._expect_semicolon()
        return node

    def _parse_return(self) -> Return:
        keyword = self.cursor.advance()
        if self._match(TokenKind.SEMICOLON):
            return Return(token=keyword)

        value = self._parse_expression()
        node = Return(token=keyword, value=value)
        self._expect_semicolon()
        return node

    def _parse_block(self) -> Block:
        """
        Parse '{' statement* '}'.

        A missing '{' yields an empty Block after synchronizing. A missing
        '}' is reported at the token where it was expected.
        """
        lbrace = self.cursor.current
        if lbrace.kind != TokenKind.LBRACE:
            self._error(DiagnosticKind.BLOCK_BRACES, lbrace)
            self._synchronize()
            return Block(token=lbrace)
        self.cursor.advance()

        block = Block(token=lbrace)
        while not self._check(TokenKind.RBRACE) and not self.cursor.at_end():
            block.statements.append(self._parse_statement())

        self._expect(TokenKind.RBRACE, DiagnosticKind.BLOCK_BRACES)
        return block

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_logical_or()

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        is_operator: Callable[[Token], bool],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Parses operands at the next tighter level
            is_operator: Tells whether a token is an operator of this level
        """
        expr = operand_parser()

        while is_operator(self.cursor.current):
            op_token = self.cursor.advance()
            if op_token.kind == TokenKind.POINTER and op_token.text != "*":
                op_token = replace(op_token, text="*")
            right = operand_parser()
            expr = BinaryOp(token=op_token, left=expr, right=right)

        return expr

    def _parse_logical_or(self) -> Expression:
        return self._parse_binary(self._parse_logical_and, _is_logical_or)

    def _parse_logical_and(self) -> Expression:
        return self._parse_binary(self._parse_comparison, _is_logical_and)

    def _parse_comparison(self) -> Expression:
        """
        Parse comparisons. Any other generic operator reaching this level
        (such as '!') is reported as invalid but still folded here, so
        the tree keeps both operands.
        """
        expr = self._parse_additive()

        while _is_comparison(self.cursor.current) or self._check(TokenKind.OPERATOR):
            op_token = self.cursor.advance()
            if not _is_comparison(op_token):
                self._error(DiagnosticKind.INVALID_OPERATOR, op_token)
            right = self._parse_additive()
            expr = BinaryOp(token=op_token, left=expr, right=right)

        return expr

    def _parse_additive(self) -> Expression:
        return self._parse_binary(self._parse_multiplicative, _is_additive)

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary(self._parse_primary, _is_multiplicative)

    def _parse_primary(self) -> Expression:
        """
        Parse a primary expression.

        An unusable token is reported as INVALID_EXPRESSION and left in
        place for the enclosing statement to deal with.
        """
        token = self.cursor.current

        if token.kind == TokenKind.NUMBER:
            self.cursor.advance()
            return Number(token=token)

        if token.kind == TokenKind.IDENTIFIER:
            if self.cursor.peek(1).kind == TokenKind.LPAREN:
                if token.text == FACTORIAL_BUILTIN:
                    return self._parse_factorial()
                return self._parse_call()
            self.cursor.advance()
            return Identifier(token=token)

        if token.kind == TokenKind.FACTORIAL:
            return self._parse_factorial()

        if token.kind == TokenKind.LPAREN:
            return self._parse_group()

        if token.kind == TokenKind.STRING:
            self.cursor.advance()
            return String(token=token)

        self._error(DiagnosticKind.INVALID_EXPRESSION, token)
        return ErrorExpression(token=token, reason="expected expression")

    def _parse_group(self) -> Expression:
        """Parse '(' expression ')'. Empty parentheses yield a placeholder."""
        lparen = self.cursor.advance()

        if self._match(TokenKind.RPAREN):
            return ErrorExpression(token=lparen, reason="empty parentheses")

        expr = self._parse_expression()
        self._close_parenthesis()
        return expr

    def _parse_call(self) -> FunctionCall:
        """Parse name '(' [expression (',' expression)*] ')'."""
        name = self.cursor.advance()
        self.cursor.advance()  # '('

        call = FunctionCall(token=name)
        if not self._check(TokenKind.RPAREN):
            while True:
                call.arguments.append(self._parse_expression())
                if self._match(TokenKind.COMMA) is None:
                    break

        self._close_parenthesis()
        return call

    def _parse_factorial(self) -> Factorial:
        """
        Parse 'lairotcaf' '(' expression ')', or the same call spelled
        with the built-in name 'factorial'.
        """
        keyword = self.cursor.advance()

        if self._match(TokenKind.LPAREN) is None:
            found = self.cursor.current
            self._error(DiagnosticKind.INVALID_FUNCTION_CALL, found)
            argument = ErrorExpression(token=found, reason="missing '('")
            return Factorial(token=keyword, argument=argument)

        argument = self._parse_expression()
        self._close_parenthesis()
        return Factorial(token=keyword, argument=argument)

    def _close_parenthesis(self) -> None:
        """Consume ')' or report it missing and synchronize."""
        if self._match(TokenKind.RPAREN) is None:
            self._error(DiagnosticKind.MISSING_PARENTHESES)
            self._synchronize()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_program(
    source: str,
    options: Optional[ParserOptions] = None,
    next_token: NextTokenFn = lexer.next_token,
) -> ParseResult:
    """
    Parse source text into a tree plus diagnostics.

    Args:
        source: The program text
        options: Parser configuration (defaults if None)
        next_token: Lexer function to drive (the built-in lexer if omitted)

    Returns:
        ParseResult with the ProgramNode and the collected diagnostics

    Raises:
        ParserResourceError: If memory or recursion depth runs out
    """
    parser = Parser(source, options, next_token)
    program = parser.parse()
    return ParseResult(program=program, reporter=parser.reporter)


def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse source text and return only the tree.

    Diagnostics are discarded; use parse_program() to see them.
    """
    return parse_program(source, ParserOptions(filename=filename)).program
