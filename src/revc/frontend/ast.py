"""
revc Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the node types produced by the revc parser, a
visitor base class for walking them, and the tree renderer used for
diagnostic display.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node owning the top-level statements
├── Declarations
│   ├── VarDecl - variable declaration with optional initializer
│   ├── FunctionDecl - function definition
│   └── Parameter - one entry of a parameter list
├── Statements
│   ├── Assign - identifier = expression;
│   ├── Print - tnirp expression;
│   ├── Return - nruter [expression];
│   ├── If - fi (...) block [esle block]
│   ├── Else - then/else pair hanging off an If
│   ├── While - elihw (...) block
│   ├── RepeatUntil - taeper block litnu (...);
│   ├── Block - { statements }
│   └── ErrorStatement - placeholder for an unparseable statement
└── Expressions
    ├── BinaryOp - arithmetic, comparison and logical operators
    ├── FunctionCall - name(arguments)
    ├── Factorial - factorial(argument) / lairotcaf(argument)
    ├── Number - numeric literal
    ├── String - string literal
    ├── Identifier - variable reference
    └── ErrorExpression - placeholder for an unparseable expression

Design Notes
------------
- All nodes are dataclasses; every node keeps the token it was built
  from (literal, name, operator or introducing keyword) for positions
  and labels
- Sequences (program and block statements, parameters, arguments) are
  plain lists in source order
- Recovery never invents values: unparseable pieces become Error nodes
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import ClassVar, Iterator, Optional, Union

from revc.errors import SourceLocation
from revc.frontend.tokens import Token


class NodeKind(Enum):
    """Node categories, valued with their display labels."""

    PROGRAM = "Program"
    VAR_DECL = "VarDecl"
    FUNCTION_DECL = "FunctionDecl"
    PARAMETER = "Parameter"
    ASSIGN = "Assign"
    PRINT = "Print"
    RETURN = "Return"
    IF = "If"
    ELSE = "Else"
    WHILE = "While"
    REPEAT_UNTIL = "RepeatUntil"
    BLOCK = "Block"
    BINARY_OP = "BinaryOp"
    FUNCTION_CALL = "FunctionCall"
    FACTORIAL = "Factorial"
    NUMBER = "Number"
    STRING = "String"
    IDENTIFIER = "Identifier"
    ERROR_EXPRESSION = "ErrorExpression"
    ERROR_STATEMENT = "ErrorStatement"


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        token: The token this node was built from
    """
    node_kind: ClassVar[NodeKind]

    token: Token

    @property
    def kind(self) -> NodeKind:
        return self.node_kind

    @property
    def location(self) -> SourceLocation:
        return self.token.location()

    def label(self) -> str:
        """One-line description used by the tree renderer."""
        return self.node_kind.value

    def children(self) -> Iterator["ASTNode"]:
        """Yield child nodes in source order."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, ASTNode):
                        yield item

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.token.line}:{self.token.column}"


@dataclass
class Expression(ASTNode):
    """Base class for nodes that produce a value."""
    pass


@dataclass
class Statement(ASTNode):
    """Base class for statement nodes."""
    pass


@dataclass
class Declaration(Statement):
    """Base class for nodes that introduce a name."""

    @property
    def name(self) -> str:
        return self.token.text

    def label(self) -> str:
        return f"{self.node_kind.value}: {self.name}"


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass
class ProgramNode(ASTNode):
    """
    Root node of the AST.

    Attributes:
        statements: Top-level statements and declarations in source order
    """
    node_kind: ClassVar[NodeKind] = NodeKind.PROGRAM

    statements: list[Statement] = field(default_factory=list)


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass
class Parameter(Declaration):
    """
    Function parameter.

    The token is the parameter name, or the type token when the
    parameter is unnamed ("tni f(tni)").

    Attributes:
        param_type: The type keyword token
    """
    node_kind: ClassVar[NodeKind] = NodeKind.PARAMETER

    param_type: Optional[Token] = None

    @property
    def is_named(self) -> bool:
        return self.param_type is not None and self.token is not self.param_type

    def label(self) -> str:
        type_text = self.param_type.text if self.param_type else "?"
        if self.is_named:
            return f"Parameter: {type_text} {self.token.text}"
        return f"Parameter: {type_text}"


@dataclass
class VarDecl(Declaration):
    """
    Variable declaration.

    Represents declarations like:
        tni x;
        taolf y = 2.5;

    Attributes:
        var_type: The type keyword token
        initializer: Optional initialization expression
    """
    node_kind: ClassVar[NodeKind] = NodeKind.VAR_DECL

    var_type: Optional[Token] = None
    initializer: Optional[Expression] = None


@dataclass
class FunctionDecl(Declaration):
    """
    Function definition.

    Attributes:
        return_type: The type keyword token before the name
        parameters: Parameters in declaration order (empty for "diov")
        body: The function body
    """
    node_kind: ClassVar[NodeKind] = NodeKind.FUNCTION_DECL

    return_type: Optional[Token] = None
    parameters: list[Parameter] = field(default_factory=list)
    body: Optional["Block"] = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Block(Statement):
    """
    Brace-enclosed statement list. The token is the opening brace.

    Attributes:
        statements: Statements in the block
    """
    node_kind: ClassVar[NodeKind] = NodeKind.BLOCK

    statements: list[Statement] = field(default_factory=list)


@dataclass
class Assign(Statement):
    """Assignment statement; the token is the '=' sign."""
    node_kind: ClassVar[NodeKind] = NodeKind.ASSIGN

    target: Optional["Identifier"] = None
    value: Optional[Expression] = None


@dataclass
class Print(Statement):
    node_kind: ClassVar[NodeKind] = NodeKind.PRINT

    value: Optional[Expression] = None


@dataclass
class Return(Statement):
    """Return statement. value is None for a bare "nruter;"."""
    node_kind: ClassVar[NodeKind] = NodeKind.RETURN

    value: Optional[Expression] = None


@dataclass
class Else(Statement):
    """
    Both branches of an if/else; becomes the body of its If node.

    Attributes:
        then_block: Block executed when the condition holds
        else_block: Block executed otherwise
    """
    node_kind: ClassVar[NodeKind] = NodeKind.ELSE

    then_block: Optional[Block] = None
    else_block: Optional[Block] = None


@dataclass
class If(Statement):
    """
    If statement.

    Attributes:
        condition: The condition expression
        body: The block for a plain if, or an Else node when an
              else branch is present
    """
    node_kind: ClassVar[NodeKind] = NodeKind.IF

    condition: Optional[Expression] = None
    body: Optional[Union[Block, Else]] = None


@dataclass
class While(Statement):
    node_kind: ClassVar[NodeKind] = NodeKind.WHILE

    condition: Optional[Expression] = None
    body: Optional[Block] = None


@dataclass
class RepeatUntil(Statement):
    """Post-tested loop: the body runs before the condition is checked."""
    node_kind: ClassVar[NodeKind] = NodeKind.REPEAT_UNTIL

    body: Optional[Block] = None
    condition: Optional[Expression] = None


@dataclass
class ErrorStatement(Statement):
    """Stands in for a statement that could not be parsed."""
    node_kind: ClassVar[NodeKind] = NodeKind.ERROR_STATEMENT


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class BinaryOp(Expression):
    """
    Binary operation. The token is the operator.

    Attributes:
        left: Left operand
        right: Right operand
    """
    node_kind: ClassVar[NodeKind] = NodeKind.BINARY_OP

    left: Optional[Expression] = None
    right: Optional[Expression] = None

    @property
    def operator(self) -> str:
        return self.token.text

    def label(self) -> str:
        return f"BinaryOp: {self.operator}"


@dataclass
class FunctionCall(Expression):
    """Call of a named function; the token is the function name."""
    node_kind: ClassVar[NodeKind] = NodeKind.FUNCTION_CALL

    arguments: list[Expression] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.token.text

    def label(self) -> str:
        return f"FunctionCall: {self.name}"


@dataclass
class Factorial(Expression):
    node_kind: ClassVar[NodeKind] = NodeKind.FACTORIAL

    argument: Optional[Expression] = None


@dataclass
class Number(Expression):
    node_kind: ClassVar[NodeKind] = NodeKind.NUMBER

    @property
    def value(self) -> Union[int, float]:
        text = self.token.text
        return float(text) if "." in text else int(text)

    def label(self) -> str:
        return f"Number: {self.token.text}"


@dataclass
class String(Expression):
    node_kind: ClassVar[NodeKind] = NodeKind.STRING

    @property
    def value(self) -> str:
        """The literal without its surrounding quotes."""
        return self.token.text[1:-1]

    def label(self) -> str:
        return f"String: {self.token.text}"


@dataclass
class Identifier(Expression):
    node_kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER

    @property
    def name(self) -> str:
        return self.token.text

    def label(self) -> str:
        return f"Identifier: {self.name}"


@dataclass
class ErrorExpression(Expression):
    """
    Stands in for an expression that could not be parsed.

    Attributes:
        reason: Short note on what was missing ("empty parentheses")
    """
    node_kind: ClassVar[NodeKind] = NodeKind.ERROR_EXPRESSION

    reason: str = ""


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls through to generic_visit, which walks
    the children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_FunctionCall(self, node):
                self.calls += 1
                self.generic_visit(node)

        counter = CallCounter()
        counter.visit(program)
    """

    def visit(self, node: ASTNode):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        for child in node.children():
            self.visit(child)


# =============================================================================
# Tree Rendering
# =============================================================================

class TreeRenderer:
    """
    Flattens a tree into (depth, label) rows, parents before children.

    The walk uses an explicit stack, so long left-associative operator
    chains render without hitting the interpreter's recursion limit.

    Usage:
        rows = TreeRenderer().render(program)
    """

    def __init__(self):
        self.rows: list[tuple[int, str]] = []

    def render(self, node: ASTNode) -> list[tuple[int, str]]:
        self.rows = []
        stack = [(0, node)]
        while stack:
            depth, current = stack.pop()
            self.rows.append((depth, current.label()))
            # Reversed so the first child is popped next
            children = list(current.children())
            stack.extend((depth + 1, child) for child in reversed(children))
        return self.rows


def render_tree(node: ASTNode) -> list[tuple[int, str]]:
    """
    Render a tree as (depth, label) pairs in pre-order.

    Example:
        >>> render_tree(parse_source("tni x = 1 + 2;"))
        [(0, 'Program'), (1, 'VarDecl: x'), (2, 'BinaryOp: +'),
         (3, 'Number: 1'), (3, 'Number: 2')]
    """
    return TreeRenderer().render(node)


def format_tree(node: ASTNode, indent: str = "  ") -> str:
    """Render a tree as indented text, one node per line."""
    return "\n".join(f"{indent * depth}{label}" for depth, label in render_tree(node))
