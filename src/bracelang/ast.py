"""
Abstract Syntax Tree (AST) node definitions for bracelang.

The node set is closed: three expression variants and three statement
variants. Nodes only describe structure; evaluation lives in
``bracelang.runtime.interpreter``. Every node exclusively owns its
children, so the AST is always a tree.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
from .tokens import SourceSpan, TokenType, format_int


# Binary operator token types and their source symbols
OPERATOR_SYMBOLS: dict[TokenType, str] = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
}


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode:
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor:
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class NumberLiteral(Expression):
    """An integer literal."""
    value: int


@dataclass
class VariableRef(Expression):
    """A read of a variable."""
    name: str


@dataclass
class BinaryOp(Expression):
    """A binary arithmetic operation (e.g., a + b, x / 2)."""
    left: Expression
    operator: TokenType  # PLUS, MINUS, STAR or SLASH
    right: Expression

    @property
    def symbol(self) -> str:
        return OPERATOR_SYMBOLS[self.operator]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class Assignment(Statement):
    """Bind the value of an expression to a name: name = value;"""
    name: str
    value: Expression


@dataclass
class Conditional(Statement):
    """if (condition) then_branch [else else_branch]

    A nonzero condition selects then_branch.
    """
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass
class Block(Statement):
    """A brace-delimited sequence of statements, executed in order.

    A whole program is a Block.
    """
    statements: List[Statement] = field(default_factory=list)


# =============================================================================
# Visitor Helpers
# =============================================================================

class PrintVisitor(AstVisitor):
    """Debug visitor that renders the AST structure as indented lines."""

    def __init__(self, indent: int = 0, lines: Optional[List[str]] = None):
        self.indent = indent
        self.lines = lines if lines is not None else []

    def _print(self, text: str, indent: Optional[int] = None) -> None:
        level = self.indent if indent is None else indent
        self.lines.append("  " * level + text)

    def _child(self, indent: Optional[int] = None) -> "PrintVisitor":
        level = self.indent if indent is None else indent
        return PrintVisitor(level + 2, self.lines)

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        # Left-nested chains are emitted without recursing down the left spine
        spine = []
        expr: Expression = node
        while isinstance(expr, BinaryOp):
            spine.append(expr)
            expr = expr.left

        indent = self.indent
        for _ in spine:
            self._print("BinaryOp", indent)
            self._print("  left:", indent)
            indent += 2
        expr.accept(PrintVisitor(indent, self.lines))

        for op in reversed(spine):
            indent -= 2
            self._print(f"  operator: {op.symbol}", indent)
            self._print("  right:", indent)
            op.right.accept(self._child(indent))

    def generic_visit(self, node: AstNode) -> None:
        self._print(f"{node.__class__.__name__}")
        for name, value in node.__dict__.items():
            if name == "span":
                continue
            if isinstance(value, AstNode):
                self._print(f"  {name}:")
                value.accept(self._child())
            elif isinstance(value, list):
                self._print(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        item.accept(self._child())
                    else:
                        self._print(f"    {item!r}")
                self._print("  ]")
            elif isinstance(value, TokenType):
                self._print(f"  {name}: {OPERATOR_SYMBOLS.get(value, value.name)}")
            elif isinstance(value, int):
                self._print(f"  {name}: {format_int(value)}")
            else:
                self._print(f"  {name}: {value!r}")


def format_ast(node: AstNode) -> str:
    """Render an AST node as an indented tree for debugging."""
    visitor = PrintVisitor()
    node.accept(visitor)
    return "\n".join(visitor.lines)


def print_ast(node: AstNode) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
