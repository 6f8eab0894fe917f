"""
Tree-walking interpreter for program execution.

Evaluates AST nodes against the Environment held by an ExecutionContext.
Errors propagate to the caller untouched; nothing here catches them.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .context import ExecutionContext, Environment, create_context
from .values import IntegerSemantics

from ..ast import (
    Statement, Assignment, Conditional, Block,
    Expression, NumberLiteral, VariableRef, BinaryOp,
)
from ..errors import error_undefined_variable, error_division_by_zero
from ..lexer import Lexer
from ..parser import Parser, ParserConfig
from ..tokens import TokenType

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of a successful run.

    ``variables`` holds the final bindings in insertion order. ``value`` is
    set in expression mode and None after running a program.
    """
    variables: Dict[str, int] = field(default_factory=dict)
    value: Optional[int] = None


class Interpreter:
    """
    Tree-walking interpreter.

    Evaluates AST nodes by dispatching on their type. The node set is
    closed, so an unknown node is an internal error.
    """

    def run(self, program: Block, ctx: ExecutionContext) -> ExecutionResult:
        """Execute a whole program and snapshot the resulting bindings."""
        self.execute(program, ctx)
        logger.debug("program finished with %d binding(s)", len(ctx.environment))
        return ExecutionResult(variables=ctx.environment.snapshot())

    # =========================================================================
    # Statements
    # =========================================================================

    def execute(self, stmt: Statement, ctx: ExecutionContext) -> None:
        """Execute a statement."""
        if isinstance(stmt, Assignment):
            self._execute_assignment(stmt, ctx)
        elif isinstance(stmt, Conditional):
            self._execute_conditional(stmt, ctx)
        elif isinstance(stmt, Block):
            self._execute_block(stmt, ctx)
        else:
            raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_assignment(self, stmt: Assignment, ctx: ExecutionContext) -> int:
        """Evaluate the right-hand side, then bind it. Returns the bound value."""
        value = self.evaluate(stmt.value, ctx)
        ctx.set_variable(stmt.name, value)
        logger.debug("%s = %d", stmt.name, value)
        return value

    def _execute_conditional(self, stmt: Conditional, ctx: ExecutionContext) -> None:
        """Run then_branch on a nonzero condition, else_branch (if any) on zero."""
        condition = self.evaluate(stmt.condition, ctx)
        if condition != 0:
            logger.debug("condition at %s is %d, taking then-branch", stmt.span.start, condition)
            self.execute(stmt.then_branch, ctx)
        elif stmt.else_branch is not None:
            logger.debug("condition at %s is 0, taking else-branch", stmt.span.start)
            self.execute(stmt.else_branch, ctx)

    def _execute_block(self, block: Block, ctx: ExecutionContext) -> None:
        """Execute a block of statements in order."""
        for stmt in block.statements:
            self.execute(stmt, ctx)

    # =========================================================================
    # Expressions
    # =========================================================================

    def evaluate(self, expr: Expression, ctx: ExecutionContext) -> int:
        """Evaluate an expression to an integer."""
        if isinstance(expr, NumberLiteral):
            return self._eval_number(expr, ctx)
        elif isinstance(expr, VariableRef):
            return self._eval_variable(expr, ctx)
        elif isinstance(expr, BinaryOp):
            return self._eval_binary_op(expr, ctx)
        else:
            raise RuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_number(self, lit: NumberLiteral, ctx: ExecutionContext) -> int:
        return ctx.semantics.normalize(
            lit.value, lit.span, ctx.get_source_line(lit.span.start.line)
        )

    def _eval_variable(self, ref: VariableRef, ctx: ExecutionContext) -> int:
        """Evaluate a variable reference (environment lookup)."""
        value = ctx.get_variable(ref.name)
        if value is None:
            raise error_undefined_variable(
                ref.name, ref.span, ctx.get_source_line(ref.span.start.line)
            )
        return value

    def _eval_binary_op(self, op: BinaryOp, ctx: ExecutionContext) -> int:
        """Evaluate a binary operation, left operand first.

        Chains such as ``a + b + c`` nest down the left side, so the left
        spine is walked iteratively to keep long chains off the Python stack.
        """
        spine = []
        node: Expression = op
        while isinstance(node, BinaryOp):
            spine.append(node)
            node = node.left

        value = self.evaluate(node, ctx)
        for binop in reversed(spine):
            right = self.evaluate(binop.right, ctx)
            value = self._apply(binop, value, right, ctx)
        return value

    def _apply(self, op: BinaryOp, left: int, right: int, ctx: ExecutionContext) -> int:
        semantics = ctx.semantics
        source_line = ctx.get_source_line(op.span.start.line)

        if op.operator == TokenType.PLUS:
            return semantics.add(left, right, op.span, source_line)
        elif op.operator == TokenType.MINUS:
            return semantics.subtract(left, right, op.span, source_line)
        elif op.operator == TokenType.STAR:
            return semantics.multiply(left, right, op.span, source_line)
        elif op.operator == TokenType.SLASH:
            if right == 0:
                raise error_division_by_zero(op.span, source_line)
            return semantics.divide(left, right, op.span, source_line)
        else:
            raise RuntimeError(f"Unknown operator: {op.operator}")


# =============================================================================
# Convenience API
# =============================================================================

def run_program(
    source: str,
    filename: Optional[str] = None,
    semantics: Optional[IntegerSemantics] = None,
    parser_config: Optional[ParserConfig] = None,
    environment: Optional[Environment] = None,
) -> ExecutionResult:
    """
    Tokenize, parse and execute a program in one call.

    Each call runs against a fresh Environment unless one is passed in.

    Args:
        source: Program source, e.g. ``"{ x = 5; y = x - 2; }"``
        filename: Optional filename for error messages
        semantics: Integer width and overflow mode
        parser_config: Parser limits
        environment: Bindings to run against; mutated in place

    Returns:
        ExecutionResult with the final bindings

    Raises:
        LexError, ParseError, EvalError
    """
    program = Parser(Lexer(source, filename), parser_config).parse_program()
    ctx = create_context(source, semantics, environment, filename)
    return Interpreter().run(program, ctx)


def evaluate_expression(
    source: str,
    filename: Optional[str] = None,
    semantics: Optional[IntegerSemantics] = None,
    parser_config: Optional[ParserConfig] = None,
    environment: Optional[Environment] = None,
) -> int:
    """
    Tokenize, parse and evaluate a single expression, e.g. ``"2 + 3 * 4"``.

    Variables are read from ``environment`` when one is given.
    """
    expr = Parser(Lexer(source, filename), parser_config).parse_expression()
    ctx = create_context(source, semantics, environment, filename)
    return Interpreter().evaluate(expr, ctx)
