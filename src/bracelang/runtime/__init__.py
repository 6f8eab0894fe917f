"""
Runtime - Tree-walking interpreter for program execution.

This module provides:
- Interpreter: Executes programs and evaluates expressions
- Environment: Variable bindings for one run
- ExecutionContext: Environment plus integer semantics and source lines
- IntegerSemantics: Fixed-width arithmetic with wrap or checked overflow
"""

from .values import (
    OverflowMode,
    IntegerSemantics,
    DEFAULT_SEMANTICS,
)

from .context import (
    Environment,
    ExecutionContext,
    create_context,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    run_program,
    evaluate_expression,
)

__all__ = [
    # Values
    "OverflowMode",
    "IntegerSemantics",
    "DEFAULT_SEMANTICS",
    # Context
    "Environment",
    "ExecutionContext",
    "create_context",
    # Interpreter
    "Interpreter",
    "ExecutionResult",
    "run_program",
    "evaluate_expression",
]
