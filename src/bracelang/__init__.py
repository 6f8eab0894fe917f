# -*- coding: utf-8 -*-
"""
bracelang: a tokenizer, parser and tree-walking interpreter for a minimal
imperative integer language.

This module provides:
- Lexer: Tokenizes source text on demand
- Parser: Builds an AST by recursive descent with one token of lookahead
- Interpreter: Executes the AST against a variable Environment

Usage:
    from bracelang import run_program, evaluate_expression

    result = run_program("{ x = 5; y = x - 2; }")
    result.variables            # {'x': 5, 'y': 3}

    evaluate_expression("2 + 3 * 4")   # 14
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bracelang")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    ParserConfig,
    parse,
    parse_expression,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    # Expressions
    Expression,
    NumberLiteral,
    VariableRef,
    BinaryOp,
    # Statements
    Statement,
    Assignment,
    Conditional,
    Block,
    # Helpers
    format_ast,
    print_ast,
)

from .errors import (
    LangError,
    LexError,
    ParseError,
    EvalError,
    UndefinedVariableError,
    DivisionByZeroError,
    IntegerOverflowError,
    Diagnostic,
    ErrorSeverity,
)

from .runtime import (
    OverflowMode,
    IntegerSemantics,
    Environment,
    ExecutionContext,
    create_context,
    Interpreter,
    ExecutionResult,
    run_program,
    evaluate_expression,
)

__all__ = [
    "__version__",
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "ParserConfig",
    "parse",
    "parse_expression",
    # AST
    "AstNode",
    "AstVisitor",
    "Expression",
    "NumberLiteral",
    "VariableRef",
    "BinaryOp",
    "Statement",
    "Assignment",
    "Conditional",
    "Block",
    "format_ast",
    "print_ast",
    # Errors
    "LangError",
    "LexError",
    "ParseError",
    "EvalError",
    "UndefinedVariableError",
    "DivisionByZeroError",
    "IntegerOverflowError",
    "Diagnostic",
    "ErrorSeverity",
    # Runtime
    "OverflowMode",
    "IntegerSemantics",
    "Environment",
    "ExecutionContext",
    "create_context",
    "Interpreter",
    "ExecutionResult",
    "run_program",
    "evaluate_expression",
]
