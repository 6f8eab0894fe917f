"""
Recursive descent parser for bracelang.

Pulls tokens from a Lexer with one token of lookahead and builds the AST.
The parser never backtracks: ``current`` only moves forward.

Grammar:
    Program    := '{' Statement* '}' EOF
    Statement  := IDENTIFIER '=' Expr ';'
                | 'if' '(' Expr ')' Statement ('else' Statement)?
                | '{' Statement* '}'
    Expr       := Term (('+' | '-') Term)*
    Term       := Factor (('*' | '/') Factor)*
    Factor     := NUMBER | IDENTIFIER | '(' Expr ')'

Both binary levels are left-associative, so ``a - b - c`` parses as
``(a - b) - c``. A dangling ``else`` binds to the nearest ``if``.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

from .tokens import Token, TokenType, SourceSpan, describe_token_type
from .lexer import Lexer
from .ast import (
    # Expressions
    Expression, NumberLiteral, VariableRef, BinaryOp,
    # Statements
    Statement, Assignment, Conditional, Block,
)
from .errors import (
    ParseError,
    error_unexpected_token,
    error_unexpected_eof,
    error_trailing_input,
    error_nesting_too_deep,
)

logger = logging.getLogger(__name__)


@dataclass
class ParserConfig:
    """Parser limits."""
    max_depth: int = 200    # Nested statements plus parenthesised expressions

    # At most three Python frames per nesting level in the parser, evaluator
    # and AST printer, so this stays under the default recursion limit of 1000
    DEPTH_CEILING = 250

    def __post_init__(self):
        if not 1 <= self.max_depth <= self.DEPTH_CEILING:
            raise ValueError(
                f"max_depth must be between 1 and {self.DEPTH_CEILING}, got {self.max_depth}"
            )


class Parser:
    """
    Recursive descent parser driving a Lexer.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()

    Precedence, lowest first:
        + -     (left-associative)
        * /     (left-associative)
        ( )
    """

    ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
    MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH)

    # Tokens that can begin a statement
    STATEMENT_START = (TokenType.IDENTIFIER, TokenType.IF, TokenType.LBRACE)

    def __init__(self, lexer: Lexer, config: Optional[ParserConfig] = None):
        self.lexer = lexer
        self.config = config or ParserConfig()
        self.depth = 0
        self.current: Token = lexer.next_token()
        self.previous: Token = self.current

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self.current.type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        """Check if current token is any of given types."""
        return self.current.type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self.current
        self.previous = token
        if token.type != TokenType.EOF:
            self.current = self.lexer.next_token()
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self.current.type in token_types:
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """Consume token of the required type, or raise ParseError."""
        if self._check(token_type):
            return self._advance()
        raise self._error(expected or describe_token_type(token_type), token_type)

    def _expect_end(self) -> None:
        """Require the token stream to be exhausted."""
        if not self._check(TokenType.EOF):
            raise error_trailing_input(self.current, self._source_line(self.current))

    def _error(self, expected: str, expected_type: Optional[TokenType] = None) -> ParseError:
        """Build a parser error for the current token."""
        token = self.current
        if token.type == TokenType.EOF:
            return error_unexpected_eof(expected, token, self._source_line(token), expected_type)
        return error_unexpected_token(expected, token, self._source_line(token), expected_type)

    def _source_line(self, token: Token) -> Optional[str]:
        return self.lexer.get_source_line(token.span.start.line)

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the last consumed token."""
        return SourceSpan(start.span.start, self.previous.span.end)

    @contextmanager
    def _nested(self):
        """Track nesting depth around a recursive production."""
        if self.depth >= self.config.max_depth:
            raise error_nesting_too_deep(
                self.config.max_depth, self.current, self._source_line(self.current)
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Expr := Term (('+' | '-') Term)*"""
        left = self._parse_term()
        while self._check_any(*self.ADDITIVE):
            operator = self._advance().type
            right = self._parse_term()
            left = BinaryOp(
                span=SourceSpan(left.span.start, right.span.end),
                left=left,
                operator=operator,
                right=right,
            )
        return left

    def _parse_term(self) -> Expression:
        """Term := Factor (('*' | '/') Factor)*"""
        left = self._parse_factor()
        while self._check_any(*self.MULTIPLICATIVE):
            operator = self._advance().type
            right = self._parse_factor()
            left = BinaryOp(
                span=SourceSpan(left.span.start, right.span.end),
                left=left,
                operator=operator,
                right=right,
            )
        return left

    def _parse_factor(self) -> Expression:
        """Factor := NUMBER | IDENTIFIER | '(' Expr ')'"""
        token = self._match(TokenType.NUMBER)
        if token:
            return NumberLiteral(span=token.span, value=token.value)

        token = self._match(TokenType.IDENTIFIER)
        if token:
            return VariableRef(span=token.span, name=token.value)

        if self._check(TokenType.LPAREN):
            with self._nested():
                self._advance()
                expr = self._parse_expression()
                self._expect(TokenType.RPAREN)
            return expr

        raise self._error("number, identifier or '('")

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse a single statement."""
        with self._nested():
            if self._check(TokenType.IDENTIFIER):
                return self._parse_assignment()
            if self._check(TokenType.IF):
                return self._parse_conditional()
            if self._check(TokenType.LBRACE):
                return self._parse_block()
            raise self._error("statement")

    def _parse_assignment(self) -> Assignment:
        """IDENTIFIER '=' Expr ';'"""
        start = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.ASSIGN)
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return Assignment(span=self._span_from(start), name=start.value, value=value)

    def _parse_conditional(self) -> Conditional:
        """'if' '(' Expr ')' Statement ('else' Statement)?"""
        start = self._expect(TokenType.IF)
        self._expect(TokenType.LPAREN)
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN)
        then_branch = self._parse_statement()

        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement()

        return Conditional(
            span=self._span_from(start),
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
        )

    def _parse_block(self) -> Block:
        """'{' Statement* '}'"""
        start = self._expect(TokenType.LBRACE)
        statements = []
        while self._check_any(*self.STATEMENT_START):
            statements.append(self._parse_statement())
        self._expect(TokenType.RBRACE)
        return Block(span=self._span_from(start), statements=statements)

    # =========================================================================
    # Entry Points
    # =========================================================================

    def parse_program(self) -> Block:
        """Parse a complete program: a single block followed by end of input."""
        program = self._parse_block()
        self._expect_end()
        logger.debug("parsed program with %d top-level statement(s)", len(program.statements))
        return program

    def parse_expression(self) -> Expression:
        """Parse a single expression followed by end of input."""
        expr = self._parse_expression()
        self._expect_end()
        return expr


def parse(source: str, filename: Optional[str] = None,
          config: Optional[ParserConfig] = None) -> Block:
    """
    Convenience function to parse a program.

    Args:
        source: Program source text
        filename: Optional filename for error messages
        config: Optional parser limits

    Returns:
        The program's top-level Block

    Raises:
        LexError: If tokenization fails
        ParseError: If the token stream does not match the grammar
    """
    parser = Parser(Lexer(source, filename), config)
    return parser.parse_program()


def parse_expression(source: str, filename: Optional[str] = None,
                     config: Optional[ParserConfig] = None) -> Expression:
    """Convenience function to parse a standalone expression."""
    parser = Parser(Lexer(source, filename), config)
    return parser.parse_expression()
