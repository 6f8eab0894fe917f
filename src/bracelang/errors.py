"""
Language exceptions and diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors

Every error is fatal. The lexer, parser and interpreter raise these and
never catch them; only the CLI turns them into messages and exit codes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import (
    SourceSpan, SourceLocation, Token, TokenType,
    describe_token, describe_token_type, get_reserved_suggestion, format_int,
)


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: SourceSpan
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        loc = f"{self.span.start}"
        parts.append(f"{loc}: {self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.source_line is not None:
            parts.append(f"  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "range": {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            },
            "hints": self.hints,
        }


class LangError(Exception):
    """Base exception for language errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def span(self) -> SourceSpan:
        return self.diagnostic.span

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexError(LangError):
    """Error during lexical analysis (E0xx)."""

    def __init__(self, diagnostic: Diagnostic, char: str):
        super().__init__(diagnostic)
        self.char = char

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.span.start


class ParseError(LangError):
    """Error during parsing (E1xx).

    ``expected`` describes what the grammar required (a token or a
    production name), ``expected_type`` is the required token type when a
    single one applies, and ``token`` is the token actually found.
    """

    def __init__(self, diagnostic: Diagnostic, expected: str, token: Token,
                 expected_type: Optional[TokenType] = None):
        super().__init__(diagnostic)
        self.expected = expected
        self.expected_type = expected_type
        self.token = token


class EvalError(LangError):
    """Error during evaluation (E4xx)."""
    pass


class UndefinedVariableError(EvalError):
    """A variable was read before any assignment to it."""

    def __init__(self, diagnostic: Diagnostic, name: str):
        super().__init__(diagnostic)
        self.name = name


class DivisionByZeroError(EvalError):
    """The right operand of '/' evaluated to zero."""
    pass


class IntegerOverflowError(EvalError):
    """An arithmetic result left the configured integer range (checked mode)."""

    def __init__(self, diagnostic: Diagnostic, value: int):
        super().__init__(diagnostic)
        self.value = value


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source_line: str = None) -> LexError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message=f"unexpected character '{char}'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return LexError(diag, char)


# --- Parser error codes ---

def _parse_hints(found: Token) -> List[str]:
    suggestion = get_reserved_suggestion(found.type)
    return [suggestion] if suggestion else []


def error_unexpected_token(expected: str, found: Token, source_line: str = None,
                           expected_type: TokenType = None) -> ParseError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected {expected}, found {describe_token(found)}",
        severity=ErrorSeverity.ERROR,
        span=found.span,
        source_line=source_line,
        hints=_parse_hints(found),
    )
    return ParseError(diag, expected, found, expected_type)


def error_unexpected_eof(expected: str, found: Token, source_line: str = None,
                         expected_type: TokenType = None) -> ParseError:
    """E102: Unexpected end of input."""
    diag = Diagnostic(
        code="E102",
        message=f"unexpected end of input, expected {expected}",
        severity=ErrorSeverity.ERROR,
        span=found.span,
        source_line=source_line,
    )
    return ParseError(diag, expected, found, expected_type)


def error_trailing_input(found: Token, source_line: str = None) -> ParseError:
    """E103: Tokens left over after the top-level construct."""
    expected = describe_token_type(TokenType.EOF)
    diag = Diagnostic(
        code="E103",
        message=f"expected {expected}, found {describe_token(found)}",
        severity=ErrorSeverity.ERROR,
        span=found.span,
        source_line=source_line,
        hints=["a program is a single '{ ... }' block"],
    )
    return ParseError(diag, expected, found, TokenType.EOF)


def error_nesting_too_deep(limit: int, found: Token, source_line: str = None) -> ParseError:
    """E104: Nesting deeper than the parser allows."""
    diag = Diagnostic(
        code="E104",
        message=f"nesting exceeds the maximum depth of {limit}",
        severity=ErrorSeverity.ERROR,
        span=found.span,
        source_line=source_line,
    )
    return ParseError(diag, f"at most {limit} nested constructs", found)


# --- Runtime error codes ---

def error_undefined_variable(name: str, span: SourceSpan,
                             source_line: str = None) -> UndefinedVariableError:
    """E401: Undefined variable."""
    diag = Diagnostic(
        code="E401",
        message=f"undefined variable '{name}'",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=[f"assign '{name}' before reading it"],
    )
    return UndefinedVariableError(diag, name)


def error_division_by_zero(span: SourceSpan, source_line: str = None) -> DivisionByZeroError:
    """E402: Division by zero."""
    diag = Diagnostic(
        code="E402",
        message="division by zero",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return DivisionByZeroError(diag)


def error_integer_overflow(value: int, bits: int, span: SourceSpan,
                           source_line: str = None) -> IntegerOverflowError:
    """E403: Integer overflow in checked mode."""
    diag = Diagnostic(
        code="E403",
        message=f"integer overflow: {format_int(value)} does not fit in {bits} bits",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    return IntegerOverflowError(diag, value)
