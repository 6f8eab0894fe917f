"""
Token types for the bracelang lexer.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 007

    # --- Identifiers ---
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    IF = auto()                 # if
    THEN = auto()               # then (reserved)
    ELSE = auto()               # else
    ENDIF = auto()              # endif (reserved)

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # / (truncating division)

    # --- Assignment ---
    ASSIGN = auto()             # =

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    SEMICOLON = auto()          # ;

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # int for NUMBER, name for IDENTIFIER, lexeme otherwise
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    @property
    def text(self) -> str:
        return self.lexeme

    @property
    def location(self) -> SourceLocation:
        return self.span.start

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            value = format_int(self.value) if self.type == TokenType.NUMBER else repr(self.value)
            return f"{self.type.name}({value})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict[str, TokenType] = {
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "endif": TokenType.ENDIF,
}


# Reserved words no production accepts, with a pointer to the accepted form
RESERVED_SUGGESTIONS: dict[TokenType, str] = {
    TokenType.THEN: "conditionals are written 'if (condition) statement', without 'then'",
    TokenType.ENDIF: "conditionals are closed by their statement or '{ ... }' block, not 'endif'",
}

# Display text for token types in parser messages
TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.NUMBER: "number",
    TokenType.IDENTIFIER: "identifier",
    TokenType.IF: "'if'",
    TokenType.THEN: "'then'",
    TokenType.ELSE: "'else'",
    TokenType.ENDIF: "'endif'",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.STAR: "'*'",
    TokenType.SLASH: "'/'",
    TokenType.ASSIGN: "'='",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.SEMICOLON: "';'",
    TokenType.EOF: "end of input",
}


# Widest integer rendered in decimal; str() on larger ints can hit the
# interpreter's digit limit
MAX_DECIMAL_BITS = 4096


def format_int(value: int) -> str:
    """Decimal text for an int, or a size summary for very long literals."""
    if value.bit_length() > MAX_DECIMAL_BITS:
        return f"<{value.bit_length()}-bit integer>"
    return str(value)


def describe_token_type(token_type: TokenType) -> str:
    """Human-readable name of a token type for error messages."""
    return TOKEN_DESCRIPTIONS.get(token_type, token_type.name)


def describe_token(token: Token) -> str:
    """Human-readable description of a concrete token."""
    if token.type == TokenType.NUMBER:
        return f"number {format_int(token.value)}"
    if token.type == TokenType.IDENTIFIER:
        return f"identifier '{token.value}'"
    return describe_token_type(token.type)


def get_reserved_suggestion(token_type: TokenType) -> Optional[str]:
    """Get the hint for a reserved keyword, if any."""
    return RESERVED_SUGGESTIONS.get(token_type)
