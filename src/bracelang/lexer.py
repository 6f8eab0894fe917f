"""
Lexer for bracelang.

Converts source text into a stream of tokens for the parser. Tokens are
produced on demand: the parser pulls them one at a time with
``next_token()``.

Supports:
- Decimal integer literals (no sign, no decimal point)
- Identifiers and the reserved words if/then/else/endif
- The single-character operators and delimiters { } ( ) ; + - * / =

There are no comments; any character outside the above (and whitespace) is
a lexical error.
"""

import logging
from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS,
)
from .errors import error_unexpected_character

logger = logging.getLogger(__name__)


# Single-character tokens
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ';': TokenType.SEMICOLON,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '=': TokenType.ASSIGN,
}

WHITESPACE = ' \t\r\n'


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


# int() refuses strings above sys.get_int_max_str_digits() (4300 by default)
DIGIT_CHUNK = 1000


def _digits_to_int(digits: str) -> int:
    """Convert a run of decimal digits of any length to an int."""
    value = 0
    for i in range(0, len(digits), DIGIT_CHUNK):
        chunk = digits[i:i + DIGIT_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


class Lexer:
    """
    Pull-based tokenizer.

    Usage:
        lexer = Lexer(source_code)
        token = lexer.next_token()

    Or for the whole stream:
        tokens = Lexer(source_code).tokenize()

    Once the end of input is reached every further ``next_token()`` call
    returns another EOF token.
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self._lines: Optional[List[str]] = None

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Text of a 1-based source line, for diagnostics. None when out of range."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        if 0 < line_num <= len(self._lines):
            return self._lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Span from ``start`` up to the cursor."""
        return SourceSpan(start, self._location())

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self) -> str:
        """Character under the cursor, or NUL at end of input."""
        return '\0' if self._is_at_end() else self.source[self.pos]

    def _advance(self) -> None:
        """Step over one character, keeping line and column in sync."""
        if self.source[self.pos] == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek() in WHITESPACE:
            self._advance()

    def _make_token(self, token_type: TokenType, value, start: SourceLocation,
                    lexeme: Optional[str] = None) -> Token:
        if lexeme is None:
            lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_number(self) -> Token:
        """Scan a run of decimal digits."""
        start = self._location()
        while _is_digit(self._peek()):
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        return self._make_token(TokenType.NUMBER, _digits_to_int(lexeme), start, lexeme)

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or reserved word."""
        start = self._location()

        while _is_ident_char(self._peek()):
            self._advance()

        lexeme = self.source[start.offset:self.pos]

        if lexeme in KEYWORDS:
            return self._make_token(KEYWORDS[lexeme], lexeme, start, lexeme)

        return self._make_token(TokenType.IDENTIFIER, lexeme, start, lexeme)

    def next_token(self) -> Token:
        """Scan and return the next token, advancing the cursor."""
        self._skip_whitespace()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, self._location(), "")

        start = self._location()
        ch = self._peek()

        if _is_digit(ch):
            return self._scan_number()

        if _is_ident_start(ch):
            return self._scan_identifier_or_keyword()

        if ch in SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, start)

        # Unknown character: include it in the span so the caret covers it
        self._advance()
        raise error_unexpected_character(
            ch, self._span(start), self.get_source_line(start.line)
        )

    def peek_token(self) -> Token:
        """Return the next token without consuming it."""
        saved = (self.pos, self.line, self.column)
        try:
            return self.next_token()
        finally:
            self.pos, self.line, self.column = saved

    def tokenize(self) -> List[Token]:
        """Tokenize the rest of the source, returning a list ending in EOF."""
        tokens = list(self)
        logger.debug("tokenized %d token(s) from %s", len(tokens), self.filename or "<input>")
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, the last one being EOF

    Raises:
        LexError: If an unrecognized character is found
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
