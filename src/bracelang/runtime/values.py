"""
Integer semantics for the interpreter.

All values are signed integers of a fixed width. Results outside the range
either wrap around (two's complement) or raise IntegerOverflowError,
depending on the configured OverflowMode. Division truncates toward zero.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import error_integer_overflow
from ..tokens import SourceSpan


class OverflowMode(Enum):
    """What happens when a result does not fit the integer width."""
    WRAP = "wrap"       # two's-complement wraparound
    CHECK = "check"     # raise IntegerOverflowError


@dataclass(frozen=True)
class IntegerSemantics:
    """
    Fixed-width signed integer arithmetic.

    The default is 64-bit with wraparound, so
    ``9223372036854775807 + 1 == -9223372036854775808``.
    """
    bits: int = 64
    overflow: OverflowMode = OverflowMode.WRAP

    MIN_BITS = 8
    MAX_BITS = 1024

    def __post_init__(self):
        if not self.MIN_BITS <= self.bits <= self.MAX_BITS:
            raise ValueError(
                f"integer width must be between {self.MIN_BITS} and {self.MAX_BITS} bits, got {self.bits}"
            )

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1

    def normalize(self, value: int, span: SourceSpan, source_line: Optional[str] = None) -> int:
        """Bring an exact result into range according to the overflow mode."""
        if self.min_value <= value <= self.max_value:
            return value
        if self.overflow == OverflowMode.CHECK:
            raise error_integer_overflow(value, self.bits, span, source_line)
        mask = (1 << self.bits) - 1
        value &= mask
        if value > self.max_value:
            value -= 1 << self.bits
        return value

    def add(self, left: int, right: int, span: SourceSpan, source_line: Optional[str] = None) -> int:
        return self.normalize(left + right, span, source_line)

    def subtract(self, left: int, right: int, span: SourceSpan, source_line: Optional[str] = None) -> int:
        return self.normalize(left - right, span, source_line)

    def multiply(self, left: int, right: int, span: SourceSpan, source_line: Optional[str] = None) -> int:
        return self.normalize(left * right, span, source_line)

    def divide(self, left: int, right: int, span: SourceSpan, source_line: Optional[str] = None) -> int:
        """Truncating division. The caller rejects a zero divisor."""
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient
        # min_value / -1 is the one quotient that can leave the range
        return self.normalize(quotient, span, source_line)


DEFAULT_SEMANTICS = IntegerSemantics()
