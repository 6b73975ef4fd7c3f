"""Fixed-point arithmetic for the Staple simulation engine.

This module mirrors the integer math of the on-chain Staple contracts.
All quantities are Python ints scaled by a stated number of decimals, so
intermediate products never truncate.

- mul_div / ceil_div: scaled multiply-divide with explicit rounding
- isqrt: Newton's method integer square root
- rescale / up_to_wad: move amounts between decimal precisions
- parse_units / format_units: decimal strings <-> scaled integers
- FixedPoint: an integer tagged with its precision
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum

from staple_sim.constants import WAD, WAD_DECIMALS
from staple_sim.errors import DivisionByZero, NegativeSquareRoot, ParseError

__all__ = [
    # Classes
    "FixedPoint",
    "Rounding",
    # Functions
    "mul_div",
    "ceil_div",
    "isqrt",
    "rescale",
    "up_to_wad",
    "down_from_wad",
    "parse_units",
    "format_units",
    "abs_int",
    "min_int",
    "max_int",
    # Constants
    "MAX_PARSE_DIGITS",
    "DECIMAL_PATTERN",
    "ONE_WAD",
]

# Largest number of integer digits a parsed value may carry after scaling.
# uint256 has 78 digits; the extra room covers 36-decimal intermediates.
MAX_PARSE_DIGITS = 96

# Plain or scientific decimal notation, ASCII digits only
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


class Rounding(str, Enum):
    """Rounding direction for mul_div."""

    FLOOR = "floor"
    CEIL = "ceil"


# =============================================================================
# Core integer primitives
# =============================================================================


def mul_div(a: int, b: int, c: int, rounding: Rounding = Rounding.FLOOR) -> int:
    """Compute a * b / c rounded in the requested direction.

    The product is held exactly (Python ints are unbounded), so this never
    loses precision before the division.

    Args:
        a: Multiplier
        b: Multiplicand
        c: Divisor (must be non-zero)
        rounding: Rounding.FLOOR or Rounding.CEIL

    Returns:
        floor(a*b/c) or ceil(a*b/c)

    Raises:
        DivisionByZero: If c is zero
    """
    if c == 0:
        raise DivisionByZero(f"mul_div division by zero: {a} * {b} / 0")
    product = a * b
    if rounding == Rounding.CEIL:
        return -((-product) // c)
    return product // c


def ceil_div(a: int, b: int) -> int:
    """Ceiling division.

    Raises:
        DivisionByZero: If b is zero
    """
    if b == 0:
        raise DivisionByZero(f"ceil_div division by zero: {a} / 0")
    return -((-a) // b)


def isqrt(value: int) -> int:
    """Integer square root via Newton's method.

    Iterates x1 = (x0 + value / x0) / 2 starting from x0 = value and stops
    as soon as the estimate no longer decreases (x1 >= x0).

    Raises:
        NegativeSquareRoot: If value is negative
    """
    if value < 0:
        raise NegativeSquareRoot(f"Square root of negative value: {value}")
    if value < 2:
        return value
    x0 = value
    x1 = (x0 + value // x0) >> 1
    while x1 < x0:
        x0 = x1
        x1 = (x0 + value // x0) >> 1
    return x0


def rescale(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Move an amount between decimal precisions.

    Scaling up multiplies exactly; scaling down floors.
    """
    if to_decimals == from_decimals:
        return amount
    if to_decimals > from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


def up_to_wad(amount: int, decimals: int) -> int:
    """Scale a token-native amount to 18 decimals (floors for decimals > 18)."""
    return rescale(amount, decimals, WAD_DECIMALS)


def down_from_wad(amount: int, decimals: int) -> int:
    """Scale an 18-decimal amount back to token-native decimals (floor)."""
    return rescale(amount, WAD_DECIMALS, decimals)


def abs_int(value: int) -> int:
    return -value if value < 0 else value


def min_int(a: int, b: int) -> int:
    return a if a < b else b


def max_int(a: int, b: int) -> int:
    return a if a > b else b


# =============================================================================
# Decimal string boundary
# =============================================================================


def parse_units(value: str | int | Decimal, decimals: int) -> int:
    """Parse a human-readable decimal into a fixed-point integer.

    Accepts plain and scientific notation ("1.5", "-2", "1.5e-10"). Digits
    beyond `decimals` fractional places are truncated toward zero, matching
    ethers-style parseUnits on the front-end.

    Args:
        value: Decimal string, int or Decimal
        decimals: Number of implied decimal places in the result

    Returns:
        Signed integer scaled by 10^decimals

    Raises:
        ParseError: If the value is not a finite decimal number or is too large
    """
    if decimals < 0:
        raise ParseError(f"Decimals must be non-negative, got {decimals}")

    # bool is an int subclass and float is inexact; neither is a valid amount
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise ParseError(f"Expected decimal string, got {type(value).__name__}")

    if isinstance(value, int):
        return value * 10**decimals

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ParseError("Empty numeric string")
        if not DECIMAL_PATTERN.match(text):
            raise ParseError(f"Invalid decimal number: '{value}'")
        try:
            number = Decimal(text)
        except InvalidOperation as err:
            raise ParseError(f"Invalid decimal number: '{value}'") from err
    else:
        number = value

    if not number.is_finite():
        raise ParseError(f"Number must be finite: '{value}'")

    sign, digits, exponent = number.as_tuple()
    if not isinstance(exponent, int):
        raise ParseError(f"Number must be finite: '{value}'")
    shift = exponent + decimals

    if len(digits) + shift > MAX_PARSE_DIGITS:
        raise ParseError(f"Number out of range: '{value}'")

    coefficient = 0
    for digit in digits:
        coefficient = coefficient * 10 + digit

    if shift >= 0:
        scaled = coefficient * 10**shift
    elif -shift > len(digits):
        # Every significant digit falls below the requested precision
        scaled = 0
    else:
        scaled = coefficient // 10 ** (-shift)

    return -scaled if sign else scaled


def format_units(value: int, decimals: int) -> str:
    """Format a fixed-point integer as the shortest decimal string.

    Trailing fractional zeros are dropped, zero renders as "0" and negative
    values keep a leading "-".

    Examples:
        format_units(1_500_000, 6) == "1.5"
        format_units(-10**18, 18) == "-1"
    """
    negative = value < 0
    digits = str(abs_int(value))

    if decimals == 0:
        text = digits
    else:
        digits = digits.rjust(decimals + 1, "0")
        integer, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
        text = f"{integer}.{fraction}" if fraction else integer

    return f"-{text}" if negative else text


# =============================================================================
# FixedPoint value type
# =============================================================================


class FixedPoint:
    """Integer amount tagged with its decimal precision.

    Example: FixedPoint(1_500_000, 6) is 1.5 in a 6-decimal token.
    Construct from user input only via FixedPoint.parse(), which validates.
    """

    __slots__ = ("value", "decimals")
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int, decimals: int = WAD_DECIMALS) -> None:
        """Create FixedPoint from a raw scaled value."""
        if decimals < 0:
            raise ValueError(f"FixedPoint decimals must be non-negative, got {decimals}")
        self.value = value
        self.decimals = decimals

    @classmethod
    def parse(cls, value: str | int | Decimal, decimals: int) -> FixedPoint:
        """Parse a human-readable number at the given precision."""
        return cls(parse_units(value, decimals), decimals)

    @classmethod
    def zero(cls, decimals: int = WAD_DECIMALS) -> FixedPoint:
        return cls(0, decimals)

    def format(self) -> str:
        """Render as a decimal string at this value's precision."""
        return format_units(self.value, self.decimals)

    def rescale(self, decimals: int) -> FixedPoint:
        """Convert to another precision (floors when losing digits)."""
        return FixedPoint(rescale(self.value, self.decimals, decimals), decimals)

    def to_wad(self) -> int:
        """Raw value scaled to 18 decimals."""
        return up_to_wad(self.value, self.decimals)

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.format())

    @property
    def is_positive(self) -> bool:
        return self.value > 0

    @property
    def is_negative(self) -> bool:
        return self.value < 0

    def mul_down(self, other: FixedPoint) -> FixedPoint:
        """Multiply with floor rounding, keeping self's precision."""
        return FixedPoint(mul_div(self.value, other.value, 10**other.decimals), self.decimals)

    def mul_up(self, other: FixedPoint) -> FixedPoint:
        """Multiply with ceiling rounding, keeping self's precision."""
        return FixedPoint(
            mul_div(self.value, other.value, 10**other.decimals, Rounding.CEIL), self.decimals
        )

    def div_down(self, other: FixedPoint) -> FixedPoint:
        """Divide with floor rounding, keeping self's precision.

        Raises:
            DivisionByZero: If other is zero
        """
        return FixedPoint(mul_div(self.value, 10**other.decimals, other.value), self.decimals)

    def div_up(self, other: FixedPoint) -> FixedPoint:
        """Divide with ceiling rounding, keeping self's precision.

        Raises:
            DivisionByZero: If other is zero
        """
        return FixedPoint(
            mul_div(self.value, 10**other.decimals, other.value, Rounding.CEIL), self.decimals
        )

    def add(self, other: FixedPoint) -> FixedPoint:
        """Add, aligning other to self's precision."""
        return FixedPoint(self.value + other._aligned_to(self.decimals), self.decimals)

    def sub(self, other: FixedPoint) -> FixedPoint:
        """Subtract, aligning other to self's precision. May go negative."""
        return FixedPoint(self.value - other._aligned_to(self.decimals), self.decimals)

    def _aligned_to(self, decimals: int) -> int:
        return rescale(self.value, self.decimals, decimals)

    def _cross(self, other: FixedPoint) -> tuple[int, int]:
        """Both values at the finer of the two precisions (exact)."""
        decimals = max_int(self.decimals, other.decimals)
        return (
            rescale(self.value, self.decimals, decimals),
            rescale(other.value, other.decimals, decimals),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        left, right = self._cross(other)
        return left == right

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        left, right = self._cross(other)
        return left < right

    def __le__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        left, right = self._cross(other)
        return left <= right

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        left, right = self._cross(other)
        return left > right

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        left, right = self._cross(other)
        return left >= right

    def __repr__(self) -> str:
        return f"FixedPoint({self.value}, {self.decimals})"

    def __str__(self) -> str:
        return self.format()


ONE_WAD = FixedPoint(WAD, WAD_DECIMALS)
