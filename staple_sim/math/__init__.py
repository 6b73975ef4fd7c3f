"""Mathematical utilities for the Staple simulation engine.

This package provides the fixed-point primitives shared by the simulators:
- mul_div, isqrt, rescale: exact integer arithmetic (on-chain parity)
- parse_units / format_units: decimal string boundary
- FixedPoint: integer value tagged with its decimal precision
- decimal_math: arithmetic over 18-decimal display strings
"""

from staple_sim.math import decimal_math
from staple_sim.math.fixed_point import (
    ONE_WAD,
    FixedPoint,
    Rounding,
    abs_int,
    ceil_div,
    down_from_wad,
    format_units,
    isqrt,
    max_int,
    min_int,
    mul_div,
    parse_units,
    rescale,
    up_to_wad,
)

__all__ = [
    "decimal_math",
    "FixedPoint",
    "ONE_WAD",
    "Rounding",
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
]
