"""WAD decimal-string helpers.

Convenience arithmetic over human-readable 18-decimal strings, for callers
that hold prices and ratios as display strings (e.g. "1.05").
"""

from __future__ import annotations

from staple_sim.constants import WAD, WAD_DECIMALS
from staple_sim.math.fixed_point import format_units, mul_div, parse_units


def _wad(value: str) -> int:
    return parse_units(value, WAD_DECIMALS)


def add(a: str, b: str) -> str:
    return format_units(_wad(a) + _wad(b), WAD_DECIMALS)


def sub(a: str, b: str) -> str:
    return format_units(_wad(a) - _wad(b), WAD_DECIMALS)


def mul(a: str, b: str) -> str:
    """a * b, rounded down at 18 decimals."""
    return format_units(mul_div(_wad(a), _wad(b), WAD), WAD_DECIMALS)


def div(a: str, b: str) -> str:
    """a / b, rounded down at 18 decimals.

    Raises:
        DivisionByZero: If b is zero
    """
    return format_units(mul_div(_wad(a), WAD, _wad(b)), WAD_DECIMALS)


def is_zero(a: str) -> bool:
    return _wad(a) == 0


def gt(a: str, b: str) -> bool:
    return _wad(a) > _wad(b)


def lt(a: str, b: str) -> bool:
    return _wad(a) < _wad(b)


__all__ = ["add", "sub", "mul", "div", "is_zero", "gt", "lt"]
