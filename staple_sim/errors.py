"""Simulation error classes.

Every failure the engine can produce is a subclass of SimulationError and
carries a SimulationErrorKind. The public estimate_* functions convert these
exceptions into error results; they never propagate to the caller.
"""

from enum import Enum
from typing import ClassVar


class SimulationErrorKind(Enum):
    """Types of simulation errors."""

    PARSE_ERROR = "parse_error"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_STATE = "insufficient_state"
    DIVISION_BY_ZERO = "division_by_zero"
    NEGATIVE_SQUARE_ROOT = "negative_square_root"
    INVALID_SWAP_PARAMETERS = "invalid_swap_parameters"
    NEGATIVE_RESULT = "negative_result"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    CALCULATION_OVERFLOW = "calculation_overflow"


class SimulationError(Exception):
    """Base error for simulation operations."""

    kind: ClassVar[SimulationErrorKind]


class ParseError(SimulationError, ValueError):
    """A decimal string input is malformed."""

    kind = SimulationErrorKind.PARSE_ERROR


class InvalidAmount(SimulationError, ValueError):
    """Amount is zero or negative where a positive amount is required."""

    kind = SimulationErrorKind.INVALID_AMOUNT


class InsufficientState(SimulationError):
    """A reserve, liability or curve parameter is non-positive."""

    kind = SimulationErrorKind.INSUFFICIENT_STATE


class DivisionByZero(SimulationError, ArithmeticError):
    """Division by zero in a fixed-point primitive."""

    kind = SimulationErrorKind.DIVISION_BY_ZERO


class NegativeSquareRoot(SimulationError, ArithmeticError):
    """Integer square root of a negative value."""

    kind = SimulationErrorKind.NEGATIVE_SQUARE_ROOT


class InvalidSwapParameters(SimulationError):
    """PAV discriminant is negative: swap too large for the curve."""

    kind = SimulationErrorKind.INVALID_SWAP_PARAMETERS


class NegativeResult(SimulationError):
    """A computed amount went below zero."""

    kind = SimulationErrorKind.NEGATIVE_RESULT


class InsufficientLiquidity(SimulationError):
    """A computed output exceeds the counterparty reserve."""

    kind = SimulationErrorKind.INSUFFICIENT_LIQUIDITY


class CalculationOverflow(SimulationError):
    """Allocation/deallocation amount violates a fee formula precondition."""

    kind = SimulationErrorKind.CALCULATION_OVERFLOW
