"""Shared type definitions for pool and VTP models."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from staple_sim.constants import MAX_TOKEN_DECIMALS


def validate_decimal_text(value: Any) -> str:
    """Normalize a human-readable number field to its decimal text.

    The text is kept as given; precision is applied later by the simulators,
    which know which decimals each field uses.

    Args:
        value: str, int, Decimal, or a float coming from JSON

    Returns:
        Decimal text

    Raises:
        ValueError: If value is not a number-like type
    """
    if isinstance(value, bool):
        raise ValueError("Numeric field cannot be a boolean")
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, float):
        # repr of a float is its shortest round-tripping decimal
        return repr(value)
    raise ValueError(f"Numeric field must be string or number, got {type(value).__name__}")


# Human-readable decimal number kept as text, e.g. "1000.5" or "1.5e-10"
DecimalText = Annotated[str, BeforeValidator(validate_decimal_text)]

# On-chain integer-encoded rate (ppm for swap fees, 1e-4 units for bps rates)
ChainRate = Annotated[int, Field(ge=0)]

# Token decimals accepted by the simulators
TokenDecimals = Annotated[int, Field(ge=0, le=MAX_TOKEN_DECIMALS)]
