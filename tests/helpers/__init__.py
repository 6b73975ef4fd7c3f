"""Test helpers module for shared test utilities.

- constants: Common pool parameters
- factories: Token and VTP factory functions
"""

from tests.helpers.constants import (
    ALR_LOWER_BOUND_90,
    DEFAULT_N,
    DEFAULT_P,
    FEE_ONE_PERCENT,
    FEE_POINT_THREE_PERCENT,
)
from tests.helpers.factories import make_token, make_vtp

__all__ = [
    # Constants
    "DEFAULT_N",
    "DEFAULT_P",
    "FEE_ONE_PERCENT",
    "FEE_POINT_THREE_PERCENT",
    "ALR_LOWER_BOUND_90",
    # Factories
    "make_token",
    "make_vtp",
]
