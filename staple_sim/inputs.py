"""Input parsing shared by the simulators.

Turns pydantic pool models and caller strings into plain integers at the
right precision, raising typed SimulationErrors for anything invalid.
"""

from __future__ import annotations

from dataclasses import dataclass

from staple_sim.constants import SHARE_DECIMALS, WAD, WAD_DECIMALS
from staple_sim.errors import InsufficientState, InvalidAmount
from staple_sim.math.fixed_point import FixedPoint
from staple_sim.models.config import SimulationConfig
from staple_sim.models.pool import PoolToken, Vtp


@dataclass(frozen=True)
class TokenState:
    """One pool token with every quantity parsed.

    Balances are in the token's native decimals; rates stay in their
    chain-integer scale.
    """

    decimals: int
    assets: int
    liability: int
    total_shares: int
    swap_fee_in: int
    swap_fee_out: int
    protocol_fee_rate: int
    max_allocate_rate: int
    alr_lower_bound: int

    @property
    def is_balanced(self) -> bool:
        return self.assets == self.liability

    def to_wad(self, amount: int) -> int:
        return FixedPoint(amount, self.decimals).to_wad()


@dataclass(frozen=True)
class CurveState:
    """VTP curve parameters parsed for a single call."""

    n: int
    p: int
    pa: int


def read_token(token: PoolToken, label: str) -> TokenState:
    """Parse a pool token's balances at its native precision.

    Raises:
        ParseError: If a balance string is malformed
        InvalidAmount: If a balance is negative
    """
    decimals = token.params.decimals
    return TokenState(
        decimals=decimals,
        assets=read_non_negative(token.status.assets, decimals, f"{label} assets"),
        liability=read_non_negative(token.status.liability, decimals, f"{label} liability"),
        total_shares=read_non_negative(
            token.status.total_shares, SHARE_DECIMALS, f"{label} totalShares"
        ),
        swap_fee_in=token.params.swap_fee_in,
        swap_fee_out=token.params.swap_fee_out,
        protocol_fee_rate=token.params.protocol_fee_rate,
        max_allocate_rate=token.params.max_allocate_rate,
        alr_lower_bound=token.params.alr_lower_bound,
    )


def read_curve(vtp: Vtp, config: SimulationConfig) -> CurveState:
    """Parse n, p and the effective pa (config override wins).

    Raises:
        ParseError: If pa is malformed
        InsufficientState: If n or pa is not positive
    """
    pa_text = config.pa_overwrite if config.pa_overwrite else vtp.status.pa
    pa = FixedPoint.parse(pa_text, WAD_DECIMALS)
    n = vtp.params.n
    if n <= 0:
        raise InsufficientState(f"VTP curve parameter n must be positive, got {n}")
    if not pa.is_positive:
        raise InsufficientState(f"VTP price pa must be positive, got {pa}")
    return CurveState(n=n, p=vtp.params.p, pa=pa.value)


def read_amount(value: str, decimals: int, label: str = "amount") -> int:
    """Parse a caller-entered amount that must be strictly positive.

    Raises:
        ParseError: If the string is malformed
        InvalidAmount: If the amount is zero or negative
    """
    amount = FixedPoint.parse(value, decimals)
    if not amount.is_positive:
        raise InvalidAmount(f"{label.capitalize()} must be positive, got {value!r}")
    return amount.value


def read_non_negative(value: str, decimals: int, label: str) -> int:
    """Parse a decimal that may be zero but not negative.

    Raises:
        ParseError: If the string is malformed
        InvalidAmount: If the value is negative
    """
    parsed = FixedPoint.parse(value, decimals)
    if parsed.is_negative:
        raise InvalidAmount(f"{label} cannot be negative, got {value!r}")
    return parsed.value


def read_discount(config: SimulationConfig) -> int:
    """Fee discount as a WAD fraction in [0, WAD].

    Raises:
        ParseError: If the discount string is malformed
        InvalidAmount: If the discount lies outside [0, 1]
    """
    if config.exclude_swap_fee:
        return WAD
    if not config.discount:
        return 0
    discount = read_non_negative(config.discount, WAD_DECIMALS, "discount")
    if discount > WAD:
        raise InvalidAmount(f"Discount must be within [0, 1], got {config.discount!r}")
    return discount


def require_reserves(state: TokenState, label: str) -> None:
    """Require positive assets and liability.

    Raises:
        InsufficientState: If either is zero
    """
    if state.assets <= 0:
        raise InsufficientState(f"{label} token has no assets")
    if state.liability <= 0:
        raise InsufficientState(f"{label} token has no liability")
