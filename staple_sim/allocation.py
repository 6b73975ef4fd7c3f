"""Allocation and deallocation fee simulation for Staple VTPs.

Liquidity providers pay a fee when allocating to, or withdrawing from, a
token whose assets and liability are out of balance. Two whitepaper bounds
apply per direction and the larger fee governs:

    allocate:    WP 3.3 (assets >= liability, paired token has slack)
                 WP 3.2 (liability >= assets)
    deallocate:  WP 3.4 (liability >= assets)
                 WP 3.1 (assets >= liability)

Both bounds are always evaluated, each guarded by its own regime check,
then compared. At assets == liability both guards pass and the comparison
decides.
"""

from __future__ import annotations

import structlog

from staple_sim.constants import BPS_DECIMALS, BPS_ONE, SHARE_DECIMALS, WAD, WAD_DECIMALS
from staple_sim.errors import CalculationOverflow, InsufficientState, SimulationError
from staple_sim.inputs import (
    CurveState,
    TokenState,
    read_amount,
    read_curve,
    read_non_negative,
    read_token,
)
from staple_sim.math.fixed_point import (
    Rounding,
    ceil_div,
    format_units,
    max_int,
    mul_div,
    rescale,
)
from staple_sim.models.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from staple_sim.models.pool import PoolToken, Vtp
from staple_sim.models.results import AllocateResult, DeallocateResult

logger = structlog.get_logger()


def _is_balanced(token: TokenState, paired: TokenState) -> bool:
    return token.is_balanced and paired.is_balanced


# =============================================================================
# Allocate
# =============================================================================


def allocate_fee(token: TokenState, paired: TokenState, curve: CurveState, amount: int) -> int:
    """Fee for allocating `amount` (native decimals) into `token`.

    Returns:
        max(WP 3.3 fee, WP 3.2 fee), floored at zero

    Raises:
        DivisionByZero: If the allocating token has assets but no liability
    """
    pa, n = curve.pa, curve.n
    a0 = token.to_wad(token.assets)
    l0 = token.to_wad(token.liability)
    amount_wad = token.to_wad(amount)

    fee = 0

    # WP 3.3: aer <= 1/n * y1 * (a0 - l0) / l0 / (a0 + D) / pa
    paired_slack = paired.assets * BPS_ONE - paired.liability * paired.alr_lower_bound
    if a0 >= l0 and paired_slack > 0:
        y1 = paired.to_wad(paired_slack // BPS_ONE)
        num = y1 * pa + (a0 - l0) * WAD
        den = y1 * pa + (a0 + amount_wad) * WAD
        x = mul_div(y1, num, den, Rounding.CEIL)
        fee = mul_div(amount, x * WAD, l0 * pa * n, Rounding.CEIL)

    # WP 3.2: aer <= 1/n * y0 * (l0 - a0) / a0 / (l0 + D)
    if l0 >= a0:
        alr_bound = token.alr_lower_bound
        num = (a0 * BPS_ONE - l0 * alr_bound) * (l0 * (BPS_ONE - alr_bound))
        den = (l0 * alr_bound) * ((l0 + amount_wad) * BPS_ONE * n)
        if den > 0:
            fee = max_int(fee, mul_div(amount, num, den, Rounding.CEIL))

    return fee


def estimate_allocate(
    vtp: Vtp,
    token: PoolToken,
    paired_token: PoolToken,
    amount: str,
    config: SimulationConfig | None = None,
) -> AllocateResult:
    """Estimate the fee for allocating `amount` of `token`.

    Args:
        vtp: VTP the token belongs to
        token: Token being allocated
        paired_token: The other token of the VTP
        amount: Human-readable amount in the token's decimals
        config: Optional pa override

    Returns:
        AllocateResult with fee and fee rate, or an error result
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    try:
        return _estimate_allocate(vtp, token, paired_token, amount, config)
    except SimulationError as err:
        logger.debug(
            "simulation_failed",
            operation="allocate",
            error_kind=err.kind.value,
            detail=str(err),
        )
        return AllocateResult.with_error(err.kind, str(err))


def _estimate_allocate(
    vtp: Vtp,
    token: PoolToken,
    paired_token: PoolToken,
    amount: str,
    config: SimulationConfig,
) -> AllocateResult:
    state = read_token(token, "allocated")
    paired = read_token(paired_token, "paired")
    amount_in = read_amount(amount, state.decimals)
    curve = read_curve(vtp, config)

    if _is_balanced(state, paired):
        logger.debug("allocate_balanced_pool", amount=amount_in)
        return AllocateResult.zero_fee()

    fee = allocate_fee(state, paired, curve, amount_in)
    fee_rate = mul_div(fee, WAD, amount_in)

    return AllocateResult(
        fee=format_units(fee, state.decimals),
        fee_rate=format_units(fee_rate, WAD_DECIMALS),
    )


# =============================================================================
# Deallocate
# =============================================================================


def split_pause_part(state: TokenState, total_amount: int) -> tuple[int, int]:
    """Split a withdrawal into (normal_part, pause_part).

    If withdrawing everything would push ALR below the lower bound c, the
    normal part is capped at the amount x keeping (A - x) / (L - x) == c,
    i.e. x = (A - c*L) / (1 - c), and the rest is the pause part.
    """
    new_asset = max_int(state.assets - total_amount, 0)
    new_liability = max_int(state.liability - total_amount, 0)
    if new_liability == 0:
        return total_amount, 0

    new_alr = mul_div(new_asset, WAD, new_liability)
    c = rescale(state.alr_lower_bound, BPS_DECIMALS, WAD_DECIMALS)
    if new_alr >= c:
        return total_amount, 0

    den = WAD - c
    normal_part = 0
    if den > 0:
        normal_part = max_int((state.assets * WAD - state.liability * c) // den, 0)
    pause_part = max_int(total_amount - normal_part, 0)
    return normal_part, pause_part


def deallocate_fee(
    state: TokenState,
    paired: TokenState,
    curve: CurveState,
    normal_part: int,
    pause_part: int,
) -> int:
    """Fee for withdrawing normal_part + pause_part (native decimals).

    Returns:
        max(WP 3.4 fee, WP 3.1 fee, 0) plus the flat pause-part fee

    Raises:
        CalculationOverflow: If normal_part exceeds assets or liability
    """
    if normal_part > state.assets or normal_part > state.liability:
        raise CalculationOverflow(
            f"Normal part {normal_part} exceeds assets ({state.assets}) "
            f"or liability ({state.liability})"
        )

    a0 = state.to_wad(state.assets)
    l0 = state.to_wad(state.liability)
    normal_part_wad = state.to_wad(normal_part)

    fee = 0

    # WP 3.4
    if l0 >= a0:
        a1 = paired.to_wad(paired.assets)
        l1 = paired.to_wad(paired.liability)
        paired_slack = a1 * BPS_ONE - l1 * paired.alr_lower_bound
        num = normal_part * paired_slack * (l0 - a0)
        den = l0 * (a0 - normal_part_wad) * BPS_ONE
        if den > 0:
            x = ceil_div(num, den)
            fee = max_int(fee, mul_div(x, WAD, curve.pa * curve.n, Rounding.CEIL))

    # WP 3.1
    if a0 >= l0:
        alr_bound = state.alr_lower_bound
        num = normal_part * (a0 * BPS_ONE - l0 * alr_bound) * (a0 - l0)
        den = a0 * (l0 - normal_part_wad) * BPS_ONE * curve.n
        if den > 0:
            fee = max_int(fee, ceil_div(num, den))

    if pause_part > 0:
        pause_fee = mul_div(pause_part, BPS_ONE - state.alr_lower_bound, BPS_ONE)
        logger.debug("deallocate_pause_part", pause_part=pause_part, pause_fee=pause_fee)
        fee += pause_fee

    return fee


def estimate_deallocate(
    vtp: Vtp,
    token: PoolToken,
    paired_token: PoolToken,
    amount: str,
    user_allocation: str,
    user_shares: str,
    total_shares: str | None = None,
    config: SimulationConfig | None = None,
) -> DeallocateResult:
    """Estimate fee, earnings and share burn for withdrawing `amount`.

    Args:
        vtp: VTP the token belongs to
        token: Token being deallocated
        paired_token: The other token of the VTP
        amount: Principal to withdraw, human-readable native decimals
        user_allocation: Principal the user currently has allocated
        user_shares: LP shares held by the user (18 decimals)
        total_shares: LP share supply (18 decimals); defaults to the token status
        config: Optional pa override

    Returns:
        DeallocateResult, or an error result

    Note:
        With a zero share supply one share is priced at one native token unit
        (10^decimals, WAD-scaled). The front-end prices it at WAD, which is
        the same value only for 18-decimal tokens.
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    try:
        return _estimate_deallocate(
            vtp, token, paired_token, amount, user_allocation, user_shares, total_shares, config
        )
    except SimulationError as err:
        logger.debug(
            "simulation_failed",
            operation="deallocate",
            error_kind=err.kind.value,
            detail=str(err),
        )
        return DeallocateResult.with_error(err.kind, str(err))


def _require_within_reserves(state: TokenState, total_amount: int) -> None:
    if total_amount > state.assets:
        raise CalculationOverflow(
            f"Withdrawal {total_amount} exceeds token assets ({state.assets})"
        )
    if total_amount > state.liability:
        raise CalculationOverflow(
            f"Withdrawal {total_amount} exceeds token liability ({state.liability})"
        )


def _estimate_deallocate(
    vtp: Vtp,
    token: PoolToken,
    paired_token: PoolToken,
    amount: str,
    user_allocation: str,
    user_shares: str,
    total_shares: str | None,
    config: SimulationConfig,
) -> DeallocateResult:
    state = read_token(token, "deallocated")
    paired = read_token(paired_token, "paired")
    decimals = state.decimals

    amount_in = read_amount(amount, decimals)
    user_alloc = read_non_negative(user_allocation, decimals, "userAllocation")
    shares = read_non_negative(user_shares, SHARE_DECIMALS, "userShares")
    supply = (
        state.total_shares
        if total_shares is None
        else read_non_negative(total_shares, SHARE_DECIMALS, "totalShares")
    )
    curve = read_curve(vtp, config)

    if _is_balanced(state, paired):
        _require_within_reserves(state, amount_in)
        logger.debug("deallocate_balanced_pool", amount=amount_in)
        amount_text = format_units(amount_in, decimals)
        return DeallocateResult(
            fee="0",
            fee_rate="0",
            earnings="0",
            burn=format_units(rescale(amount_in, decimals, SHARE_DECIMALS), SHARE_DECIMALS),
            total_amount=amount_text,
            normal_part=amount_text,
            pause_part="0",
        )

    # Earnings accrued on the user's shares are withdrawn with the principal.
    # share_price is native units per share, WAD-scaled; with no supply one
    # share is worth one native unit.
    share_price = mul_div(state.liability, WAD, supply) if supply > 0 else 10**decimals
    if share_price == 0:
        raise InsufficientState(
            f"Share price rounds to zero: liability {state.liability}, total shares {supply}"
        )
    user_shares_value = mul_div(share_price, shares, WAD)
    earnings = max_int(user_shares_value - user_alloc, 0)
    total_amount = amount_in + earnings
    _require_within_reserves(state, total_amount)

    remaining_alloc = max_int(user_alloc - amount_in, 0)
    shares_to_keep = mul_div(remaining_alloc, WAD, share_price)
    shares_to_burn = max_int(shares - shares_to_keep, 0)

    normal_part, pause_part = split_pause_part(state, total_amount)
    fee = deallocate_fee(state, paired, curve, normal_part, pause_part)
    fee_rate = mul_div(fee, WAD, total_amount)

    return DeallocateResult(
        fee=format_units(fee, decimals),
        fee_rate=format_units(fee_rate, WAD_DECIMALS),
        earnings=format_units(earnings, decimals),
        burn=format_units(shares_to_burn, SHARE_DECIMALS),
        total_amount=format_units(total_amount, decimals),
        normal_part=format_units(normal_part, decimals),
        pause_part=format_units(pause_part, decimals),
    )
