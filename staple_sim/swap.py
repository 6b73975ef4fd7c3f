"""Swap simulation for Staple VTPs.

Reproduces the on-chain swap path offline, step by step:

    1. input-side fee (ppm, rounded up, optionally discounted)
    2. execution price (PAV) from the closed-form curve quadratic
    3. output-side fee
    4. RALR-based punishment or reward on the output
    5. soft ALR lower-bound flag and slippage against pa

Every rounding direction matches the contract; changing one breaks parity.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from staple_sim.constants import (
    BPS_ONE,
    BPS_TO_WAD,
    FEE_RATE_ONE,
    WAD,
    WAD_DECIMALS,
    WAD_SQUARED,
)
from staple_sim.errors import (
    InsufficientLiquidity,
    InvalidSwapParameters,
    NegativeResult,
    SimulationError,
)
from staple_sim.inputs import (
    read_amount,
    read_curve,
    read_discount,
    read_token,
    require_reserves,
)
from staple_sim.math.fixed_point import (
    Rounding,
    format_units,
    isqrt,
    min_int,
    mul_div,
    up_to_wad,
)
from staple_sim.models.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from staple_sim.models.pool import PoolToken, Vtp
from staple_sim.models.results import SwapResult

logger = structlog.get_logger()

# pav_delta is a squared WAD quantity
PAV_DELTA_DECIMALS = 2 * WAD_DECIMALS


@dataclass(frozen=True)
class PavResult:
    """Execution price and the quadratic components it was solved from.

    All values are WAD-scaled except delta, which is WAD^2-scaled.
    """

    pav: int
    a: int
    b: int
    delta: int
    t: int


@dataclass(frozen=True)
class Adjustment:
    """Punishment (reduces output) or reward (increases output)."""

    is_punishment: bool
    amount: int

    @property
    def signed(self) -> int:
        """Positive for punishment, negative for reward."""
        return self.amount if self.is_punishment else -self.amount


def calc_pav(n: int, pa: int, asset_in_wad: int, asset_out_wad: int, real_in_wad: int) -> PavResult:
    """Solve the curve quadratic for the execution price.

    With _2nC2 = n * (2n - 1):

        a = (realIn * pa / a1 * a0 / (a0 + realIn) + 2n) / _2nC2            (floor)
        b = realIn * (a0*pa + a1) / (a0*a1) * a0 / (a0 + realIn) / _2nC2    (ceil)
        delta = a^2 - 4b
        t = (a - sqrt(delta)) / 2
        pav = (1 - t) * pa

    Args:
        n: Curve steepness (positive)
        pa: Current price, WAD
        asset_in_wad: Input token assets, WAD
        asset_out_wad: Output token assets, WAD
        real_in_wad: Input after fee, WAD

    Returns:
        PavResult with pav and its components

    Raises:
        InvalidSwapParameters: If delta < 0 (swap too large for the curve)
        DivisionByZero: If a reserve is zero at WAD precision
    """
    two_n_c_2 = n * (2 * n - 1)

    term1 = mul_div(real_in_wad, pa, asset_out_wad)
    term2 = mul_div(term1, asset_in_wad, asset_in_wad + real_in_wad)
    a = (term2 + 2 * n * WAD) // two_n_c_2

    num1 = asset_in_wad * pa + asset_out_wad * WAD
    den1 = asset_in_wad * asset_out_wad
    term_b1 = mul_div(real_in_wad, num1, den1, Rounding.CEIL)
    term_b2 = mul_div(term_b1, asset_in_wad, asset_in_wad + real_in_wad, Rounding.CEIL)
    b = mul_div(term_b2, 1, two_n_c_2, Rounding.CEIL)

    delta = a * a - 4 * WAD * b
    if delta < 0:
        raise InvalidSwapParameters(
            "Swap amount too large for current liquidity (negative PAV discriminant)"
        )

    t = (a - isqrt(delta)) // 2
    pav = mul_div(WAD - t, pa, WAD)

    logger.debug("swap_pav_computed", pav=pav, a=a, b=b, delta=delta, t=t)
    return PavResult(pav=pav, a=a, b=b, delta=delta, t=t)


def calc_extra_punishment(p: int, new_ralr: int, esti_out: int) -> Adjustment:
    """Punishment or reward on the output, driven by the post-swap RALR.

    m = 1 + p (p in 1e-4 units). Above m the swap worsens the imbalance and
    is punished; when ralr * m < 1 it restores balance and is rewarded.

    Args:
        p: Punishment threshold, 1e-4 units
        new_ralr: Relative ALR after the swap, WAD
        esti_out: Output after the swap-out fee, native decimals

    Returns:
        Adjustment to subtract (punishment) or add (reward)
    """
    m = p * BPS_TO_WAD + WAD

    if new_ralr > m:
        sub_squares = new_ralr * new_ralr - m * m
        punish_amount = mul_div(esti_out, sub_squares, sub_squares + new_ralr * m, Rounding.CEIL)
        return Adjustment(is_punishment=True, amount=min_int(punish_amount, esti_out))

    if new_ralr * m < WAD_SQUARED:
        ralr_mul_m = mul_div(new_ralr, m, WAD, Rounding.CEIL)
        num = WAD_SQUARED - ralr_mul_m * ralr_mul_m
        den = WAD_SQUARED + ralr_mul_m * (WAD - ralr_mul_m)
        return Adjustment(is_punishment=False, amount=mul_div(esti_out, num, den))

    return Adjustment(is_punishment=False, amount=0)


def _apply_discount(fee: int, discount: int) -> int:
    if discount > 0:
        return mul_div(fee, WAD - discount, WAD)
    return fee


def _check_output(amount: int, assets_out: int, stage: str) -> None:
    """Bound a computed output to [0, assets_out].

    Raises:
        NegativeResult: If amount < 0
        InsufficientLiquidity: If amount > assets_out
    """
    if amount < 0:
        raise NegativeResult(f"Negative output {stage}: {amount}")
    if amount > assets_out:
        raise InsufficientLiquidity(
            f"Output {stage} ({amount}) exceeds available assets ({assets_out})"
        )


def estimate_swap(
    vtp: Vtp,
    from_token: PoolToken,
    to_token: PoolToken,
    amount: str,
    config: SimulationConfig | None = None,
) -> SwapResult:
    """Estimate a swap of `amount` from_token into to_token.

    Args:
        vtp: VTP params and status (pa quoted as to-per-from)
        from_token: Token being sold
        to_token: Token being bought
        amount: Human-readable input amount (scientific notation allowed)
        config: Optional discount / pa override

    Returns:
        SwapResult with every intermediate value, or an error result
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    try:
        return _estimate_swap(vtp, from_token, to_token, amount, config)
    except SimulationError as err:
        logger.debug(
            "simulation_failed",
            operation="swap",
            error_kind=err.kind.value,
            detail=str(err),
        )
        return SwapResult.with_error(err.kind, str(err))


def _estimate_swap(
    vtp: Vtp,
    from_token: PoolToken,
    to_token: PoolToken,
    amount: str,
    config: SimulationConfig,
) -> SwapResult:
    side_in = read_token(from_token, "from")
    side_out = read_token(to_token, "to")
    decimals_in = side_in.decimals
    decimals_out = side_out.decimals

    amount_in = read_amount(amount, decimals_in)
    require_reserves(side_in, "from")
    require_reserves(side_out, "to")
    curve = read_curve(vtp, config)
    discount = read_discount(config)

    # 1. Fee in
    fee_in = mul_div(amount_in, side_in.swap_fee_in, FEE_RATE_ONE, Rounding.CEIL)
    real_fee_in = _apply_discount(fee_in, discount)
    real_in = amount_in - real_fee_in
    if real_in < 0:
        raise NegativeResult(f"Input fee {real_fee_in} exceeds amount {amount_in}")

    # 2. Execution price
    real_in_wad = up_to_wad(real_in, decimals_in)
    a0_wad = up_to_wad(side_in.assets, decimals_in)
    a1_wad = up_to_wad(side_out.assets, decimals_out)
    pav = calc_pav(curve.n, curve.pa, a0_wad, a1_wad, real_in_wad)

    swap_get = real_in_wad * pav.pav // 10 ** (2 * WAD_DECIMALS - decimals_out)

    # 3. Fee out
    fee_out = mul_div(swap_get, side_out.swap_fee_out, FEE_RATE_ONE, Rounding.CEIL)
    real_fee_out = _apply_discount(fee_out, discount)
    esti_out = swap_get - real_fee_out
    _check_output(esti_out, side_out.assets, "after swap-out fee")

    # 4. Punishment / reward
    new_alr_in = mul_div(
        side_in.assets + amount_in, WAD, side_in.liability + real_fee_in, Rounding.CEIL
    )
    new_alr_out = mul_div(side_out.assets - esti_out, WAD, side_out.liability + real_fee_out)
    new_ralr = mul_div(new_alr_in, WAD, new_alr_out, Rounding.CEIL)

    adjustment = calc_extra_punishment(curve.p, new_ralr, esti_out)
    if adjustment.is_punishment:
        real_out = esti_out - adjustment.amount
    else:
        real_out = esti_out + adjustment.amount
    if adjustment.amount:
        logger.debug(
            "swap_punishment_applied",
            is_punishment=adjustment.is_punishment,
            amount=adjustment.amount,
            new_ralr=new_ralr,
        )
    _check_output(real_out, side_out.assets, "after punishment")

    # 5. ALR lower bound. Reported on the result, never rejects the swap.
    lps_fee = mul_div(real_fee_out, BPS_ONE - side_out.protocol_fee_rate, BPS_ONE)
    new_asset_out = side_out.assets - real_out
    new_liability_out = side_out.liability + lps_fee
    alr_too_low = new_asset_out * BPS_ONE <= side_out.alr_lower_bound * new_liability_out
    if alr_too_low:
        logger.warning(
            "swap_alr_too_low_after_swap",
            new_asset_out=new_asset_out,
            new_liability_out=new_liability_out,
            alr_lower_bound=side_out.alr_lower_bound,
        )

    # Slippage against the reference price, before any fee or curve effect
    real_out_wad = up_to_wad(real_out, decimals_out)
    amount_in_wad = up_to_wad(amount_in, decimals_in)
    expected_out_wad = amount_in_wad * curve.pa // WAD
    slippage = 0
    if expected_out_wad > 0:
        slippage = WAD - real_out_wad * WAD // expected_out_wad

    ralr_text = format_units(new_ralr, WAD_DECIMALS)
    return SwapResult(
        amount_in=format_units(amount_in, decimals_in),
        fee_by_swap_in=format_units(real_fee_in, decimals_in),
        amount_after_swap_in_fee=format_units(real_in, decimals_in),
        pas=format_units(curve.pa, WAD_DECIMALS),
        pav=format_units(pav.pav, WAD_DECIMALS),
        pav_a=format_units(pav.a, WAD_DECIMALS),
        pav_b=format_units(pav.b, WAD_DECIMALS),
        pav_delta=format_units(pav.delta, PAV_DELTA_DECIMALS),
        pav_t=format_units(pav.t, WAD_DECIMALS),
        swap_get_by_pav=format_units(swap_get, decimals_out),
        fee_by_swap_out=format_units(real_fee_out, decimals_out),
        amount_after_swap_out_fee=format_units(esti_out, decimals_out),
        new_ralr_without_punishment=ralr_text,
        punishment=format_units(adjustment.signed, decimals_out),
        is_punishment=adjustment.is_punishment,
        amount_out=format_units(real_out, decimals_out),
        new_ralr=ralr_text,
        slippage=format_units(slippage, WAD_DECIMALS),
        alr_too_low_after_swap=alr_too_low,
    )
