"""Scenario helpers for preparing simulator inputs.

VTP prices are stored as token1-per-token0. A swap simulation wants pa
quoted as to-per-from, so selling token1 requires inverting the prices.
"""

from __future__ import annotations

from staple_sim.constants import WAD_DECIMALS
from staple_sim.math import decimal_math
from staple_sim.math.fixed_point import format_units, mul_div, parse_units
from staple_sim.models.pool import PoolToken, Vtp, VtpPair, VtpStatus


def invert_price(price: str) -> str:
    """1 / price at WAD precision (floor). Zero stays zero.

    Raises:
        ParseError: If price is malformed
    """
    if decimal_math.is_zero(price):
        return "0"
    return decimal_math.div("1", price)


def orient_vtp(pair: VtpPair, from_index: int) -> tuple[Vtp, PoolToken, PoolToken]:
    """Return (vtp, from_token, to_token) for a swap out of token `from_index`.

    Args:
        pair: VTP with both tokens
        from_index: 0 to sell token0, 1 to sell token1

    Raises:
        ValueError: If from_index is not 0 or 1
        ParseError: If a price is malformed
    """
    if from_index == 0:
        return pair.vtp, pair.token0, pair.token1
    if from_index != 1:
        raise ValueError(f"from_index must be 0 or 1, got {from_index}")

    status = VtpStatus(po=invert_price(pair.status.po), pa=invert_price(pair.status.pa))
    return Vtp(params=pair.params, status=status), pair.token1, pair.token0


def rebase_pa(pa: str, po: str, new_po: str) -> str:
    """Move pa along with a change in the oracle price: pa * new_po / po.

    Returns "0" when po is zero.

    Raises:
        ParseError: If any price is malformed
    """
    po_wad = parse_units(po, WAD_DECIMALS)
    if po_wad == 0:
        return "0"
    pa_wad = parse_units(pa, WAD_DECIMALS)
    new_po_wad = parse_units(new_po, WAD_DECIMALS)
    return format_units(mul_div(pa_wad, new_po_wad, po_wad), WAD_DECIMALS)


def with_new_po(vtp: Vtp, new_po: str) -> Vtp:
    """Copy of `vtp` with po replaced and pa rebased to match."""
    status = VtpStatus(po=new_po, pa=rebase_pa(vtp.status.pa, vtp.status.po, new_po))
    return Vtp(params=vtp.params, status=status)


__all__ = ["invert_price", "orient_vtp", "rebase_pa", "with_new_po"]
