"""Factory functions for creating test pool objects.

Usage:
    from tests.helpers import make_token, make_vtp

    token = make_token(assets="1100", liability="1000")
    vtp = make_vtp(pa="1.0")
"""

from staple_sim.models.pool import PoolToken, Vtp
from tests.helpers.constants import DEFAULT_N, DEFAULT_P


def make_token(
    assets: str = "1000",
    liability: str = "1000",
    decimals: int = 18,
    swap_fee_in: int = 0,
    swap_fee_out: int = 0,
    protocol_fee_rate: int = 0,
    alr_lower_bound: int = 0,
    total_shares: str = "0",
) -> PoolToken:
    """Create a pool token with sensible defaults (balanced 1000/1000, no fees)."""
    return PoolToken.model_validate(
        {
            "params": {
                "decimals": decimals,
                "swapFeeIn": swap_fee_in,
                "swapFeeOut": swap_fee_out,
                "protocolFeeRate": protocol_fee_rate,
                "alrLowerBound": alr_lower_bound,
            },
            "status": {
                "assets": assets,
                "liability": liability,
                "totalShares": total_shares,
            },
        }
    )


def make_vtp(n: int = DEFAULT_N, p: int = DEFAULT_P, pa: str = "1.0", po: str = "1.0") -> Vtp:
    """Create a VTP with n=10, p=12% and pa=po=1 by default."""
    return Vtp.model_validate({"params": {"n": n, "p": p}, "status": {"po": po, "pa": pa}})
