"""Pydantic models for VTP and pool-token data.

The shape mirrors the front-end's on-chain data cache, where every VTP and
pool token is a `{params: {...}, status: {...}}` object with camelCase keys.
Extra keys from the cache are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from staple_sim.constants import DEFAULT_TOKEN_DECIMALS
from staple_sim.models.types import ChainRate, DecimalText, TokenDecimals


class VtpParams(BaseModel):
    """Static VTP curve parameters.

    `n` is the curve steepness. `p` is the punishment threshold in 1e-4
    units (1200 == 12%).
    """

    id: int | None = None
    n: int = 0
    p: ChainRate = 0

    model_config = {"populate_by_name": True, "frozen": True}


class VtpStatus(BaseModel):
    """Live VTP prices as human-readable WAD decimals."""

    po: DecimalText = "0"
    pa: DecimalText = "0"

    model_config = {"populate_by_name": True, "frozen": True}


class Vtp(BaseModel):
    """A virtual token pair: curve parameters plus current prices."""

    params: VtpParams = Field(default_factory=VtpParams)
    status: VtpStatus = Field(default_factory=VtpStatus)

    model_config = {"populate_by_name": True, "frozen": True}


class TokenParams(BaseModel):
    """Pool-token parameters in on-chain integer form.

    Attributes:
        decimals: Native token precision (0..36)
        swap_fee_in: Fee charged on the input side, parts-per-million
        swap_fee_out: Fee charged on the output side, parts-per-million
        protocol_fee_rate: Share of swap fees kept by the protocol, 1e-4 units
        max_allocate_rate: Cap on allocation relative to liability, 1e-4 units
        alr_lower_bound: Minimum asset/liability ratio, 1e-4 units (9000 == 0.9)
    """

    asset: str | None = None
    decimals: TokenDecimals = DEFAULT_TOKEN_DECIMALS
    swap_fee_in: ChainRate = Field(default=0, alias="swapFeeIn")
    swap_fee_out: ChainRate = Field(default=0, alias="swapFeeOut")
    protocol_fee_rate: ChainRate = Field(default=0, alias="protocolFeeRate")
    max_allocate_rate: ChainRate = Field(default=0, alias="maxAllocateRate")
    alr_lower_bound: ChainRate = Field(default=0, alias="alrLowerBound")

    model_config = {"populate_by_name": True, "frozen": True}


class TokenStatus(BaseModel):
    """Pool-token balances as human-readable decimals in native precision."""

    assets: DecimalText = "0"
    liability: DecimalText = "0"
    total_shares: DecimalText = Field(default="0", alias="totalShares")

    model_config = {"populate_by_name": True, "frozen": True}


class PoolToken(BaseModel):
    """One side of a VTP."""

    params: TokenParams = Field(default_factory=TokenParams)
    status: TokenStatus = Field(default_factory=TokenStatus)

    model_config = {"populate_by_name": True, "frozen": True}


class VtpPair(BaseModel):
    """A VTP together with both of its pool tokens, as cached by the front-end."""

    params: VtpParams = Field(default_factory=VtpParams)
    status: VtpStatus = Field(default_factory=VtpStatus)
    token0: PoolToken
    token1: PoolToken

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def vtp(self) -> Vtp:
        return Vtp(params=self.params, status=self.status)
