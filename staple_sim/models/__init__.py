"""Data structures for the Staple simulation engine."""

from staple_sim.models.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from staple_sim.models.pool import (
    PoolToken,
    TokenParams,
    TokenStatus,
    Vtp,
    VtpPair,
    VtpParams,
    VtpStatus,
)
from staple_sim.models.results import AllocateResult, DeallocateResult, SwapResult
from staple_sim.models.types import ChainRate, DecimalText, TokenDecimals

__all__ = [
    # Types
    "ChainRate",
    "DecimalText",
    "TokenDecimals",
    # Pool models
    "Vtp",
    "VtpParams",
    "VtpStatus",
    "VtpPair",
    "PoolToken",
    "TokenParams",
    "TokenStatus",
    # Config
    "SimulationConfig",
    "DEFAULT_SIMULATION_CONFIG",
    # Results
    "SwapResult",
    "AllocateResult",
    "DeallocateResult",
]
