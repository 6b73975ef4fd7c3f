"""Staple swap calculator - offline fixed-point simulation engine."""

from staple_sim.allocation import estimate_allocate, estimate_deallocate
from staple_sim.errors import SimulationError, SimulationErrorKind
from staple_sim.models import (
    AllocateResult,
    DeallocateResult,
    PoolToken,
    SimulationConfig,
    SwapResult,
    Vtp,
)
from staple_sim.swap import estimate_swap

__version__ = "0.1.0"
__all__ = [
    "estimate_swap",
    "estimate_allocate",
    "estimate_deallocate",
    "Vtp",
    "PoolToken",
    "SimulationConfig",
    "SwapResult",
    "AllocateResult",
    "DeallocateResult",
    "SimulationError",
    "SimulationErrorKind",
    "__version__",
]
