"""Simulation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SimulationConfig:
    """Optional overrides applied to a single simulation call.

    Attributes:
        discount: Fraction in [0, 1] taken off both swap fees, as decimal text
            (e.g. "0.5" halves the fees).
        exclude_swap_fee: Shortcut for discount = 1. Takes precedence over
            discount.
        pa_overwrite: WAD price used instead of the VTP's current pa, for
            what-if scenarios.
    """

    discount: str | None = None
    exclude_swap_fee: bool = False
    pa_overwrite: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SimulationConfig:
        """Build from a camelCase (or snake_case) dict. Unknown keys are ignored."""
        if not data:
            return DEFAULT_SIMULATION_CONFIG

        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        discount = pick("discount")
        pa_overwrite = pick("paOverwrite", "pa_overwrite")
        return cls(
            discount=None if discount is None else str(discount),
            exclude_swap_fee=bool(pick("excludeSwapFee", "exclude_swap_fee")),
            pa_overwrite=None if pa_overwrite is None else str(pa_overwrite),
        )


# Default configuration instance
DEFAULT_SIMULATION_CONFIG = SimulationConfig()
