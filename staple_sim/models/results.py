"""Simulation result types.

Every public estimate_* function returns one of these frozen dataclasses.
A result either carries the formatted amounts (is_valid) or an error kind
with a human-readable detail (is_error), never both.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from staple_sim.errors import SimulationErrorKind


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class _ResultMixin:
    """Shared success/failure helpers for result dataclasses."""

    error: SimulationErrorKind | None
    error_detail: str | None

    @property
    def is_valid(self) -> bool:
        """True if the simulation succeeded."""
        return self.error is None

    @property
    def is_error(self) -> bool:
        """True if the simulation failed with an error."""
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Render with the front-end's camelCase field names.

        Unset fields are omitted. Failures render as {"error": kind, "errorDetail": ...}.
        """
        if self.error is not None:
            return {"error": self.error.value, "errorDetail": self.error_detail}
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            if f.name in ("error", "error_detail"):
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[_camel(f.name)] = value
        return out


@dataclass(frozen=True)
class SwapResult(_ResultMixin):
    """Result of a swap estimation.

    Token amounts are formatted at the relevant token's native decimals,
    prices and ratios at 18 decimals, and pav_delta at 36 decimals (it is a
    squared WAD quantity).

    Attributes:
        amount_in: Parsed input amount
        fee_by_swap_in: Input-side fee after discount
        amount_after_swap_in_fee: Input left for the curve
        pas: Reference price used (pa, or the configured override)
        pav: Execution price solved from the PAV quadratic
        pav_a, pav_b, pav_delta, pav_t: Quadratic components behind pav
        swap_get_by_pav: Output before the output-side fee
        fee_by_swap_out: Output-side fee after discount
        amount_after_swap_out_fee: Output before punishment/reward
        new_ralr_without_punishment: Relative ALR after the swap
        punishment: Signed adjustment (negative values are rewards)
        is_punishment: True when the adjustment reduced the output
        amount_out: Final output amount
        new_ralr: Relative ALR after the swap
        slippage: 1 - amount_out / (amount_in * pa), as a WAD fraction
        alr_too_low_after_swap: Soft lower-bound flag; never blocks the result
    """

    amount_in: str | None = None
    fee_by_swap_in: str | None = None
    amount_after_swap_in_fee: str | None = None
    pas: str | None = None
    pav: str | None = None
    pav_a: str | None = None
    pav_b: str | None = None
    pav_delta: str | None = None
    pav_t: str | None = None
    swap_get_by_pav: str | None = None
    fee_by_swap_out: str | None = None
    amount_after_swap_out_fee: str | None = None
    new_ralr_without_punishment: str | None = None
    punishment: str | None = None
    is_punishment: bool | None = None
    amount_out: str | None = None
    new_ralr: str | None = None
    slippage: str | None = None
    alr_too_low_after_swap: bool | None = None
    error: SimulationErrorKind | None = None
    error_detail: str | None = None

    @classmethod
    def with_error(cls, error: SimulationErrorKind, detail: str | None = None) -> SwapResult:
        """Create an error result."""
        return cls(error=error, error_detail=detail)


@dataclass(frozen=True)
class AllocateResult(_ResultMixin):
    """Result of an allocation fee estimation."""

    fee: str | None = None
    fee_rate: str | None = None
    error: SimulationErrorKind | None = None
    error_detail: str | None = None

    @classmethod
    def zero_fee(cls) -> AllocateResult:
        """Create a result with zero fee (balanced pools)."""
        return cls(fee="0", fee_rate="0")

    @classmethod
    def with_error(cls, error: SimulationErrorKind, detail: str | None = None) -> AllocateResult:
        """Create an error result."""
        return cls(error=error, error_detail=detail)


@dataclass(frozen=True)
class DeallocateResult(_ResultMixin):
    """Result of a deallocation estimation.

    Attributes:
        fee: Total fee (formula fee plus pause-part fee), native decimals
        fee_rate: fee / total_amount as a WAD fraction
        earnings: Accrued LP earnings withdrawn with the principal
        burn: LP shares burned (18 decimals)
        total_amount: Principal plus earnings
        normal_part: Portion withdrawn while keeping ALR at or above the bound
        pause_part: Remainder charged the flat pause fee
    """

    fee: str | None = None
    fee_rate: str | None = None
    earnings: str | None = None
    burn: str | None = None
    total_amount: str | None = None
    normal_part: str | None = None
    pause_part: str | None = None
    error: SimulationErrorKind | None = None
    error_detail: str | None = None

    @classmethod
    def with_error(cls, error: SimulationErrorKind, detail: str | None = None) -> DeallocateResult:
        """Create an error result."""
        return cls(error=error, error_detail=detail)
