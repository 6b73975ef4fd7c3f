"""Best-APR combination across VTPs.

An LP with a fixed budget of credits picks a subset of VTPs to allocate to.
A single VTP receives the whole allocation and earns its max APR; in a
larger subset each VTP is capped at its max allocate rate (MAR), so the
subset earns sum(apr_i * mar_i). Every non-empty subset within the credit
budget is scored and the best one wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import structlog

from staple_sim.errors import InvalidAmount

logger = structlog.get_logger()

# The calculator page allows at most 10 VTP rows (1023 subsets)
MAX_VTPS = 10


@dataclass(frozen=True)
class VtpAprInput:
    """One candidate VTP.

    Attributes:
        id: Caller-chosen identifier, echoed back in the allocations
        max_allocate_rate: MAR as a fraction (0.92 for 92%)
        credit: Credits consumed by allocating to this VTP
        max_apr: APR at full allocation, as a fraction
    """

    id: int
    max_allocate_rate: Decimal
    credit: Decimal
    max_apr: Decimal


@dataclass(frozen=True)
class AprAllocation:
    """Allocation to one VTP in the winning combination."""

    id: int
    allocate_rate: Decimal
    apr_contribution: Decimal


@dataclass(frozen=True)
class AprResult:
    """Best combination found.

    best_apr is 0 and allocations is empty when no subset fits the budget.
    """

    best_apr: Decimal
    allocations: tuple[AprAllocation, ...]
    combinations_total: int
    combinations_valid: int

    def to_dict(self) -> dict[str, object]:
        return {
            "bestApr": str(self.best_apr),
            "allocations": [
                {
                    "id": a.id,
                    "allocateRate": str(a.allocate_rate),
                    "aprContribution": str(a.apr_contribution),
                }
                for a in self.allocations
            ],
            "combinationsTotal": self.combinations_total,
            "combinationsValid": self.combinations_valid,
        }


def all_combinations(items: Sequence[VtpAprInput]) -> list[tuple[VtpAprInput, ...]]:
    """Every non-empty subset, in ascending bitmask order."""
    count = len(items)
    return [
        tuple(items[i] for i in range(count) if mask & (1 << i))
        for mask in range(1, 1 << count)
    ]


def combination_apr(combination: Sequence[VtpAprInput]) -> Decimal:
    if len(combination) == 1:
        return combination[0].max_apr
    return sum((v.max_apr * v.max_allocate_rate for v in combination), Decimal(0))


def find_best_apr(vtps: Sequence[VtpAprInput], total_credits: Decimal) -> AprResult:
    """Pick the subset of VTPs with the highest APR within the credit budget.

    Ties keep the earlier subset (lower bitmask).

    Raises:
        InvalidAmount: If more than MAX_VTPS are given or any input is negative
    """
    if len(vtps) > MAX_VTPS:
        raise InvalidAmount(f"At most {MAX_VTPS} VTPs supported, got {len(vtps)}")
    if total_credits < 0:
        raise InvalidAmount(f"Total credits cannot be negative: {total_credits}")
    for vtp in vtps:
        if vtp.max_allocate_rate < 0 or vtp.credit < 0 or vtp.max_apr < 0:
            raise InvalidAmount(f"VTP {vtp.id} has a negative input")

    combinations = all_combinations(vtps)
    valid = [c for c in combinations if sum((v.credit for v in c), Decimal(0)) <= total_credits]
    logger.debug(
        "apr_combinations_generated", total=len(combinations), valid=len(valid)
    )

    best_apr = Decimal(0)
    best: tuple[VtpAprInput, ...] = ()
    for combination in valid:
        apr = combination_apr(combination)
        if apr > best_apr:
            best_apr = apr
            best = combination

    single = len(best) == 1
    allocations = tuple(
        AprAllocation(
            id=v.id,
            allocate_rate=Decimal(1) if single else v.max_allocate_rate,
            apr_contribution=v.max_apr if single else v.max_apr * v.max_allocate_rate,
        )
        for v in best
    )
    return AprResult(
        best_apr=best_apr,
        allocations=allocations,
        combinations_total=len(combinations),
        combinations_valid=len(valid),
    )
