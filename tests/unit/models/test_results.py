"""Tests for simulation result types."""

from staple_sim.errors import SimulationErrorKind
from staple_sim.models.results import AllocateResult, DeallocateResult, SwapResult


class TestResultState:
    def test_valid_result(self):
        result = AllocateResult(fee="1", fee_rate="0.1")
        assert result.is_valid
        assert not result.is_error

    def test_error_result(self):
        result = SwapResult.with_error(SimulationErrorKind.INVALID_AMOUNT, "must be positive")
        assert result.is_error
        assert not result.is_valid
        assert result.amount_out is None

    def test_zero_fee(self):
        result = AllocateResult.zero_fee()
        assert result.fee == "0"
        assert result.fee_rate == "0"


class TestToDict:
    def test_camel_case_keys(self):
        result = DeallocateResult(
            fee="0",
            fee_rate="0",
            earnings="0",
            burn="1",
            total_amount="1",
            normal_part="1",
            pause_part="0",
        )
        assert result.to_dict() == {
            "fee": "0",
            "feeRate": "0",
            "earnings": "0",
            "burn": "1",
            "totalAmount": "1",
            "normalPart": "1",
            "pausePart": "0",
        }

    def test_unset_fields_omitted(self):
        result = SwapResult(amount_out="9.9", is_punishment=False)
        assert result.to_dict() == {"amountOut": "9.9", "isPunishment": False}

    def test_error_shape(self):
        result = DeallocateResult.with_error(SimulationErrorKind.CALCULATION_OVERFLOW, "too much")
        assert result.to_dict() == {"error": "calculation_overflow", "errorDetail": "too much"}
