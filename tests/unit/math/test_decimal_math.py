"""Tests for WAD decimal-string helpers."""

import pytest

from staple_sim.errors import DivisionByZero
from staple_sim.math import decimal_math


class TestArithmetic:
    def test_add(self):
        assert decimal_math.add("1.5", "2.25") == "3.75"

    def test_sub_can_go_negative(self):
        assert decimal_math.sub("1", "2") == "-1"

    def test_mul(self):
        assert decimal_math.mul("1.5", "2") == "3"

    def test_mul_floors_at_wad(self):
        assert decimal_math.mul("0.000000000000000001", "0.5") == "0"

    def test_div_floors(self):
        assert decimal_math.div("1", "3") == "0.333333333333333333"

    def test_div_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            decimal_math.div("1", "0")


class TestComparisons:
    def test_is_zero(self):
        assert decimal_math.is_zero("0.0")
        assert decimal_math.is_zero("1e-19")
        assert not decimal_math.is_zero("0.000000000000000001")

    def test_gt_lt(self):
        assert decimal_math.gt("1.01", "1")
        assert decimal_math.lt("-1", "0")
        assert not decimal_math.gt("1", "1.0")
