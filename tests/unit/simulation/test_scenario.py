"""Tests for scenario preparation helpers."""

import pytest

from staple_sim.errors import ParseError
from staple_sim.models.pool import VtpPair
from staple_sim.scenario import invert_price, orient_vtp, rebase_pa, with_new_po
from tests.helpers import make_vtp


@pytest.fixture
def pair() -> VtpPair:
    return VtpPair.model_validate(
        {
            "params": {"id": 1, "n": 10, "p": 1200},
            "status": {"po": "2", "pa": "4"},
            "token0": {
                "params": {"decimals": 6},
                "status": {"assets": "1000", "liability": "1000"},
            },
            "token1": {
                "params": {"decimals": 18},
                "status": {"assets": "500", "liability": "500"},
            },
        }
    )


class TestInvertPrice:
    @pytest.mark.parametrize(
        "price,expected",
        [("2", "0.5"), ("4", "0.25"), ("3", "0.333333333333333333"), ("0", "0"), ("0.5", "2")],
    )
    def test_values(self, price, expected):
        assert invert_price(price) == expected

    def test_malformed(self):
        with pytest.raises(ParseError):
            invert_price("x")


class TestOrientVtp:
    def test_selling_token0_keeps_prices(self, pair):
        vtp, from_token, to_token = orient_vtp(pair, 0)
        assert vtp.status.pa == "4"
        assert from_token.params.decimals == 6
        assert to_token.params.decimals == 18

    def test_selling_token1_inverts_prices(self, pair):
        vtp, from_token, to_token = orient_vtp(pair, 1)
        assert vtp.status.pa == "0.25"
        assert vtp.status.po == "0.5"
        assert vtp.params.n == 10
        assert from_token.params.decimals == 18
        assert to_token.params.decimals == 6

    def test_invalid_index(self, pair):
        with pytest.raises(ValueError):
            orient_vtp(pair, 2)


class TestRebasePa:
    def test_follows_oracle(self):
        assert rebase_pa("1", "2", "3") == "1.5"

    def test_zero_oracle_price(self):
        assert rebase_pa("1", "0", "3") == "0"

    def test_with_new_po(self):
        vtp = with_new_po(make_vtp(pa="0.98", po="1"), "1.1")
        assert vtp.status.po == "1.1"
        assert vtp.status.pa == "1.078"
        assert vtp.params.n == 10
