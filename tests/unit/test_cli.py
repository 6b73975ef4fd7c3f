"""Tests for the staple-sim command-line runner."""

import io
import json

import pytest

from staple_sim.cli import build_parser, load_scenario, main

TOKEN = {"params": {"decimals": 18}, "status": {"assets": "1000", "liability": "1000"}}
FEE_TOKEN = {
    "params": {"decimals": 18, "swapFeeOut": 10000},
    "status": {"assets": "1000", "liability": "1000"},
}
VTP = {"params": {"n": 10, "p": 1200}, "status": {"po": "1", "pa": "1"}}


@pytest.fixture
def write_scenario(tmp_path):
    def _write(data) -> str:
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps(data))
        return str(path)

    return _write


class TestParser:
    def test_operation_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_verbose_flag(self):
        args = build_parser().parse_args(["-v", "swap", "s.json"])
        assert args.verbose
        assert args.operation == "swap"
        assert args.scenario == "s.json"


class TestLoadScenario:
    def test_rejects_non_object(self, write_scenario):
        with pytest.raises(ValueError):
            load_scenario(write_scenario([1, 2]))


class TestMain:
    def test_swap(self, write_scenario, capsys):
        path = write_scenario({"vtp": VTP, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": 10})

        assert main(["swap", path]) == 0
        output = json.loads(capsys.readouterr().out)
        assert 9.8 < float(output["amountOut"]) < 9.9
        assert output["isPunishment"] is False

    def test_swap_from_stdin(self, monkeypatch, capsys):
        scenario = {"vtp": VTP, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": "10"}
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(scenario)))

        assert main(["swap", "-"]) == 0
        assert "amountOut" in json.loads(capsys.readouterr().out)

    def test_simulation_error_exits_one(self, write_scenario, capsys):
        path = write_scenario({"vtp": VTP, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": "0"})

        assert main(["swap", path]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["error"] == "invalid_amount"

    def test_allocate_with_config(self, write_scenario, capsys):
        token = {"params": {}, "status": {"assets": "1100", "liability": "1000"}}
        paired = {
            "params": {"alrLowerBound": 9000},
            "status": {"assets": "1000", "liability": "1000"},
        }
        path = write_scenario(
            {"vtp": VTP, "token": token, "pairedToken": paired, "amount": "10", "config": {}}
        )

        assert main(["allocate", path]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output == {"fee": "0.016528925619834711", "feeRate": "0.001652892561983471"}

    def test_deallocate(self, write_scenario, capsys):
        path = write_scenario(
            {
                "vtp": VTP,
                "token": TOKEN,
                "pairedToken": TOKEN,
                "amount": "10",
                "userAllocation": "10",
                "userShares": "10",
            }
        )

        assert main(["deallocate", path]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["fee"] == "0"
        assert output["burn"] == "10"

    def test_apr_inputs_in_percent(self, write_scenario, capsys):
        path = write_scenario(
            {
                "vtps": [
                    {"id": 1, "mar": 92, "credit": 26, "apr": 10},
                    {"id": 2, "mar": 92, "credit": 31, "apr": 8},
                ],
                "totalCredits": 60,
            }
        )

        assert main(["apr", path]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["bestApr"] == "0.1656"
        assert [a["id"] for a in output["allocations"]] == [1, 2]

    def test_missing_file(self, tmp_path, capsys):
        assert main(["swap", str(tmp_path / "missing.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main(["swap", str(path)]) == 1

    def test_missing_key(self, write_scenario, capsys):
        path = write_scenario({"vtp": VTP, "fromToken": TOKEN, "amount": "10"})
        assert main(["swap", path]) == 1

    def test_invalid_model(self, write_scenario, capsys):
        bad_token = {"params": {"decimals": 99}, "status": {}}
        path = write_scenario({"vtp": VTP, "fromToken": bad_token, "toToken": TOKEN, "amount": "1"})
        assert main(["swap", path]) == 1


class TestSwapFromPair:
    @pytest.fixture
    def run(self, write_scenario, capsys):
        def _run(scenario) -> tuple[int, dict]:
            code = main(["swap", write_scenario(scenario)])
            return code, json.loads(capsys.readouterr().out or "{}")

        return _run

    def test_sell_token1_inverts_prices(self, run):
        pair = {**VTP, "status": {"po": "2", "pa": "2"}, "token0": TOKEN, "token1": FEE_TOKEN}
        inverted = {**VTP, "status": {"po": "0.5", "pa": "0.5"}}

        code, from_pair = run({"pair": pair, "fromIndex": 1, "amount": "10"})
        assert code == 0
        _, direct = run(
            {"vtp": inverted, "fromToken": FEE_TOKEN, "toToken": TOKEN, "amount": "10"}
        )
        assert from_pair == direct

    def test_sell_token0_by_default(self, run):
        pair = {**VTP, "token0": TOKEN, "token1": FEE_TOKEN}

        _, from_pair = run({"pair": pair, "amount": "10"})
        _, direct = run({"vtp": VTP, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": "10"})
        assert from_pair == direct

    def test_new_po_rebases_pa(self, run):
        pair = {**VTP, "token0": TOKEN, "token1": FEE_TOKEN}
        rebased = {**VTP, "status": {"po": "2", "pa": "2"}}

        code, from_pair = run({"pair": pair, "fromIndex": 0, "newPo": 2, "amount": "10"})
        assert code == 0
        _, direct = run(
            {"vtp": rebased, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": "10"}
        )
        assert from_pair == direct

    def test_new_po_applies_to_plain_vtp(self, run):
        scenario = {"vtp": VTP, "fromToken": TOKEN, "toToken": FEE_TOKEN, "amount": "10"}

        _, unchanged = run(scenario)
        _, rebased = run({**scenario, "newPo": "2"})
        assert rebased != unchanged

    def test_invalid_from_index(self, write_scenario, capsys):
        pair = {**VTP, "token0": TOKEN, "token1": FEE_TOKEN}
        path = write_scenario({"pair": pair, "fromIndex": 2, "amount": "10"})

        assert main(["swap", path]) == 1
        assert "from_index" in capsys.readouterr().err
