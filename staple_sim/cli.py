"""Command-line runner for Staple simulations.

Usage:
    # Estimate a swap described by a JSON scenario
    python -m staple_sim swap scenario.json

    # Read the scenario from stdin, with debug logging
    cat scenario.json | python -m staple_sim -v allocate -

Scenario keys:
    swap:        vtp, fromToken, toToken, amount, config
                 or pair, fromIndex (0 or 1), newPo (optional), amount, config
    allocate:    vtp, token, pairedToken, amount, config
    deallocate:  vtp, token, pairedToken, amount, userAllocation, userShares,
                 totalShares (optional), config
    apr:         vtps [{id, mar, credit, apr}] in percent, totalCredits

Configuration via environment variables:
    STAPLE_SIM_LOG_LEVEL: Log level when -v is not given (default: WARNING)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from staple_sim.allocation import estimate_allocate, estimate_deallocate
from staple_sim.apr import VtpAprInput, find_best_apr
from staple_sim.errors import SimulationError
from staple_sim.models.config import SimulationConfig
from staple_sim.models.pool import PoolToken, Vtp, VtpPair
from staple_sim.scenario import orient_vtp, with_new_po
from staple_sim.swap import estimate_swap

logger = structlog.get_logger()

LOG_LEVEL = os.environ.get("STAPLE_SIM_LOG_LEVEL", "WARNING").upper()

OPERATIONS = ("swap", "allocate", "deallocate", "apr")


def configure_logging(verbose: bool) -> None:
    """Route structlog output to stderr at the requested level."""
    level = logging.DEBUG if verbose else logging.getLevelName(LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def load_scenario(source: str) -> dict[str, Any]:
    """Read a JSON scenario from a path, or from stdin when source is '-'."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(Path(source)) as f:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Scenario must be a JSON object")
    return data


def _text(value: Any) -> str:
    """Scenario amounts may be JSON numbers; the simulators take text."""
    if value is None:
        return "0"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _swap_sides(scenario: dict[str, Any]) -> tuple[Vtp, PoolToken, PoolToken]:
    """Resolve (vtp, from_token, to_token) from either scenario shape.

    A cached `pair` is oriented by `fromIndex` (prices inverted when selling
    token1), then re-based to `newPo` if given. Otherwise `vtp`, `fromToken`
    and `toToken` are used as-is.
    """
    if "pair" in scenario:
        pair = VtpPair.model_validate(scenario["pair"])
        vtp, from_token, to_token = orient_vtp(pair, int(scenario.get("fromIndex", 0)))
    else:
        vtp = Vtp.model_validate(scenario.get("vtp", {}))
        from_token = PoolToken.model_validate(scenario["fromToken"])
        to_token = PoolToken.model_validate(scenario["toToken"])
    new_po = scenario.get("newPo")
    if new_po is not None:
        vtp = with_new_po(vtp, _text(new_po))
    return vtp, from_token, to_token


def run_swap(scenario: dict[str, Any]) -> dict[str, Any]:
    vtp, from_token, to_token = _swap_sides(scenario)
    result = estimate_swap(
        vtp,
        from_token,
        to_token,
        _text(scenario.get("amount")),
        SimulationConfig.from_dict(scenario.get("config")),
    )
    return result.to_dict()


def run_allocate(scenario: dict[str, Any]) -> dict[str, Any]:
    result = estimate_allocate(
        Vtp.model_validate(scenario.get("vtp", {})),
        PoolToken.model_validate(scenario["token"]),
        PoolToken.model_validate(scenario["pairedToken"]),
        _text(scenario.get("amount")),
        SimulationConfig.from_dict(scenario.get("config")),
    )
    return result.to_dict()


def run_deallocate(scenario: dict[str, Any]) -> dict[str, Any]:
    total_shares = scenario.get("totalShares")
    result = estimate_deallocate(
        Vtp.model_validate(scenario.get("vtp", {})),
        PoolToken.model_validate(scenario["token"]),
        PoolToken.model_validate(scenario["pairedToken"]),
        _text(scenario.get("amount")),
        _text(scenario.get("userAllocation")),
        _text(scenario.get("userShares")),
        None if total_shares is None else _text(total_shares),
        SimulationConfig.from_dict(scenario.get("config")),
    )
    return result.to_dict()


def run_apr(scenario: dict[str, Any]) -> dict[str, Any]:
    hundred = Decimal(100)
    try:
        vtps = [
            VtpAprInput(
                id=int(row.get("id", index)),
                max_allocate_rate=Decimal(_text(row.get("mar"))) / hundred,
                credit=Decimal(_text(row.get("credit"))),
                max_apr=Decimal(_text(row.get("apr"))) / hundred,
            )
            for index, row in enumerate(scenario.get("vtps", []))
        ]
        total_credits = Decimal(_text(scenario.get("totalCredits")))
    except InvalidOperation as err:
        raise ValueError("APR scenario contains a malformed number") from err
    return find_best_apr(vtps, total_credits).to_dict()


RUNNERS = {
    "swap": run_swap,
    "allocate": run_allocate,
    "deallocate": run_deallocate,
    "apr": run_apr,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staple-sim",
        description="Offline Staple swap / allocate / deallocate simulator",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging of intermediate values",
    )
    subparsers = parser.add_subparsers(dest="operation", required=True)
    for operation in OPERATIONS:
        sub = subparsers.add_parser(operation, help=f"Run a {operation} scenario")
        sub.add_argument("scenario", type=str, help="Scenario JSON file, or '-' for stdin")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        scenario = load_scenario(args.scenario)
        output = RUNNERS[args.operation](scenario)
    except (OSError, ValueError, KeyError, ValidationError, SimulationError) as err:
        # json.JSONDecodeError and pydantic's ValidationError are ValueErrors
        logger.error("scenario_failed", operation=args.operation, error=str(err))
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 1 if "error" in output else 0
