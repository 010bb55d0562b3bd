"""Command-line entry point: solve one economy and print its generations.

Values are resolved with priority: CLI flag > config file > scenario preset.
"""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import polars as pl

from .parameters import (
    InvalidConfigurationError,
    MODEL_KEYS,
    load_config,
    model_params_from_dict,
    solver_settings_from_dict,
)
from .results import generation_results_to_dataframe, household_distribution_to_dataframe
from .scenarios import SCENARIOS, create_scenario_params
from .simulation import simulate

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = (
    "name",
    "ownership_rate",
    "house_price",
    "price_to_income",
    "income_mean",
    "avg_lifetime_utility",
    "avg_utility_owners",
    "avg_utility_renters",
)

# CLI flag → solver setting
SOLVER_FLAGS = {
    "households": "n_households",
    "horizon": "horizon",
    "max_iterations": "max_iterations",
    "tolerance": "tolerance",
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="olg-housing",
        description="Solve the housing auction equilibrium of an OLG economy.",
    )
    parser.add_argument("--config", type=Path, default=None, help="TOML file with [model] and [solver] tables")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="baseline", help="preset economy (default: baseline)")
    parser.add_argument("--pop-growth-rate", type=float, default=None, help="population growth per generation")
    parser.add_argument("--tech-growth-rate", type=float, default=None, help="technology growth per generation")
    parser.add_argument("--housing-growth-rate", type=float, default=None, help="housing stock growth per generation")
    parser.add_argument("--sigma", type=float, default=None, help="standard deviation of log productivity")
    parser.add_argument("--beta", type=float, default=None, help="discount factor in (0, 1)")
    parser.add_argument("--initial-tech", type=float, default=None, help="initial technology A_0")
    parser.add_argument("--initial-pop", type=float, default=None, help="initial population N_0")
    parser.add_argument("--initial-housing", type=float, default=None, help="initial housing stock H_0")
    parser.add_argument("--households", type=int, default=None, help="cross-section size (default: 1000)")
    parser.add_argument("--horizon", type=int, default=None, help="simulated periods (default: 10)")
    parser.add_argument("--max-iterations", type=int, default=None, help="outer iteration budget (default: 20)")
    parser.add_argument("--tolerance", type=float, default=None, help="convergence tolerance (default: 0.01)")
    parser.add_argument("--output", type=Path, default=None, help="write generation results to this CSV")
    parser.add_argument("--households-output", type=Path, default=None, help="write per-household income/tenure to this CSV")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level (default: WARNING)")
    return parser


def resolve_model(args: argparse.Namespace, config: dict) -> dict:
    """Resolve every model parameter from flags, config and scenario preset."""
    preset = asdict(create_scenario_params(args.scenario))
    resolved = {}
    for key in MODEL_KEYS:
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, preset[key])
    # Unknown config keys are passed through so that they get rejected
    resolved.update({k: v for k, v in config.items() if k not in MODEL_KEYS})
    return resolved


def resolve_solver(args: argparse.Namespace, config: dict) -> dict:
    resolved = dict(config)
    for flag, key in SOLVER_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None:
            resolved[key] = value
    return resolved


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else {"model": {}, "solver": {}}
        params = model_params_from_dict(resolve_model(args, config["model"]))
        settings = solver_settings_from_dict(resolve_solver(args, config["solver"]))
        result = simulate(params, settings)
    except (InvalidConfigurationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    df = generation_results_to_dataframe(result)
    with pl.Config(tbl_rows=-1, tbl_cols=-1):
        print(df.select(SUMMARY_COLUMNS))
    if not result.converged:
        print(
            f"warning: price path did not converge after {result.price_path.iterations} "
            f"iterations (max change {result.max_delta:.6g})",
            file=sys.stderr,
        )

    if args.output:
        df.write_csv(args.output)
        logger.info("Generation results saved to %s", args.output)
    if args.households_output:
        household_distribution_to_dataframe(result).write_csv(args.households_output)
        logger.info("Household distribution saved to %s", args.households_output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
