"""
olg_housing - housing auction equilibrium in an overlapping-generations economy
"""

from .parameters import (
    InvalidConfigurationError,
    ModelParameters,
    SolverSettings,
    create_default_model_params,
    create_default_solver_settings,
    validate_model_params,
    validate_solver_settings,
    model_params_from_dict,
    solver_settings_from_dict,
    load_config,
)
from .economy import PeriodAggregates, compute_period_aggregates
from .productivity import probit, quantile_grid, sample_productivities
from .reservation_price import (
    compute_renting_savings,
    compute_renting_utility,
    compute_owning_savings,
    compute_owning_utility,
    solve_willingness_to_pay,
)
from .market_clearing import MarketClearing, compute_housing_units, clear_market
from .price_path import (
    PricePathSolution,
    compute_initial_price_path,
    compute_period_wtp,
    propose_period_price,
    solve_price_path,
)
from .outcomes import (
    HouseholdDistribution,
    HouseholdOutcomes,
    GenerationResult,
    nearest_rank_percentile,
    safe_mean,
    compute_household_outcomes,
    compute_generation_result,
)
from .simulation import SimulationResult, simulate
from .results import generation_results_to_dataframe, household_distribution_to_dataframe
from .scenarios import (
    SCENARIOS,
    create_scenario_params,
    run_scenarios,
    scenarios_to_dataframe,
)


__all__ = [
    # Parameters
    "InvalidConfigurationError",
    "ModelParameters",
    "SolverSettings",
    "create_default_model_params",
    "create_default_solver_settings",
    "validate_model_params",
    "validate_solver_settings",
    "model_params_from_dict",
    "solver_settings_from_dict",
    "load_config",
    # Economy
    "PeriodAggregates",
    "compute_period_aggregates",
    # Productivity
    "probit",
    "quantile_grid",
    "sample_productivities",
    # Reservation price
    "compute_renting_savings",
    "compute_renting_utility",
    "compute_owning_savings",
    "compute_owning_utility",
    "solve_willingness_to_pay",
    # Market clearing
    "MarketClearing",
    "compute_housing_units",
    "clear_market",
    # Price path
    "PricePathSolution",
    "compute_initial_price_path",
    "compute_period_wtp",
    "propose_period_price",
    "solve_price_path",
    # Outcomes
    "HouseholdDistribution",
    "HouseholdOutcomes",
    "GenerationResult",
    "nearest_rank_percentile",
    "safe_mean",
    "compute_household_outcomes",
    "compute_generation_result",
    # Simulation
    "SimulationResult",
    "simulate",
    # Results
    "generation_results_to_dataframe",
    "household_distribution_to_dataframe",
    # Scenarios
    "SCENARIOS",
    "create_scenario_params",
    "run_scenarios",
    "scenarios_to_dataframe",
]
