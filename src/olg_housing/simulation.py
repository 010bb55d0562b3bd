"""
End-to-end evaluation of the housing model.

`simulate` is the single entry point used by callers: it validates the
configuration, draws the cross-section once, solves the price path and
summarises every reported generation. It has no side effects, so repeated
or concurrent calls never share state.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import polars as pl

from .outcomes import GenerationResult, compute_generation_result
from .parameters import (
    ModelParameters,
    SolverSettings,
    create_default_model_params,
    create_default_solver_settings,
    validate_model_params,
    validate_solver_settings,
)
from .price_path import PricePathSolution, solve_price_path
from .productivity import sample_productivities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """
    Complete run with its configuration and outcomes.

    Attributes
    ----------
    params : ModelParameters
        The economy
    settings : SolverSettings
        Solver settings
    generations : List[GenerationResult]
        One record per reported generation, in time order
    price_path : PricePathSolution
        Final price path with convergence diagnostics
    """
    params: ModelParameters
    settings: SolverSettings
    generations: List[GenerationResult]
    price_path: PricePathSolution

    @property
    def converged(self) -> bool:
        return self.price_path.converged

    @property
    def max_delta(self) -> float:
        return self.price_path.max_delta

    def to_polars(self) -> pl.DataFrame:
        """One row per generation; see `generation_results_to_dataframe`."""
        from .results import generation_results_to_dataframe

        return generation_results_to_dataframe(self)


def simulate(
    params: Optional[ModelParameters] = None,
    settings: Optional[SolverSettings] = None,
) -> SimulationResult:
    """
    Solve the equilibrium and report each generation's outcome.

    Parameters
    ----------
    params : Optional[ModelParameters]
        The economy (defaults if None)
    settings : Optional[SolverSettings]
        Solver settings (defaults if None)

    Returns
    -------
    SimulationResult
        Generation records and the converged price path

    Raises
    ------
    InvalidConfigurationError
        If the parameters or settings are ill-posed
    """
    if params is None:
        params = create_default_model_params()
    if settings is None:
        settings = create_default_solver_settings()
    validate_model_params(params)
    validate_solver_settings(settings)

    logger.info(
        "Simulating %d households over %d periods", settings.n_households, settings.horizon
    )
    productivities = sample_productivities(settings.n_households, params.sigma)
    solution = solve_price_path(params, settings, productivities)

    generations = [
        compute_generation_result(params, settings, productivities, solution, t, name)
        for t, name in enumerate(settings.generation_names)
    ]

    return SimulationResult(
        params=params,
        settings=settings,
        generations=generations,
        price_path=solution,
    )
