r"""
Equilibrium Price Path

A household's WTP in period t depends on the resale price $P_{t+1}$, and the
clearing price $P_t$ depends on those WTPs, so the whole path
$P_0, \dots, P_{T-1}$ has to be solved jointly. This module finds it by
damped successive substitution:

1. Seed every period with the same heuristic price.
2. For each outer iteration, on a frozen snapshot of the path:
   - the terminal period has no future price to anchor it, so
     $P_{T-1} \leftarrow P_{T-2} (1 + g_A)$ (one step of technology growth);
   - every other period proposes the clearing price $\hat{P}_t$ implied by
     $P_{t+1}$ and moves half-way towards it,
     $P_t \leftarrow (1 - d) P_t + d \hat{P}_t$, with d = 0.5.
3. Stop once the largest price change is below the tolerance, or when the
   iteration budget is exhausted. Running out of iterations is not an error:
   the last path is returned with `converged=False`.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .economy import compute_period_aggregates
from .market_clearing import clear_market, compute_housing_units
from .parameters import ModelParameters, SolverSettings, create_default_solver_settings
from .productivity import sample_productivities
from .reservation_price import solve_willingness_to_pay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricePathSolution:
    """
    Result of the outer fixed-point iteration.

    Attributes
    ----------
    prices : np.ndarray
        Read-only price of every period, t = 0..horizon-1
    iterations : int
        Outer iterations performed
    max_delta : float
        Largest absolute price change in the last iteration
    converged : bool
        Whether max_delta fell below the tolerance within the budget
    delta_history : Tuple[float, ...]
        max_delta of every iteration, in order
    """
    prices: np.ndarray
    iterations: int
    max_delta: float
    converged: bool
    delta_history: Tuple[float, ...]

    @property
    def horizon(self) -> int:
        return int(self.prices.size)


def compute_initial_price_path(
    params: ModelParameters,
    settings: SolverSettings,
) -> np.ndarray:
    r"""Seed path: initial_price_factor * $A_0$ * $N_0$ in every period."""
    seed = settings.initial_price_factor * params.initial_tech * params.initial_pop
    return np.full(settings.horizon, seed, dtype=float)


def compute_period_wtp(
    params: ModelParameters,
    settings: SolverSettings,
    productivities: np.ndarray,
    t: int,
    next_price: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Incomes and WTPs of the cross-section in period t.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (income, wtp), both in the order of `productivities`
    """
    aggregates = compute_period_aggregates(params, t)
    income = aggregates.technology * productivities
    wtp = solve_willingness_to_pay(
        income,
        next_price,
        params.beta,
        owning_bonus=settings.owning_bonus,
        n_steps=settings.bisection_steps,
    )
    return income, np.asarray(wtp)


def propose_period_price(
    params: ModelParameters,
    settings: SolverSettings,
    productivities: np.ndarray,
    t: int,
    next_price: float,
) -> float:
    """
    Clearing price of period t given the resale price `next_price`.

    Parameters
    ----------
    params : ModelParameters
        The economy
    settings : SolverSettings
        Solver settings (bisection steps, owning bonus)
    productivities : np.ndarray
        Relative productivities of the cross-section
    t : int
        Period index
    next_price : float
        Price of period t+1 from the current snapshot

    Returns
    -------
    float
        Uniform clearing price of the period's auction
    """
    aggregates = compute_period_aggregates(params, t)
    _, wtp = compute_period_wtp(params, settings, productivities, t, next_price)
    units = compute_housing_units(
        aggregates.housing_stock, aggregates.population, productivities.size
    )
    return clear_market(wtp, units).price


def solve_price_path(
    params: ModelParameters,
    settings: Optional[SolverSettings] = None,
    productivities: Optional[np.ndarray] = None,
) -> PricePathSolution:
    r"""
    Solve for the equilibrium price of every period.

    Parameters
    ----------
    params : ModelParameters
        The economy (assumed valid)
    settings : Optional[SolverSettings]
        Solver settings (defaults if None)
    productivities : Optional[np.ndarray]
        Cross-section to use; sampled from params.sigma if None

    Returns
    -------
    PricePathSolution
        Final path and convergence diagnostics
    """
    if settings is None:
        settings = create_default_solver_settings()
    if productivities is None:
        productivities = sample_productivities(settings.n_households, params.sigma)

    prices = compute_initial_price_path(params, settings)
    prices.flags.writeable = False
    terminal = settings.horizon - 1

    deltas = []
    converged = False
    for iteration in range(1, settings.max_iterations + 1):
        updated = prices.copy()
        updated[terminal] = prices[terminal - 1] * (1 + params.tech_growth_rate)

        for t in range(terminal):
            proposed = propose_period_price(
                params, settings, productivities, t, prices[t + 1]
            )
            updated[t] = (1 - settings.damping) * prices[t] + settings.damping * proposed

        max_delta = float(np.max(np.abs(updated - prices)))
        deltas.append(max_delta)
        updated.flags.writeable = False
        prices = updated

        logger.debug("Iteration %d: max price change %.6g", iteration, max_delta)
        if max_delta < settings.tolerance:
            converged = True
            break

    if converged:
        logger.info(
            "Price path converged after %d iterations (max change %.6g)",
            len(deltas), deltas[-1],
        )
    else:
        logger.warning(
            "Price path did not converge in %d iterations (max change %.6g, tolerance %g)",
            len(deltas), deltas[-1], settings.tolerance,
        )

    return PricePathSolution(
        prices=prices,
        iterations=len(deltas),
        max_delta=deltas[-1],
        converged=converged,
        delta_history=tuple(deltas),
    )
