r"""
Generation Outcomes

Once the price path has converged, each reported period is recomputed from
scratch: incomes, WTPs against the converged $P_{t+1}$, the auction, and the
realised consumption and lifetime utility of every household.

- Owners buy at the period's clearing price $P_t$ and sell at $P_{t+1}$:
    $c_y = y - P_t - s$,  $c_o = s + P_{t+1}$,
    $u = \ln c_y + \beta \ln c_o + \alpha$
- Renters have no housing cash flows:
    $c_y = y - s$,  $c_o = s$,  $u = \ln c_y + \beta \ln c_o$

The WTPs computed inside the solver were priced against a not-yet-converged
path, so none of them is reused here.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .economy import compute_period_aggregates
from .market_clearing import clear_market, compute_housing_units
from .parameters import ModelParameters, SolverSettings
from .price_path import PricePathSolution, compute_period_wtp
from .reservation_price import (
    compute_owning_savings,
    compute_renting_savings,
    compute_renting_utility,
)

QUARTILES = (0.25, 0.50, 0.75)


@dataclass(frozen=True)
class HouseholdDistribution:
    """
    Per-household income and tenure of one generation.

    Attributes:
        income: Income when young of every household (read-only)
        owns: Whether each household owns (read-only)
    """

    income: np.ndarray
    owns: np.ndarray

    def __len__(self) -> int:
        return int(self.income.size)


@dataclass(frozen=True)
class HouseholdOutcomes:
    r"""
    Realised allocation of one period, one entry per household.

    Attributes
    ----------
    income : np.ndarray
        Income when young
    wtp : np.ndarray
        Willingness-to-pay against the converged $P_{t+1}$
    owns : np.ndarray
        Ownership flags
    consumption_young : np.ndarray
        Consumption when young
    consumption_old : np.ndarray
        Consumption when old
    utility : np.ndarray
        Realised lifetime utility
    price : float
        Clearing price paid by owners
    resale_price : float
        Price received by owners when old
    """
    income: np.ndarray
    wtp: np.ndarray
    owns: np.ndarray
    consumption_young: np.ndarray
    consumption_old: np.ndarray
    utility: np.ndarray
    price: float
    resale_price: float


@dataclass(frozen=True)
class GenerationResult:
    r"""
    Summary of one generation's outcome.

    Tenure-split utilities are None when the group is empty (everybody owns
    or nobody does).

    Attributes
    ----------
    name : str
        Generation label
    time : int
        Period in which the generation is young
    ownership_rate : float
        Share of the cross-section that owns
    price_to_income : float
        Clearing price over mean income
    house_price : float
        Clearing price paid when young
    resale_price : float
        Price received when old, $P_{t+1}$
    income_mean, income_p25, income_median, income_p75 : float
        Income statistics
    avg_lifetime_utility, utility_p25, utility_median, utility_p75 : float
        Lifetime utility statistics
    avg_utility_owners : Optional[float]
        Mean utility of owners
    avg_utility_renters : Optional[float]
        Mean utility of renters
    avg_consumption_young, avg_consumption_old : float
        Mean consumption by life stage
    population, housing_stock, technology : float
        $N_t$, $H_t$ and $A_t$
    n_owners : int
        Number of owners in the cross-section
    households : HouseholdDistribution
        Per-household (income, owns) pairs
    """
    name: str
    time: int
    ownership_rate: float
    price_to_income: float
    house_price: float
    resale_price: float
    income_mean: float
    income_p25: float
    income_median: float
    income_p75: float
    avg_lifetime_utility: float
    utility_p25: float
    utility_median: float
    utility_p75: float
    avg_utility_owners: Optional[float]
    avg_utility_renters: Optional[float]
    avg_consumption_young: float
    avg_consumption_old: float
    population: float
    housing_stock: float
    technology: float
    n_owners: int
    households: HouseholdDistribution


def nearest_rank_percentile(sorted_values: np.ndarray, q: float) -> float:
    """
    Percentile of an ascending array without interpolation.

    Takes the element at index floor(q * n), clamped to the array.
    """
    n = len(sorted_values)
    idx = max(0, min(int(np.floor(q * n)), n - 1))
    return float(sorted_values[idx])


def safe_mean(values: np.ndarray) -> Optional[float]:
    """Mean of `values`, or None if there are none."""
    if len(values) == 0:
        return None
    return float(np.mean(values))


def compute_household_outcomes(
    params: ModelParameters,
    settings: SolverSettings,
    productivities: np.ndarray,
    t: int,
    prices: np.ndarray,
) -> HouseholdOutcomes:
    """
    Recompute the allocation of period t at the converged prices.

    Parameters
    ----------
    params : ModelParameters
        The economy
    settings : SolverSettings
        Solver settings
    productivities : np.ndarray
        Relative productivities of the cross-section
    t : int
        Period index (must have a successor in `prices`)
    prices : np.ndarray
        Converged price path

    Returns
    -------
    HouseholdOutcomes
        Per-household allocation, consumption and utility
    """
    aggregates = compute_period_aggregates(params, t)
    resale_price = float(prices[t + 1])
    income, wtp = compute_period_wtp(params, settings, productivities, t, resale_price)

    units = compute_housing_units(
        aggregates.housing_stock, aggregates.population, productivities.size
    )
    clearing = clear_market(wtp, units)
    price = clearing.price
    owns = clearing.owns
    beta = params.beta

    owner_savings = np.asarray(compute_owning_savings(income, price, resale_price, beta))
    renter_savings = np.asarray(compute_renting_savings(income, beta))

    consumption_young = np.where(owns, income - price - owner_savings, income - renter_savings)
    consumption_old = np.where(owns, owner_savings + resale_price, renter_savings)

    with np.errstate(divide="ignore", invalid="ignore"):
        owner_utility = (
            np.log(consumption_young)
            + beta * np.log(consumption_old)
            + settings.owning_bonus
        )
    renter_utility = np.asarray(compute_renting_utility(income, beta))
    utility = np.where(owns, owner_utility, renter_utility)

    for array in (income, wtp, consumption_young, consumption_old, utility):
        array.flags.writeable = False

    return HouseholdOutcomes(
        income=income,
        wtp=wtp,
        owns=owns,
        consumption_young=consumption_young,
        consumption_old=consumption_old,
        utility=utility,
        price=price,
        resale_price=resale_price,
    )


def compute_generation_result(
    params: ModelParameters,
    settings: SolverSettings,
    productivities: np.ndarray,
    solution: PricePathSolution,
    t: int,
    name: Optional[str] = None,
) -> GenerationResult:
    r"""
    Summarise the generation that is young in period t.

    Percentiles are nearest-rank on the ascending sort of realised utility
    (and, separately, income).

    Parameters
    ----------
    params : ModelParameters
        The economy
    settings : SolverSettings
        Solver settings
    productivities : np.ndarray
        Relative productivities of the cross-section
    solution : PricePathSolution
        Converged price path
    t : int
        Period index
    name : Optional[str]
        Generation label (defaults to settings.generation_names[t])

    Returns
    -------
    GenerationResult
        Summary statistics and the (income, owns) distribution
    """
    if name is None:
        name = settings.generation_names[t]
    aggregates = compute_period_aggregates(params, t)
    outcomes = compute_household_outcomes(
        params, settings, productivities, t, solution.prices
    )

    n = len(outcomes.income)
    n_owners = int(np.count_nonzero(outcomes.owns))
    income_mean = float(np.mean(outcomes.income))
    sorted_income = np.sort(outcomes.income)
    sorted_utility = np.sort(outcomes.utility)
    p25, p50, p75 = QUARTILES

    return GenerationResult(
        name=name,
        time=t,
        ownership_rate=n_owners / n,
        price_to_income=outcomes.price / income_mean,
        house_price=outcomes.price,
        resale_price=outcomes.resale_price,
        income_mean=income_mean,
        income_p25=nearest_rank_percentile(sorted_income, p25),
        income_median=nearest_rank_percentile(sorted_income, p50),
        income_p75=nearest_rank_percentile(sorted_income, p75),
        avg_lifetime_utility=float(np.mean(outcomes.utility)),
        utility_p25=nearest_rank_percentile(sorted_utility, p25),
        utility_median=nearest_rank_percentile(sorted_utility, p50),
        utility_p75=nearest_rank_percentile(sorted_utility, p75),
        avg_utility_owners=safe_mean(outcomes.utility[outcomes.owns]),
        avg_utility_renters=safe_mean(outcomes.utility[~outcomes.owns]),
        avg_consumption_young=float(np.mean(outcomes.consumption_young)),
        avg_consumption_old=float(np.mean(outcomes.consumption_old)),
        population=aggregates.population,
        housing_stock=aggregates.housing_stock,
        technology=aggregates.technology,
        n_owners=n_owners,
        households=HouseholdDistribution(income=outcomes.income, owns=outcomes.owns),
    )
