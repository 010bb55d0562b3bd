r"""
Aggregate State of the Economy

Technology, population and housing stock all grow geometrically from their
initial values:
    $A_t = A_0 (1 + g_A)^t$,  $N_t = N_0 (1 + g_N)^t$,  $H_t = H_0 (1 + g_H)^t$
"""

from dataclasses import dataclass

from .parameters import ModelParameters


@dataclass(frozen=True)
class PeriodAggregates:
    """
    Aggregate quantities of one period.

    Attributes:
        time: Period index t
        technology: Aggregate productivity $A_t$
        population: Population $N_t$
        housing_stock: Housing stock $H_t$
    """

    time: int
    technology: float
    population: float
    housing_stock: float

    @property
    def supply_ratio(self) -> float:
        r"""Houses per household, capped at one: $\min(1, H_t / N_t)$"""
        return min(1.0, self.housing_stock / self.population)


def compute_period_aggregates(params: ModelParameters, t: int) -> PeriodAggregates:
    """Return $A_t$, $N_t$ and $H_t$ for period t."""
    return PeriodAggregates(
        time=t,
        technology=params.initial_tech * (1 + params.tech_growth_rate) ** t,
        population=params.initial_pop * (1 + params.pop_growth_rate) ** t,
        housing_stock=params.initial_housing * (1 + params.housing_growth_rate) ** t,
    )
