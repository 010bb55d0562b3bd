r"""
Tabular export of simulation results.

Two views are provided:
- one row per generation with all summary statistics
- one row per household per generation with its income and tenure, which
  is what an income/ownership histogram needs
"""

from typing import Dict, List

import polars as pl

from .outcomes import GenerationResult
from .simulation import SimulationResult

GENERATION_COLUMNS = (
    "name",
    "time",
    "ownership_rate",
    "price_to_income",
    "house_price",
    "resale_price",
    "income_mean",
    "income_p25",
    "income_median",
    "income_p75",
    "avg_lifetime_utility",
    "utility_p25",
    "utility_median",
    "utility_p75",
    "avg_utility_owners",
    "avg_utility_renters",
    "avg_consumption_young",
    "avg_consumption_old",
    "population",
    "housing_stock",
    "technology",
    "n_owners",
)


def generation_results_to_dataframe(result: SimulationResult) -> pl.DataFrame:
    r"""
    Convert a SimulationResult to a Polars DataFrame.

    Parameters
    ----------
    result : SimulationResult
        The simulation to convert

    Returns
    -------
    pl.DataFrame
        One row per generation with the columns of GENERATION_COLUMNS plus
        the run's convergence diagnostics (converged, max_delta, iterations).
        Not-applicable tenure means are null.
    """
    generations: List[GenerationResult] = result.generations
    data: Dict[str, list] = {
        column: [getattr(g, column) for g in generations]
        for column in GENERATION_COLUMNS
    }

    df = pl.DataFrame(data, strict=False)
    return df.with_columns(
        pl.col("avg_utility_owners", "avg_utility_renters").cast(pl.Float64),
        pl.lit(result.converged).alias("converged"),
        pl.lit(result.max_delta).alias("max_delta"),
        pl.lit(result.price_path.iterations).alias("iterations"),
    )


def household_distribution_to_dataframe(result: SimulationResult) -> pl.DataFrame:
    """One row per household per generation: generation, time, income, owns."""
    frames = [
        pl.DataFrame(
            {
                "generation": [g.name] * len(g.households),
                "time": [g.time] * len(g.households),
                "income": g.households.income.tolist(),
                "owns": g.households.owns.tolist(),
            }
        )
        for g in result.generations
    ]
    return pl.concat(frames, how="vertical")
