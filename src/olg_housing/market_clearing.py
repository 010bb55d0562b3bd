r"""
Housing Market Clearing

The housing stock of a period is auctioned to the cross-section with a
uniform-price rule:

1. The cross-section of M households represents a population $N_t$, so it
   is offered $k = \lfloor \min(1, H_t / N_t) \cdot M \rfloor$ units.
2. Households are ranked by WTP (highest first) and the top k buy.
3. Every buyer pays the WTP of the k-th ranked household, the lowest
   winning bid. Note this is the k-th highest bid, not the (k+1)-th of a
   Vickrey auction.

With k = 0 nobody buys and the price is 0. With k = M everybody buys at the
reservation price of the least eager household.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class MarketClearing:
    """
    Outcome of one period's auction.

    Attributes
    ----------
    price : float
        Uniform clearing price
    n_owners : int
        Number of households allocated a house
    ranking : np.ndarray
        Household indices ordered by WTP, highest first (stable on ties)
    owns : np.ndarray
        Ownership flag for every household, in the original order
    """
    price: float
    n_owners: int
    ranking: np.ndarray
    owns: np.ndarray


def compute_housing_units(
    housing_stock: float,
    population: float,
    n_households: int,
) -> int:
    r"""
    Units offered to the simulated cross-section.

    $k = \lfloor \min(1, H_t / N_t) \cdot M \rfloor$, capped at M and never
    negative.
    """
    supply_ratio = min(1.0, housing_stock / population)
    units = int(np.floor(supply_ratio * n_households))
    return max(0, min(units, n_households))


def clear_market(wtp: np.ndarray, units: int) -> MarketClearing:
    r"""
    Allocate `units` houses by WTP and set the uniform clearing price.

    Parameters
    ----------
    wtp : np.ndarray
        Willingness-to-pay of every household
    units : int
        Houses available to the cross-section

    Returns
    -------
    MarketClearing
        Clearing price, ranking and ownership flags
    """
    wtp = np.asarray(wtp, dtype=float)
    n = wtp.size
    k = max(0, min(int(units), n))

    ranking = np.argsort(-wtp, kind="stable")
    owns = np.zeros(n, dtype=bool)
    owns[ranking[:k]] = True

    price = float(wtp[ranking[k - 1]]) if k > 0 else 0.0

    ranking.flags.writeable = False
    owns.flags.writeable = False
    return MarketClearing(price=price, n_owners=k, ranking=ranking, owns=owns)
