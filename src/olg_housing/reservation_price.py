r"""
Reservation Price (Willingness-to-Pay) of a Household

A household lives two periods. Young, it earns income y, consumes and saves;
old, it consumes its savings (and, if it owns, the resale value of its
house). Lifetime utility is

    Renting:  $\ln(y - s) + \beta \ln(s)$
    Owning:   $\ln(y - P - s) + \beta \ln(s + P_{t+1}) + \alpha$

where P is the purchase price, $P_{t+1}$ the resale price next period and
$\alpha$ the utility bonus of living in an owned house.

The willingness-to-pay (WTP) is the price at which the household is
indifferent between the two. Owning utility is strictly decreasing in P, so
the root of $u_{own}(P) - u_{rent}$ on $[0, y]$ is found by bisection.

All functions are vectorised over households.
"""

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


def _as_output(values: np.ndarray) -> ArrayLike:
    return float(values) if values.ndim == 0 else values


def compute_renting_savings(income: ArrayLike, beta: float) -> ArrayLike:
    r"""Optimal savings of a renter, $s = \beta y / (1 + \beta)$"""
    return beta * np.asarray(income, dtype=float) / (1 + beta)


def compute_renting_utility(income: ArrayLike, beta: float) -> ArrayLike:
    r"""
    Lifetime utility of a renter at optimal savings.

    $u_{rent} = \ln(y - s) + \beta \ln(s)$ with $s = \beta y / (1 + \beta)$
    """
    y = np.asarray(income, dtype=float)
    s = compute_renting_savings(y, beta)
    return _as_output(np.log(y - s) + beta * np.log(s))


def compute_owning_savings(
    income: ArrayLike,
    price: ArrayLike,
    next_price: float,
    beta: float,
) -> ArrayLike:
    r"""
    Optimal savings of an owner who buys at `price` and sells at `next_price`.

    From the first-order condition of
    $\ln(y - P - s) + \beta \ln(s + P_{t+1})$:
        $s = (\beta (y - P) - P_{t+1}) / (1 + \beta)$
    clipped at zero because borrowing against the resale value is not
    allowed.
    """
    y = np.asarray(income, dtype=float)
    s = (beta * (y - price) - next_price) / (1 + beta)
    return _as_output(np.maximum(s, 0.0))


def compute_owning_utility(
    income: ArrayLike,
    price: ArrayLike,
    next_price: float,
    beta: float,
    owning_bonus: float = 1.0,
) -> ArrayLike:
    r"""
    Lifetime utility of an owner at optimal savings.

    Returns $-\infty$ where the purchase is unaffordable (consumption when
    young, or when old, would not be positive).

    Parameters
    ----------
    income : float or np.ndarray
        Income when young, y
    price : float or np.ndarray
        Purchase price P
    next_price : float
        Resale price $P_{t+1}$
    beta : float
        Discount factor
    owning_bonus : float
        Utility of living in an owned house, $\alpha$

    Returns
    -------
    float or np.ndarray
        $u_{own}(P)$
    """
    y = np.asarray(income, dtype=float)
    s = np.asarray(compute_owning_savings(y, price, next_price, beta))
    consumption_young = y - price - s
    consumption_old = s + next_price
    feasible = (consumption_young > 0) & (consumption_old > 0)

    with np.errstate(divide="ignore", invalid="ignore"):
        utility = (
            np.log(consumption_young)
            + beta * np.log(consumption_old)
            + owning_bonus
        )
    return _as_output(np.where(feasible, utility, -np.inf))


def solve_willingness_to_pay(
    income: ArrayLike,
    next_price: float,
    beta: float,
    owning_bonus: float = 1.0,
    n_steps: int = 15,
) -> ArrayLike:
    r"""
    Reservation price of each household given next period's price.

    Bisection on $[0, y]$ with a fixed number of halvings. At each trial
    price P, if owning is strictly better than renting the lower bound moves
    up to P, otherwise the upper bound moves down to P. The result is the
    final lower bound, i.e. the highest accepted trial price, or 0 if owning
    was never preferred (a household that rents whatever the price).

    Fifteen halvings of a range up to full income locate the WTP to within
    $y / 2^{15}$.

    Parameters
    ----------
    income : float or np.ndarray
        Income when young, y > 0
    next_price : float
        Resale price $P_{t+1}$
    beta : float
        Discount factor
    owning_bonus : float
        Utility of living in an owned house
    n_steps : int
        Number of bisection steps

    Returns
    -------
    float or np.ndarray
        WTP in $[0, y]$ for every household
    """
    y = np.asarray(income, dtype=float)
    u_rent = np.asarray(compute_renting_utility(y, beta))

    low = np.zeros_like(y)
    high = y.copy()
    for _ in range(n_steps):
        trial = 0.5 * (low + high)
        u_own = compute_owning_utility(y, trial, next_price, beta, owning_bonus)
        prefers_owning = u_own > u_rent
        low = np.where(prefers_owning, trial, low)
        high = np.where(prefers_owning, high, trial)

    return _as_output(low)
