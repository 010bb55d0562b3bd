r"""
Productivity Sampler

Each household i carries a relative productivity $a_i$ with
$\ln a_i \sim N(0, \sigma^2)$, fixed over its life and reused in every period
as a multiplier on aggregate productivity: $y_{i,t} = A_t \cdot a_i$.

Instead of random draws we take evenly spaced quantiles of the distribution,
    $a_i = \exp(\sigma \cdot \Phi^{-1}((i + 0.5) / M))$,  i = 0..M-1
so that the cross-section, and everything computed from it, is a pure
function of the parameters.
"""

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

# Rational approximation of the standard normal quantile (Acklam's
# coefficients for the Beasley-Springer-Moro scheme), relative error ~1.15e-9.
_CENTRAL_NUMERATOR = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_CENTRAL_DENOMINATOR = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
    1.0,
)
_TAIL_NUMERATOR = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_TAIL_DENOMINATOR = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
    1.0,
)

P_LOW = 0.02425
P_HIGH = 1 - P_LOW


def probit(p: ArrayLike) -> ArrayLike:
    r"""
    Standard normal inverse CDF $\Phi^{-1}(p)$.

    Uses a rational approximation in the central region
    $[0.02425, 0.97575]$ and a rational function of $\sqrt{-2 \ln p}$ in the
    tails. Boundary points $p \le 0$ and $p \ge 1$ map to 0 rather than
    $\pm\infty$.

    Parameters
    ----------
    p : float or np.ndarray
        Probabilities

    Returns
    -------
    float or np.ndarray
        Standard normal quantiles (float for scalar input)
    """
    p = np.asarray(p, dtype=float)
    q = p - 0.5

    with np.errstate(divide="ignore", invalid="ignore"):
        r = q * q
        central = q * np.polyval(_CENTRAL_NUMERATOR, r) / np.polyval(_CENTRAL_DENOMINATOR, r)

        # Lower tail uses p, upper tail uses 1 - p with the sign flipped
        tail_p = np.where(q < 0, p, 1.0 - p)
        t = np.sqrt(-2.0 * np.log(tail_p))
        tail = np.polyval(_TAIL_NUMERATOR, t) / np.polyval(_TAIL_DENOMINATOR, t)
        tail = np.where(q < 0, tail, -tail)

    z = np.where((p >= P_LOW) & (p <= P_HIGH), central, tail)
    z = np.where((p <= 0.0) | (p >= 1.0), 0.0, z)

    if z.ndim == 0:
        return float(z)
    return z


def quantile_grid(n_households: int) -> np.ndarray:
    """Midpoint quantiles (i + 0.5) / M for i = 0..M-1."""
    return (np.arange(n_households) + 0.5) / n_households


def sample_productivities(n_households: int, sigma: float) -> np.ndarray:
    r"""
    Deterministic cross-section of relative productivities.

    Parameters
    ----------
    n_households : int
        Cross-section size M
    sigma : float
        Standard deviation of $\ln a_i$

    Returns
    -------
    np.ndarray
        Read-only array of M productivities in ascending order
    """
    productivities = np.exp(sigma * probit(quantile_grid(n_households)))
    productivities.flags.writeable = False
    return productivities
