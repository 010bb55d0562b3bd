r"""
Model Parameter Definitions

This module defines the parameter dataclasses used throughout the housing
model, together with their validation and loading from configuration records.

Two records drive a run:
- ModelParameters: the economy (growth rates, income dispersion $\sigma$,
  discount factor $\beta$, initial technology / population / housing stock)
- SolverSettings: the numerical constants of the solver (cross-section size,
  horizon, iteration budget, tolerance, bisection steps, owning bonus, damping)
"""

import math
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple


class InvalidConfigurationError(ValueError):
    """Raised when a configuration cannot describe a well-posed economy."""


@dataclass(frozen=True)
class ModelParameters:
    r"""
    Parameters defining the overlapping-generations economy.

    Parameters
    ----------
    pop_growth_rate : float
        Population growth per generation, $N_t = N_0 (1 + g_N)^t$
    tech_growth_rate : float
        Technology growth per generation, $A_t = A_0 (1 + g_A)^t$
    housing_growth_rate : float
        Housing stock growth per generation, $H_t = H_0 (1 + g_H)^t$
    sigma : float
        Standard deviation of log productivity, $\ln a_i \sim N(0, \sigma^2)$
    beta : float
        Discount factor between youth and old age, $\beta \in (0, 1)$
    initial_tech : float
        $A_0$, lifetime income of a household with $a_i = 1$ at t=0
    initial_pop : float
        $N_0$, population at t=0
    initial_housing : float
        $H_0$, housing stock at t=0
    """
    pop_growth_rate: float = 0.25
    tech_growth_rate: float = 0.50
    housing_growth_rate: float = 0.05
    sigma: float = 0.4
    beta: float = 0.3
    initial_tech: float = 2_500_000.0
    initial_pop: float = 1_000.0
    initial_housing: float = 1_000.0


@dataclass(frozen=True)
class SolverSettings:
    r"""
    Numerical settings of the equilibrium solver.

    Parameters
    ----------
    n_households : int
        Size M of the simulated cross-section
    horizon : int
        Number of simulated periods (the price path length)
    max_iterations : int
        Budget of outer fixed-point iterations
    tolerance : float
        Absolute tolerance on the largest price change between iterations
    bisection_steps : int
        Number of halvings used to locate each household's WTP
    owning_bonus : float
        Utility of living in an owned house
    damping : float
        Weight of the newly proposed price when updating the path
    initial_price_factor : float
        Seed price is initial_price_factor * $A_0$ * $N_0$ for every period
    generation_names : Tuple[str, ...]
        Labels of the reported generations, one per period from t=0
    """
    n_households: int = 1000
    horizon: int = 10
    max_iterations: int = 20
    tolerance: float = 0.01
    bisection_steps: int = 15
    owning_bonus: float = 1.0
    damping: float = 0.5
    initial_price_factor: float = 0.1
    generation_names: Tuple[str, ...] = ("Boomers", "Millennials", "Gen Alpha")

    @property
    def n_generations(self) -> int:
        return len(self.generation_names)


def create_default_model_params() -> ModelParameters:
    """
    Create the default economy.

    Population grows 25% per generation, technology 50% (about 1.3% per
    year) and housing only 5%, so housing becomes scarcer every generation.
    Initial technology of 2.5M is roughly a $50k/yr lifetime income.
    """
    return ModelParameters()


def create_default_solver_settings() -> SolverSettings:
    return SolverSettings()


def _check_real(name: str, value: Any) -> None:
    """Raise unless `value` is a finite int or float (bool excluded)."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be a real number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise InvalidConfigurationError(f"{name} must be finite, got {value}")


def validate_model_params(params: ModelParameters) -> None:
    r"""
    Reject economies for which the model is not well posed.

    Raises
    ------
    InvalidConfigurationError
        If any value is not a finite real number, $\sigma \le 0$,
        $\beta \notin (0, 1)$, an initial stock is not positive or a growth
        rate is $\le -1$.
    """
    for f in fields(params):
        _check_real(f.name, getattr(params, f.name))

    if params.sigma <= 0:
        raise InvalidConfigurationError(f"sigma must be positive, got {params.sigma}")
    if not 0 < params.beta < 1:
        raise InvalidConfigurationError(
            f"beta must lie in (0, 1), got {params.beta}"
        )
    for name in ("initial_tech", "initial_pop", "initial_housing"):
        value = getattr(params, name)
        if value <= 0:
            raise InvalidConfigurationError(f"{name} must be positive, got {value}")
    for name in ("pop_growth_rate", "tech_growth_rate", "housing_growth_rate"):
        value = getattr(params, name)
        if value <= -1:
            raise InvalidConfigurationError(
                f"{name} must be greater than -1, got {value}"
            )


def validate_solver_settings(settings: SolverSettings) -> None:
    """
    Reject solver settings that cannot terminate or cannot report results.

    Raises
    ------
    InvalidConfigurationError
        If any count is too small, the tolerance is not positive, the damping
        is outside (0, 1] or more generations are requested than the horizon
        can price (each reported generation needs the next period's price).
        Also if a field has the wrong type.
    """
    for name in ("n_households", "horizon", "max_iterations", "bisection_steps"):
        value = getattr(settings, name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    for name in ("tolerance", "owning_bonus", "damping", "initial_price_factor"):
        _check_real(name, getattr(settings, name))
    names = settings.generation_names
    if not isinstance(names, tuple) or not all(isinstance(n, str) for n in names):
        raise InvalidConfigurationError(
            f"generation_names must be a tuple of strings, got {names!r}"
        )
    if settings.n_households < 1:
        raise InvalidConfigurationError(
            f"n_households must be at least 1, got {settings.n_households}"
        )
    if settings.horizon < 2:
        raise InvalidConfigurationError(
            f"horizon must be at least 2, got {settings.horizon}"
        )
    if settings.max_iterations < 1:
        raise InvalidConfigurationError(
            f"max_iterations must be at least 1, got {settings.max_iterations}"
        )
    if settings.bisection_steps < 1:
        raise InvalidConfigurationError(
            f"bisection_steps must be at least 1, got {settings.bisection_steps}"
        )
    if not settings.tolerance > 0:
        raise InvalidConfigurationError(
            f"tolerance must be positive, got {settings.tolerance}"
        )
    if not 0 < settings.damping <= 1:
        raise InvalidConfigurationError(
            f"damping must lie in (0, 1], got {settings.damping}"
        )
    if not settings.initial_price_factor > 0:
        raise InvalidConfigurationError(
            f"initial_price_factor must be positive, got {settings.initial_price_factor}"
        )
    if not 1 <= settings.n_generations <= settings.horizon - 1:
        raise InvalidConfigurationError(
            f"between 1 and {settings.horizon - 1} generations can be reported "
            f"with horizon={settings.horizon}, got {settings.n_generations}"
        )


# =============================================================================
# CONFIGURATION RECORDS
# =============================================================================

MODEL_KEYS = tuple(f.name for f in fields(ModelParameters))
SOLVER_KEYS = tuple(f.name for f in fields(SolverSettings))


def model_params_from_dict(raw: Mapping[str, Any]) -> ModelParameters:
    r"""
    Build ModelParameters from a configuration record.

    Every parameter is required and unknown keys are rejected, so a typo
    never falls back to a default silently.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Record with exactly the keys of ModelParameters

    Returns
    -------
    ModelParameters
        Validated parameters
    """
    missing = [key for key in MODEL_KEYS if key not in raw]
    if missing:
        raise InvalidConfigurationError(
            f"missing model parameters: {', '.join(missing)}"
        )
    unknown = sorted(set(raw) - set(MODEL_KEYS))
    if unknown:
        raise InvalidConfigurationError(
            f"unknown model parameters: {', '.join(unknown)}"
        )
    # Strings and booleans are rejected rather than coerced by float()
    for key in MODEL_KEYS:
        _check_real(key, raw[key])
    params = ModelParameters(**{key: float(raw[key]) for key in MODEL_KEYS})
    validate_model_params(params)
    return params


def solver_settings_from_dict(
    raw: Mapping[str, Any],
    base: Optional[SolverSettings] = None,
) -> SolverSettings:
    """Override fields of `base` (default settings if None) from a record."""
    if base is None:
        base = create_default_solver_settings()
    unknown = sorted(set(raw) - set(SOLVER_KEYS))
    if unknown:
        raise InvalidConfigurationError(
            f"unknown solver settings: {', '.join(unknown)}"
        )
    overrides: Dict[str, Any] = dict(raw)
    if isinstance(overrides.get("generation_names"), list):
        overrides["generation_names"] = tuple(overrides["generation_names"])
    settings = replace(base, **overrides)
    validate_solver_settings(settings)
    return settings


def load_config(path: Path) -> Dict[str, Dict[str, Any]]:
    """
    Load a TOML configuration file.

    The file holds a `[model]` table and an optional `[solver]` table.
    Returns a dict with both keys (the solver table may be empty).
    """
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigurationError(f"cannot parse {path}: {e}") from e
    unknown = sorted(set(raw) - {"model", "solver"})
    if unknown:
        raise InvalidConfigurationError(
            f"unknown tables in {path}: {', '.join(unknown)}"
        )
    return {"model": dict(raw.get("model", {})), "solver": dict(raw.get("solver", {}))}
