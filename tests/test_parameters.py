"""
Tests for parameter defaults, validation and configuration loading.
"""

import math

import pytest
from olg_housing import (
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
    compute_period_aggregates,
)


FULL_RECORD = {
    "pop_growth_rate": 0.25,
    "tech_growth_rate": 0.50,
    "housing_growth_rate": 0.05,
    "sigma": 0.4,
    "beta": 0.3,
    "initial_tech": 2_500_000,
    "initial_pop": 1_000,
    "initial_housing": 1_000,
}


class TestDefaults:
    """Test default parameter values."""

    def test_default_model_params(self):
        """Defaults match the reference economy."""
        params = create_default_model_params()
        assert params.pop_growth_rate == 0.25
        assert params.tech_growth_rate == 0.50
        assert params.housing_growth_rate == 0.05
        assert params.sigma == 0.4
        assert params.beta == 0.3
        assert params.initial_tech == 2_500_000
        assert params.initial_pop == 1_000
        assert params.initial_housing == 1_000

    def test_default_solver_settings(self):
        """Default solver constants."""
        settings = create_default_solver_settings()
        assert settings.n_households == 1000
        assert settings.horizon == 10
        assert settings.max_iterations == 20
        assert settings.tolerance == 0.01
        assert settings.bisection_steps == 15
        assert settings.owning_bonus == 1.0
        assert settings.damping == 0.5
        assert settings.n_generations == 3
        assert settings.generation_names == ("Boomers", "Millennials", "Gen Alpha")

    def test_defaults_are_valid(self):
        """Default records pass validation."""
        validate_model_params(create_default_model_params())
        validate_solver_settings(create_default_solver_settings())


class TestModelValidation:
    """Test rejection of ill-posed economies."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"sigma": 0.0},
            {"sigma": -0.1},
            {"beta": 0.0},
            {"beta": 1.0},
            {"beta": -0.3},
            {"initial_tech": 0.0},
            {"initial_pop": -5.0},
            {"initial_housing": 0.0},
            {"pop_growth_rate": -1.0},
            {"housing_growth_rate": -2.0},
            {"tech_growth_rate": math.nan},
            {"initial_tech": math.inf},
        ],
    )
    def test_invalid_model_params(self, overrides):
        """Every ill-posed value raises InvalidConfigurationError."""
        params = ModelParameters(**overrides)
        with pytest.raises(InvalidConfigurationError):
            validate_model_params(params)

    def test_error_is_value_error(self):
        """Configuration errors can be caught as ValueError."""
        with pytest.raises(ValueError, match="sigma must be positive"):
            validate_model_params(ModelParameters(sigma=0.0))

    def test_negative_growth_allowed(self):
        """Shrinking (but not vanishing) stocks are allowed."""
        validate_model_params(ModelParameters(pop_growth_rate=-0.1, housing_growth_rate=-0.05))


class TestSolverValidation:
    """Test rejection of unusable solver settings."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"n_households": 0},
            {"horizon": 1},
            {"horizon": -3},
            {"max_iterations": 0},
            {"bisection_steps": 0},
            {"tolerance": 0.0},
            {"damping": 0.0},
            {"damping": 1.5},
            {"initial_price_factor": 0.0},
            {"generation_names": ()},
            {"horizon": 3, "generation_names": ("a", "b", "c")},
            {"n_households": 10.0},
        ],
    )
    def test_invalid_solver_settings(self, overrides):
        """Every unusable setting raises InvalidConfigurationError."""
        with pytest.raises(InvalidConfigurationError):
            validate_solver_settings(SolverSettings(**overrides))

    def test_generations_up_to_horizon_minus_one(self):
        """The last reportable generation is young in period horizon-2."""
        validate_solver_settings(SolverSettings(horizon=4, generation_names=("a", "b", "c")))


class TestConfigurationRecords:
    """Test building parameters from mappings and TOML files."""

    def test_from_full_record(self):
        """A complete record builds the default economy."""
        assert model_params_from_dict(FULL_RECORD) == create_default_model_params()

    def test_missing_key(self):
        """All parameters are required."""
        record = dict(FULL_RECORD)
        del record["beta"]
        with pytest.raises(InvalidConfigurationError, match="missing model parameters: beta"):
            model_params_from_dict(record)

    def test_unknown_key(self):
        """Typos are rejected rather than ignored."""
        record = dict(FULL_RECORD, sigmaa=0.5)
        with pytest.raises(InvalidConfigurationError, match="unknown model parameters: sigmaa"):
            model_params_from_dict(record)

    def test_non_numeric_value(self):
        """Values must be numbers."""
        record = dict(FULL_RECORD, sigma="wide")
        with pytest.raises(InvalidConfigurationError):
            model_params_from_dict(record)

    @pytest.mark.parametrize("value", [True, "0.4", None])
    def test_value_is_not_coerced(self, value):
        """Booleans and numeric strings are rejected, not converted to floats."""
        with pytest.raises(InvalidConfigurationError, match="sigma must be a real number"):
            model_params_from_dict(dict(FULL_RECORD, sigma=value))

    @pytest.mark.parametrize(
        "record",
        [
            {"tolerance": "tiny"},
            {"damping": "half"},
            {"initial_price_factor": None},
            {"owning_bonus": "1"},
            {"tolerance": True},
            {"generation_names": "abc"},
            {"generation_names": ["x", 2]},
        ],
    )
    def test_solver_wrong_type(self, record):
        """Wrongly typed solver values raise InvalidConfigurationError, not TypeError."""
        with pytest.raises(InvalidConfigurationError):
            solver_settings_from_dict(record)

    def test_record_is_validated(self):
        """Loaded records go through validation."""
        with pytest.raises(InvalidConfigurationError, match="beta"):
            model_params_from_dict(dict(FULL_RECORD, beta=1.2))

    def test_solver_overrides(self):
        """Solver records override only the given fields."""
        settings = solver_settings_from_dict(
            {"n_households": 200, "generation_names": ["x", "y"]}
        )
        assert settings.n_households == 200
        assert settings.generation_names == ("x", "y")
        assert settings.horizon == 10

    def test_solver_unknown_key(self):
        with pytest.raises(InvalidConfigurationError, match="unknown solver settings"):
            solver_settings_from_dict({"households": 10})

    def test_load_config(self, tmp_path):
        """TOML files provide [model] and [solver] tables."""
        path = tmp_path / "economy.toml"
        path.write_text(
            "[model]\n"
            "sigma = 0.5\n"
            "beta = 0.4\n"
            "\n"
            "[solver]\n"
            "n_households = 100\n"
        )
        config = load_config(path)
        assert config["model"] == {"sigma": 0.5, "beta": 0.4}
        assert config["solver"] == {"n_households": 100}

    def test_load_config_without_solver_table(self, tmp_path):
        path = tmp_path / "economy.toml"
        path.write_text("[model]\nsigma = 0.5\n")
        assert load_config(path)["solver"] == {}

    def test_load_config_unknown_table(self, tmp_path):
        path = tmp_path / "economy.toml"
        path.write_text("[market]\nsigma = 0.5\n")
        with pytest.raises(InvalidConfigurationError, match="unknown tables"):
            load_config(path)

    def test_load_config_invalid_toml(self, tmp_path):
        path = tmp_path / "economy.toml"
        path.write_text("[model\nsigma = \n")
        with pytest.raises(InvalidConfigurationError, match="cannot parse"):
            load_config(path)


class TestPeriodAggregates:
    """Test geometric growth of the aggregates."""

    def test_initial_period(self):
        agg = compute_period_aggregates(create_default_model_params(), 0)
        assert agg.technology == 2_500_000
        assert agg.population == 1_000
        assert agg.housing_stock == 1_000
        assert agg.supply_ratio == 1.0

    def test_growth(self):
        """A, N and H grow at their own rates."""
        agg = compute_period_aggregates(create_default_model_params(), 2)
        assert agg.time == 2
        assert agg.technology == pytest.approx(2_500_000 * 1.5**2)
        assert agg.population == pytest.approx(1_000 * 1.25**2)
        assert agg.housing_stock == pytest.approx(1_000 * 1.05**2)
        assert agg.supply_ratio == pytest.approx(1.05**2 / 1.25**2)

    def test_supply_ratio_capped(self):
        """Excess housing does not raise the ratio above one."""
        params = ModelParameters(initial_housing=2_000)
        assert compute_period_aggregates(params, 0).supply_ratio == 1.0
