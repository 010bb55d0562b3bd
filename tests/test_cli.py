"""
Tests for the command-line entry point.
"""

import polars as pl
import pytest
from olg_housing.cli import create_parser, main, resolve_model

SMALL_RUN = ["--households", "60", "--horizon", "5", "--max-iterations", "4"]


class TestParser:
    """Test argument parsing and value resolution."""

    def test_defaults(self):
        args = create_parser().parse_args([])
        assert args.scenario == "baseline"
        assert args.config is None
        assert args.sigma is None

    def test_flag_beats_config_beats_scenario(self):
        args = create_parser().parse_args(["--scenario", "near_homogeneous", "--beta", "0.4"])
        resolved = resolve_model(args, {"beta": 0.2, "initial_pop": 2000.0})
        assert resolved["beta"] == 0.4
        assert resolved["initial_pop"] == 2000.0
        assert resolved["sigma"] == 1e-3

    def test_unknown_scenario_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--scenario", "utopia"])


class TestMain:
    """Test full runs through `main`."""

    def test_prints_generations(self, capsys):
        assert main(SMALL_RUN) == 0
        out = capsys.readouterr().out
        for name in ("Boomers", "Millennials", "Gen Alpha"):
            assert name in out

    def test_non_convergence_warning(self, capsys):
        assert main(SMALL_RUN) == 0
        assert "did not converge" in capsys.readouterr().err

    def test_writes_csv(self, tmp_path):
        output = tmp_path / "generations.csv"
        households = tmp_path / "households.csv"
        code = main(SMALL_RUN + ["--output", str(output), "--households-output", str(households)])
        assert code == 0
        assert pl.read_csv(output).height == 3
        assert pl.read_csv(households).height == 3 * 60

    def test_invalid_parameter(self, capsys):
        assert main(SMALL_RUN + ["--sigma", "-1"]) == 2
        assert "error: sigma" in capsys.readouterr().err

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "economy.toml"
        config.write_text(
            "[model]\n"
            "housing_growth_rate = 0.25\n"
            "\n"
            "[solver]\n"
            "n_households = 40\n"
            "horizon = 5\n"
            "max_iterations = 3\n"
        )
        output = tmp_path / "out.csv"
        assert main(["--config", str(config), "--output", str(output)]) == 0
        df = pl.read_csv(output)
        assert df["ownership_rate"].to_list() == [1.0, 1.0, 1.0]

    def test_unknown_config_key(self, tmp_path, capsys):
        config = tmp_path / "typo.toml"
        config.write_text("[model]\nsigmaa = 0.4\n")
        assert main(["--config", str(config)] + SMALL_RUN) == 2
        assert "sigmaa" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "table",
        ['[solver]\ndamping = "half"\n', '[solver]\ntolerance = "tiny"\n', "[model]\nsigma = true\n"],
    )
    def test_wrongly_typed_config_value(self, tmp_path, capsys, table):
        config = tmp_path / "typed.toml"
        config.write_text(table)
        assert main(["--config", str(config)] + SMALL_RUN) == 2
        assert "must be a real number" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "absent.toml")]) == 2
        assert "error" in capsys.readouterr().err
