"""
Tests for the inverse normal CDF and the deterministic productivity sample.
"""

import numpy as np
import pytest
from scipy.stats import norm
from olg_housing import probit, quantile_grid, sample_productivities


class TestProbit:
    """Test the rational approximation of the standard normal quantile."""

    def test_matches_scipy_central(self):
        """Central region agrees with scipy's exact quantile."""
        p = np.linspace(0.03, 0.97, 501)
        np.testing.assert_allclose(probit(p), norm.ppf(p), rtol=1e-8, atol=1e-9)

    def test_matches_scipy_tails(self):
        """Both tails agree with scipy's exact quantile."""
        p = np.concatenate([np.logspace(-12, np.log10(0.024), 200), 1 - np.logspace(-12, np.log10(0.024), 200)])
        np.testing.assert_allclose(probit(p), norm.ppf(p), rtol=1e-8, atol=1e-9)

    def test_median_is_zero(self):
        assert probit(0.5) == 0.0

    def test_symmetry(self):
        """Phi^-1(p) = -Phi^-1(1 - p)"""
        p = np.array([0.001, 0.01, 0.1, 0.3, 0.45])
        np.testing.assert_allclose(probit(p), -probit(1 - p), rtol=1e-10)

    def test_monotone(self):
        """Quantiles increase with p across region boundaries."""
        z = probit(np.linspace(0.0001, 0.9999, 10001))
        assert np.all(np.diff(z) > 0)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5])
    def test_boundaries_are_neutral(self, p):
        """Points outside (0, 1) map to 0 instead of an infinity."""
        assert probit(p) == 0.0

    def test_boundaries_in_array(self):
        z = probit(np.array([0.0, 0.5, 1.0]))
        assert np.all(np.isfinite(z))
        np.testing.assert_array_equal(z, [0.0, 0.0, 0.0])

    def test_scalar_returns_float(self):
        assert isinstance(probit(0.2), float)
        assert isinstance(probit(np.array([0.2])), np.ndarray)


class TestSampleProductivities:
    """Test the quantile-based productivity sample."""

    def test_quantile_grid(self):
        np.testing.assert_allclose(quantile_grid(4), [0.125, 0.375, 0.625, 0.875])

    def test_size_and_order(self):
        """M draws in ascending order, all positive."""
        a = sample_productivities(1000, 0.4)
        assert a.shape == (1000,)
        assert np.all(a > 0)
        assert np.all(np.diff(a) > 0)

    def test_lognormal_quantiles(self):
        """log a_i = sigma * Phi^-1((i + 0.5) / M)"""
        sigma = 0.4
        a = sample_productivities(200, sigma)
        expected = sigma * norm.ppf((np.arange(200) + 0.5) / 200)
        np.testing.assert_allclose(np.log(a), expected, rtol=1e-8, atol=1e-9)

    def test_middle_household_has_unit_productivity(self):
        """For odd M the middle quantile is the median, a = 1."""
        a = sample_productivities(5, 0.7)
        assert a[2] == 1.0

    def test_deterministic(self):
        """Two samples with the same inputs are identical."""
        np.testing.assert_array_equal(
            sample_productivities(500, 0.3), sample_productivities(500, 0.3)
        )

    def test_read_only(self):
        """The sample cannot be mutated between periods or iterations."""
        a = sample_productivities(10, 0.4)
        with pytest.raises(ValueError):
            a[0] = 2.0

    def test_small_sigma_is_nearly_homogeneous(self):
        a = sample_productivities(1000, 1e-3)
        assert a.max() / a.min() < 1.01
