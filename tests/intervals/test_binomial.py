"""
Tests for binomial proportion intervals.

Reference values from R:
    binom.test(0, 10)$conf.int    # 0.0000000 0.3084971
    binom.test(10, 10)$conf.int   # 0.6915029 1.0000000
    Newcombe (1998) example (a): 56/70 vs 48/80, method 10 -> (0.0524, 0.3339)
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats

from epistats.core.exceptions import DataError, DomainError
from epistats.distributions import z_for_conf_level
from epistats.intervals import (
    agresti_coull_ci,
    clopper_pearson_ci,
    newcombe_ci,
    wald_ci,
    wilson_ci,
)

Z95 = z_for_conf_level(0.95)


def _coverage(interval_fn, n, p):
    """Exact coverage: sum of binomial probabilities of outcomes whose interval holds p."""
    total = 0.0
    for x in range(n + 1):
        ci = interval_fn(x, n)
        if ci.lower <= p <= ci.upper:
            total += stats.binom.pmf(x, n, p)
    return total


class TestWilson:

    def test_bounds_solve_score_equation(self):
        """Each Wilson bound L satisfies (p_hat - L)^2 = z^2 L (1 - L) / n."""
        p_hat, n = 0.3, 40
        ci = wilson_ci(p_hat, n)
        for bound in ci.as_tuple():
            assert (p_hat - bound) ** 2 == pytest.approx(Z95 ** 2 * bound * (1 - bound) / n, rel=1e-9)

    def test_zero_proportion_has_width(self):
        ci = wilson_ci(0.0, 10)
        assert ci.lower == pytest.approx(0.0, abs=1e-15)
        assert ci.upper > 0.2

    def test_full_proportion_has_width(self):
        ci = wilson_ci(1.0, 10)
        assert ci.upper == pytest.approx(1.0, abs=1e-15)
        assert ci.lower < 0.8

    def test_symmetry(self):
        a = wilson_ci(0.2, 25)
        b = wilson_ci(0.8, 25)
        assert a.lower == pytest.approx(1 - b.upper, rel=1e-10)
        assert a.upper == pytest.approx(1 - b.lower, rel=1e-10)

    def test_bad_inputs(self):
        with pytest.raises(DomainError):
            wilson_ci(1.2, 10)
        with pytest.raises(DataError):
            wilson_ci(0.5, 0)

    def test_average_coverage(self, rng):
        """Wilson coverage averaged over random true proportions stays near nominal."""
        n = 50
        ps = rng.uniform(0.05, 0.95, size=40)
        cover = [_coverage(lambda x, m: wilson_ci(x / m, m), n, p) for p in ps]
        assert np.mean(cover) > 0.93


class TestWaldAndAgrestiCoull:

    def test_wald_degenerates_at_zero(self):
        est = wald_ci(0.0, 20)
        assert est.se == 0.0
        assert est.ci.as_tuple() == (0.0, 0.0)

    def test_wald_clipped(self):
        est = wald_ci(0.05, 10)
        assert est.lower == 0.0
        assert est.value == 0.05

    def test_agresti_coull_contains_estimate(self):
        ci = agresti_coull_ci(0.25, 40)
        assert ci.lower < 0.25 < ci.upper

    def test_agresti_coull_clipped(self):
        ci = agresti_coull_ci(0.0, 10)
        assert ci.lower == 0.0
        assert ci.upper > 0.0


class TestClopperPearson:

    def test_zero_events(self):
        """R: binom.test(0, 10)$conf.int"""
        ci = clopper_pearson_ci(0, 10)
        assert ci.lower == 0.0
        assert ci.upper == pytest.approx(0.3084971, rel=1e-6)
        assert ci.upper == pytest.approx(1 - 0.025 ** (1 / 10), rel=1e-10)

    def test_all_events(self):
        """R: binom.test(10, 10)$conf.int"""
        ci = clopper_pearson_ci(10, 10)
        assert ci.upper == 1.0
        assert ci.lower == pytest.approx(0.6915029, rel=1e-6)

    def test_matches_scipy_exact(self):
        for x, n in [(7, 20), (1, 50), (33, 34)]:
            ref = stats.binomtest(x, n).proportion_ci(confidence_level=0.95, method="exact")
            ci = clopper_pearson_ci(x, n)
            assert_allclose(ci.as_tuple(), (ref.low, ref.high), rtol=1e-8)

    def test_x_greater_than_n(self):
        with pytest.raises(DomainError):
            clopper_pearson_ci(11, 10)

    def test_non_integer_count(self):
        with pytest.raises(DomainError):
            clopper_pearson_ci(2.5, 10)

    @pytest.mark.parametrize("n", [5, 20, 60])
    def test_coverage_never_below_nominal(self, n):
        """The exact interval is conservative at every true proportion."""
        for p in np.linspace(0.01, 0.99, 25):
            assert _coverage(clopper_pearson_ci, n, p) >= 0.95 - 1e-9

    def test_wider_than_wilson(self):
        cp = clopper_pearson_ci(12, 40)
        w = wilson_ci(12 / 40, 40)
        assert cp.width > w.width


class TestNewcombe:

    def test_published_example(self):
        """Newcombe (1998), Table II, example (a), method 10."""
        est = newcombe_ci(56 / 70, 70, 48 / 80, 80)
        assert est.value == pytest.approx(0.2, rel=1e-12)
        assert est.lower == pytest.approx(0.0524, abs=5e-4)
        assert est.upper == pytest.approx(0.3339, abs=5e-4)

    def test_identical_groups_contain_zero(self):
        est = newcombe_ci(0.4, 50, 0.4, 50)
        assert est.value == 0.0
        assert est.lower < 0.0 < est.upper
        assert est.lower == pytest.approx(-est.upper, rel=1e-10)

    def test_extreme_proportions_stay_in_range(self):
        est = newcombe_ci(1.0, 10, 0.0, 10)
        assert 0.0 < est.lower < est.value
        assert est.upper == pytest.approx(1.0, abs=1e-12)
        assert not math.isclose(est.lower, 1.0)
