"""
Tests for leave-one-out, cumulative and subgroup meta-analysis, Egger's
test and trim and fill.

The asymmetric funnel below has its small studies (large SE) reporting
the largest effects, the classic small-study pattern:

    effects = 0.10, 0.15, 0.20, 0.40, 0.60, 0.80
    se      = 0.05, 0.08, 0.10, 0.20, 0.30, 0.40
"""

import math

import numpy as np
import pytest
from scipy import stats

from epistats.core.exceptions import DataError, DimensionError, ValidationError
from epistats.meta import (
    MetaDesign,
    StudyEffect,
    cumulative_meta_analysis,
    egger_test,
    leave_one_out,
    meta_analysis,
    subgroup_analysis,
    trim_and_fill,
)

ASYM_EFFECTS = np.array([0.10, 0.15, 0.20, 0.40, 0.60, 0.80])
ASYM_SE = np.array([0.05, 0.08, 0.10, 0.20, 0.30, 0.40])


def _design(effects, variances, names=None):
    return MetaDesign.from_arrays(effects, variances, names=names)


@pytest.fixture
def asymmetric():
    return _design(ASYM_EFFECTS, ASYM_SE ** 2, names=list("ABCDEF"))


@pytest.fixture
def three():
    return _design([0.1, 0.3, 0.5], [0.01, 0.02, 0.04], names=["x", "y", "z"])


class TestLeaveOneOut:

    def test_one_run_per_study(self, asymmetric):
        sol = leave_one_out(asymmetric)
        assert len(sol) == 6
        assert sol.labels == tuple("ABCDEF")
        assert all(r.n_studies == 5 for r in sol)
        assert sol.kind == "leave_one_out"

    def test_each_run_matches_direct_pooling(self, three):
        sol = leave_one_out(three)
        without_x = meta_analysis(three.studies[1:])
        assert sol.rows[0].pooled.pooled == pytest.approx(without_x.pooled, rel=1e-12)
        assert sol.pooled[0] == sol.rows[0].pooled.pooled

    def test_dropping_largest_effect_lowers_pool(self, asymmetric):
        sol = leave_one_out(asymmetric)
        full = meta_analysis(asymmetric)
        assert sol.rows[-1].pooled.pooled < full.pooled

    def test_needs_three_studies(self):
        with pytest.raises(DataError):
            leave_one_out(_design([0.1, 0.3], [0.01, 0.02]))

    def test_hksj_needs_four_studies(self, three):
        with pytest.raises(DataError) as exc_info:
            leave_one_out(three, hksj=True)
        assert exc_info.value.required == "k >= 4"

    def test_hksj_runs(self, asymmetric):
        sol = leave_one_out(asymmetric, hksj=True)
        assert all(r.pooled.hksj for r in sol)

    def test_summary(self, three):
        text = leave_one_out(three).summary()
        assert "omitting" in text
        assert repr(leave_one_out(three)) == "SensitivitySolution(kind='leave_one_out', runs=3)"


class TestCumulative:

    def test_first_row_is_first_study(self, three):
        sol = cumulative_meta_analysis(three)
        first = sol.rows[0].pooled
        assert first.pooled == pytest.approx(0.1)
        assert first.se == pytest.approx(0.1)
        assert first.k == 1
        assert first.I2 == 0.0
        assert first.ci.lower == pytest.approx(0.1 - 1.959963984540054 * 0.1, rel=1e-10)

    def test_last_row_is_full_analysis(self, three):
        sol = cumulative_meta_analysis(three)
        assert sol.rows[-1].pooled.pooled == pytest.approx(meta_analysis(three).pooled, rel=1e-12)
        assert [r.n_studies for r in sol] == [1, 2, 3]

    def test_order_by_key_sequence(self, three):
        sol = cumulative_meta_analysis(three, order=[2003, 2001, 2002])
        assert sol.labels == ("y", "z", "x")

    def test_order_by_callable(self, three):
        sol = cumulative_meta_analysis(three, order=lambda s: -s.effect)
        assert sol.labels == ("z", "y", "x")

    def test_order_length_mismatch(self, three):
        with pytest.raises(DimensionError):
            cumulative_meta_analysis(three, order=[1, 2])

    def test_hksj_skips_two_study_step(self, three):
        sol = cumulative_meta_analysis(three, hksj=True)
        assert not sol.rows[1].pooled.hksj
        assert sol.rows[2].pooled.hksj
        assert "HKSJ adjustment not applied to the 2-study step (needs k >= 3)" in sol.warnings


class TestSubgroups:

    def test_fixed_effect_q_decomposition(self, asymmetric):
        groups = ["small", "small", "small", "large", "large", "large"]
        res = subgroup_analysis(asymmetric, groups, method="fixed")
        theta = {g: p.fixed.pooled for g, p in res.subgroups.items()}
        weight = {g: 1.0 / p.fixed.se ** 2 for g, p in res.subgroups.items()}
        q_between = sum(weight[g] * (theta[g] - res.overall.fixed.pooled) ** 2 for g in theta)
        assert res.Q_between == pytest.approx(q_between, rel=1e-9)
        assert res.Q_within + res.Q_between == pytest.approx(res.overall.Q, rel=1e-12)
        assert res.df_between == 1
        assert res.p_between == pytest.approx(stats.chi2.sf(res.Q_between, 1), rel=1e-9)

    def test_single_study_subgroup(self, three):
        res = subgroup_analysis(three, ["a", "a", "b"])
        assert res.subgroups["b"].k == 1
        assert res.subgroups["b"].pooled == pytest.approx(0.5)
        assert list(res.subgroups) == ["a", "b"]

    def test_one_subgroup(self, three):
        with pytest.raises(DataError):
            subgroup_analysis(three, ["a", "a", "a"])

    def test_label_count(self, three):
        with pytest.raises(DimensionError):
            subgroup_analysis(three, ["a", "b"])


class TestEgger:

    def test_matches_ols(self):
        res = egger_test(ASYM_EFFECTS, ASYM_SE)
        fit = stats.linregress(1.0 / ASYM_SE, ASYM_EFFECTS / ASYM_SE)
        assert res.intercept == pytest.approx(fit.intercept, rel=1e-10)
        assert res.slope == pytest.approx(fit.slope, rel=1e-10)
        assert res.se == pytest.approx(fit.intercept_stderr, rel=1e-10)
        assert res.df == 4
        assert res.intercept > 0

    def test_symmetric_funnel(self):
        se = np.array([0.1, 0.2, 0.3, 0.1, 0.2, 0.3])
        effects = np.array([0.3, 0.5, 0.7, 0.5, 0.3, 0.1])
        res = egger_test(effects, se)
        assert res.intercept == pytest.approx(0.0, abs=1e-10)
        assert res.p_value == pytest.approx(1.0, abs=1e-8)

    def test_too_few_studies(self):
        with pytest.raises(DataError):
            egger_test([0.1, 0.2], [0.1, 0.2])

    def test_equal_standard_errors(self):
        with pytest.raises(DataError):
            egger_test([0.1, 0.2, 0.3], [0.1, 0.1, 0.1])

    def test_nonpositive_se(self):
        with pytest.raises(ValidationError):
            egger_test([0.1, 0.2, 0.3], [0.1, 0.0, 0.2])


class TestTrimAndFill:

    def test_fills_missing_small_studies(self, asymmetric):
        res = trim_and_fill(asymmetric)
        assert res.k0 == 3
        assert len(res.imputed) == res.k0
        assert all(s.name.startswith("Filled: ") for s in res.imputed)
        assert res.adjusted.k == 6 + res.k0
        assert res.adjusted.pooled < res.original.pooled

    def test_imputed_mirror_largest_effects(self, asymmetric):
        res = trim_and_fill(asymmetric)
        names = {s.name for s in res.imputed}
        assert names == {"Filled: F", "Filled: E", "Filled: D"}
        by_name = {s.name: s for s in res.imputed}
        assert by_name["Filled: F"].variance == pytest.approx(0.16)
        assert by_name["Filled: F"].effect < by_name["Filled: E"].effect

    def test_symmetric_funnel_needs_no_filling(self):
        design = _design([-0.2, 0.2, -0.1, 0.1, 0.0], [0.04, 0.04, 0.02, 0.02, 0.01])
        res = trim_and_fill(design)
        assert res.k0 == 0
        assert res.imputed == ()
        assert res.adjusted is res.original

    def test_r0_estimator(self, asymmetric):
        res = trim_and_fill(asymmetric, estimator="R0")
        assert res.estimator == "R0"
        assert 0 <= res.k0 <= 4

    def test_right_side(self):
        design = _design(-ASYM_EFFECTS, ASYM_SE ** 2)
        left = trim_and_fill(_design(ASYM_EFFECTS, ASYM_SE ** 2))
        right = trim_and_fill(design, side="right")
        assert right.k0 == left.k0
        assert right.adjusted.pooled == pytest.approx(-left.adjusted.pooled, rel=1e-10)

    def test_needs_three_studies(self):
        with pytest.raises(DataError):
            trim_and_fill(_design([0.1, 0.3], [0.01, 0.02]))

    def test_bad_estimator(self, asymmetric):
        with pytest.raises(ValidationError):
            trim_and_fill(asymmetric, estimator="Q0")

    def test_accepts_study_sequence(self):
        studies = [StudyEffect.from_se(f"s{i}", e, s) for i, (e, s) in enumerate(zip(ASYM_EFFECTS, ASYM_SE))]
        assert trim_and_fill(studies).k0 == trim_and_fill(_design(ASYM_EFFECTS, ASYM_SE ** 2)).k0
        assert not math.isnan(trim_and_fill(studies).adjusted.pooled)
