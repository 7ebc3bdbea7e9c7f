"""
Tests for inverse-variance pooling and meta_analysis().

Hand-computed reference (three studies):

    effects   = 0.1, 0.3, 0.5
    variances = 0.01, 0.02, 0.04
    w         = 100, 50, 25           sum = 175
    theta_F   = 37.5 / 175 = 3/14
    Q         = 728 / 196 = 26/7,     df = 2
    I2        = (26/7 - 2) / (26/7) = 6/13
    C         = 175 - 13125/175 = 100
    tau2      = (12/7) / 100 = 12/700

R:
    library(meta)
    metagen(TE = c(0.1, 0.3, 0.5), seTE = sqrt(c(0.01, 0.02, 0.04)),
            method.tau = "DL")
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from epistats.core.exceptions import DataError, DomainError, ValidationError
from epistats.distributions import t_quantile
from epistats.meta import MetaDesign, StudyEffect, meta_analysis, meta_from_tables

EFFECTS = [0.1, 0.3, 0.5]
VARIANCES = [0.01, 0.02, 0.04]
Z95 = 1.959963984540054


def _studies(effects=EFFECTS, variances=VARIANCES):
    return MetaDesign.from_arrays(effects, variances).studies


def _re_pooled(effects, variances, tau2):
    w = 1.0 / (np.asarray(variances) + tau2)
    return float(np.sum(w * effects) / w.sum()), math.sqrt(1.0 / w.sum())


class TestStudyEffect:

    def test_se(self):
        s = StudyEffect(name="A", effect=0.2, variance=0.04)
        assert s.se == pytest.approx(0.2)

    def test_from_se(self):
        s = StudyEffect.from_se("A", 0.2, 0.3)
        assert s.variance == pytest.approx(0.09)

    def test_from_ratio_ci(self):
        s = StudyEffect.from_ratio_ci("A", 2.0, 1.2, 3.3)
        assert s.effect == pytest.approx(math.log(2.0))
        assert s.se == pytest.approx((math.log(3.3) - math.log(1.2)) / (2 * Z95), rel=1e-10)

    @pytest.mark.parametrize("variance", [0.0, -0.1, math.inf, math.nan])
    def test_bad_variance(self, variance):
        with pytest.raises(DomainError):
            StudyEffect(name="A", effect=0.1, variance=variance)

    def test_non_finite_effect(self):
        with pytest.raises(DomainError):
            StudyEffect(name="A", effect=math.inf, variance=0.1)


class TestMetaDesign:

    def test_from_arrays(self):
        design = MetaDesign.from_arrays(EFFECTS, VARIANCES, names=["a", "b", "c"])
        assert design.k == 3
        assert design.names == ("a", "b", "c")
        assert_allclose(design.effects, EFFECTS)

    def test_default_names(self):
        assert MetaDesign.from_arrays(EFFECTS, VARIANCES).names == ("Study 1", "Study 2", "Study 3")

    def test_single_study(self):
        with pytest.raises(DataError) as exc_info:
            MetaDesign.from_arrays([0.1], [0.01])
        assert exc_info.value.required == "k >= 2"

    def test_names_length(self):
        with pytest.raises(DataError):
            MetaDesign.from_arrays(EFFECTS, VARIANCES, names=["a"])


class TestHeterogeneity:

    def test_hand_computed(self):
        sol = meta_analysis(_studies())
        assert sol.fixed.pooled == pytest.approx(3 / 14, rel=1e-12)
        assert sol.fixed.se == pytest.approx(math.sqrt(1 / 175), rel=1e-12)
        assert sol.Q == pytest.approx(26 / 7, rel=1e-12)
        assert sol.df == 2
        assert sol.I2 == pytest.approx(6 / 13, rel=1e-12)
        assert sol.H2 == pytest.approx(13 / 7, rel=1e-12)
        assert sol.tau2 == pytest.approx(12 / 700, rel=1e-12)

    def test_random_effects_pooling(self):
        sol = meta_analysis(_studies())
        pooled, se = _re_pooled(EFFECTS, VARIANCES, 12 / 700)
        assert sol.pooled == pytest.approx(pooled, rel=1e-12)
        assert sol.se == pytest.approx(se, rel=1e-12)
        assert_allclose(sol.ci.as_tuple(), (pooled - Z95 * se, pooled + Z95 * se), rtol=1e-10)

    def test_prediction_interval(self):
        sol = meta_analysis(_studies())
        half = t_quantile(0.975, 1) * math.sqrt(sol.tau2 + sol.se ** 2)
        assert_allclose(sol.pred_interval.as_tuple(), (sol.pooled - half, sol.pooled + half), rtol=1e-10)

    def test_weights_are_percentages(self):
        sol = meta_analysis(_studies())
        assert sol.weights.sum() == pytest.approx(100.0)
        assert np.all(np.diff(sol.weights) < 0)

    def test_i2_interval_contains_estimate(self):
        sol = meta_analysis(_studies())
        assert sol.I2_ci.lower <= sol.I2 <= sol.I2_ci.upper
        assert 0.0 <= sol.I2_ci.lower and sol.I2_ci.upper <= 1.0

    def test_i2_interval_undefined_for_two_homogeneous_studies(self):
        sol = meta_analysis(_studies([0.1, 0.12], [0.01, 0.01]))
        assert sol.I2_ci is None


class TestIdenticalStudies:
    """Identical studies: no heterogeneity, fixed and random coincide."""

    def test_fixed_equals_random(self):
        studies = _studies([0.4, 0.4, 0.4], [0.02, 0.05, 0.1])
        re = meta_analysis(studies)
        fe = meta_analysis(studies, method="fixed")
        assert re.tau2 == 0.0
        assert re.I2 == 0.0
        assert re.Q == pytest.approx(0.0, abs=1e-20)
        assert re.pooled == pytest.approx(0.4, rel=1e-12)
        assert fe.pooled == pytest.approx(re.pooled, rel=1e-12)
        assert fe.se == pytest.approx(re.se, rel=1e-12)

    def test_truncation_warning(self):
        sol = meta_analysis(_studies([0.4, 0.4, 0.4], [0.02, 0.05, 0.1]))
        assert "tau^2 estimate was negative and truncated at zero" in sol.warnings

    def test_hksj_undefined(self):
        with pytest.raises(DataError):
            meta_analysis(_studies([0.4, 0.4, 0.4], [0.02, 0.05, 0.1]), hksj=True)


class TestHKSJ:

    def test_t_interval(self):
        sol = meta_analysis(_studies(), hksj=True)
        plain = meta_analysis(_studies())
        w = 1.0 / (np.asarray(VARIANCES) + plain.tau2)
        q_star = float(np.sum(w * (np.asarray(EFFECTS) - plain.pooled) ** 2)) / 2
        se = math.sqrt(q_star / w.sum())
        assert sol.pooled == pytest.approx(plain.pooled, rel=1e-12)
        assert sol.se == pytest.approx(se, rel=1e-12)
        half = t_quantile(0.975, 2) * se
        assert_allclose(sol.ci.as_tuple(), (sol.pooled - half, sol.pooled + half), rtol=1e-10)
        assert sol.hksj

    def test_two_studies(self):
        with pytest.raises(DataError) as exc_info:
            meta_analysis(_studies([0.1, 0.3], [0.01, 0.02]), hksj=True)
        assert exc_info.value.required == "k >= 3"

    def test_fixed_effect_rejected(self):
        with pytest.raises(ValidationError):
            meta_analysis(_studies(), method="fixed", hksj=True)


class TestMetaAnalysisSolver:

    def test_fixed_effect(self):
        sol = meta_analysis(_studies(), method="fixed")
        assert sol.pooled == pytest.approx(3 / 14, rel=1e-12)
        assert sol.pred_interval is None
        assert sol.method == "fixed"

    def test_two_studies_have_no_prediction_interval(self):
        sol = meta_analysis(_studies([0.1, 0.5], [0.01, 0.02]))
        assert sol.pred_interval is None

    def test_unknown_method(self):
        with pytest.raises(ValidationError):
            meta_analysis(_studies(), method="bayes")

    def test_accepts_design(self):
        design = MetaDesign.from_arrays(EFFECTS, VARIANCES)
        assert meta_analysis(design).k == 3

    def test_summary(self):
        sol = meta_analysis(_studies(), hksj=True)
        text = sol.summary()
        assert "Hartung-Knapp" in text
        assert "I^2 = 46.2%" in text
        assert "Study 1" in text
        assert repr(sol).startswith("MetaSolution(k=3")


class TestMetaFromTables:

    TABLES = [
        [[12, 88], [20, 80]],
        [[5, 45], [9, 41]],
        [[30, 170], [42, 158]],
    ]

    def test_log_odds_ratios(self):
        sol = meta_from_tables(self.TABLES, measure="OR", method="fixed")
        a, b, c, d = 12, 88, 20, 80
        assert sol.studies[0].effect == pytest.approx(math.log(a * d / (b * c)), rel=1e-12)
        assert sol.studies[0].variance == pytest.approx(1 / a + 1 / b + 1 / c + 1 / d, rel=1e-12)
        assert sol.mantel_haenszel.measure == "OR"
        # Fixed-effect and MH pooled ORs agree closely without sparse data
        assert math.exp(sol.pooled) == pytest.approx(sol.mantel_haenszel.estimate.value, rel=0.1)

    def test_risk_difference_has_no_mh(self):
        sol = meta_from_tables(self.TABLES, measure="RD")
        assert sol.mantel_haenszel is None
        assert sol.studies[0].effect == pytest.approx(0.12 - 0.20)

    def test_zero_cell_corrected(self):
        sol = meta_from_tables([[[0, 50], [4, 46]]] + self.TABLES[1:], measure="RR")
        assert any("continuity correction 0.5" in w for w in sol.warnings)
        assert sol.studies[0].effect == pytest.approx(math.log((0.5 / 51) / (4.5 / 51)), rel=1e-12)

    def test_no_event_study_dropped(self):
        sol = meta_from_tables([[[0, 50], [0, 50]]] + self.TABLES, names=["z", "a", "b", "c"])
        assert sol.k == 3
        assert any(w.startswith("z: no events") for w in sol.warnings)

    def test_unknown_measure(self):
        with pytest.raises(ValidationError):
            meta_from_tables(self.TABLES, measure="HR")
