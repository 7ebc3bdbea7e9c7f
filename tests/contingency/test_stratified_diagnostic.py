"""
Tests for Mantel-Haenszel pooling, diagnostic accuracy, the Fagan
nomogram and additive interaction.

Two strata used throughout:

    stratum 1: [[10, 20], [5, 25]]   (n = 60)
    stratum 2: [[8, 12], [4, 16]]    (n = 40)

    OR_MH = (10*25/60 + 8*16/40) / (20*5/60 + 12*4/40) = 7.36667 / 2.86667
    RR_MH = (10*30/60 + 8*20/40) / (5*30/60 + 4*20/40) = 9 / 4.5 = 2
"""

import math

import numpy as np
import pytest
from scipy import stats

from epistats.contingency import (
    ContingencyTable,
    additive_interaction,
    auc_trapezoidal,
    diagnostic_accuracy,
    fagan_nomogram,
    mantel_haenszel,
    odds_ratio,
)
from epistats.core.exceptions import DataError, DomainError, ValidationError
from epistats.core.result import INFINITE, UNDEFINED

STRATA = [[[10, 20], [5, 25]], [[8, 12], [4, 16]]]


class TestMantelHaenszel:

    def test_odds_ratio(self):
        sol = mantel_haenszel(STRATA)
        expected = (10 * 25 / 60 + 8 * 16 / 40) / (20 * 5 / 60 + 12 * 4 / 40)
        assert sol.measure == "OR"
        assert sol.estimate.value == pytest.approx(expected, rel=1e-12)
        assert sol.estimate.lower < expected < sol.estimate.upper
        assert sol.n_strata == 2
        assert sol.stratum_estimates == pytest.approx((2.5, 128 / 48))

    def test_risk_ratio(self):
        sol = mantel_haenszel(STRATA, measure="RR")
        assert sol.estimate.value == pytest.approx(2.0, rel=1e-12)
        assert sol.breslow_day is None

    def test_single_stratum_equals_crude(self):
        """With one stratum the MH odds ratio is the crude odds ratio."""
        sol = mantel_haenszel([STRATA[0]])
        crude = odds_ratio(ContingencyTable.from_array(STRATA[0]))
        assert sol.estimate.value == pytest.approx(crude.value, rel=1e-12)
        assert sol.estimate.log_se == pytest.approx(crude.log_se, rel=1e-10)
        assert sol.breslow_day is None

    def test_homogeneous_strata_breslow_day_zero(self):
        sol = mantel_haenszel([STRATA[0], STRATA[0], STRATA[0]])
        assert sol.estimate.value == pytest.approx(2.5, rel=1e-12)
        assert sol.breslow_day.df == 2
        assert sol.breslow_day.statistic == pytest.approx(0.0, abs=1e-10)
        assert sol.breslow_day.p_value == pytest.approx(1.0)

    def test_heterogeneous_strata_flagged(self):
        sol = mantel_haenszel([[[40, 10], [10, 40]], [[10, 40], [40, 10]]])
        assert sol.breslow_day.p_value < 0.001

    def test_empty_row_stratum_dropped(self):
        sol = mantel_haenszel(STRATA + [[[0, 0], [3, 7]]])
        assert sol.n_strata == 2
        assert any("dropped" in w for w in sol.warnings)

    def test_unknown_measure(self):
        with pytest.raises(ValidationError):
            mantel_haenszel(STRATA, measure="RD")

    def test_no_discordance(self):
        with pytest.raises(DataError):
            mantel_haenszel([[[5, 0], [0, 5]]])

    def test_summary(self):
        text = mantel_haenszel(STRATA).summary()
        assert "Breslow-Day" in text
        assert "MH OR" in text


class TestDiagnosticAccuracy:

    def test_measures(self):
        res = diagnostic_accuracy(tp=90, fp=20, fn=10, tn=80)
        assert res.sensitivity.value == pytest.approx(0.9)
        assert res.specificity.value == pytest.approx(0.8)
        assert res.ppv.value == pytest.approx(90 / 110)
        assert res.npv.value == pytest.approx(80 / 90)
        assert res.positive_lr == pytest.approx(4.5)
        assert res.negative_lr == pytest.approx(0.125)
        assert res.diagnostic_or == pytest.approx(36.0)
        assert res.accuracy == pytest.approx(0.85)
        assert res.prevalence == pytest.approx(0.5)
        assert res.youden_j == pytest.approx(0.7)

    def test_wilson_intervals(self):
        res = diagnostic_accuracy(tp=90, fp=20, fn=10, tn=80)
        assert res.sensitivity.lower < 0.9 < res.sensitivity.upper
        assert res.sensitivity.upper < 1.0

    def test_perfect_specificity(self):
        res = diagnostic_accuracy(tp=40, fp=0, fn=10, tn=50)
        assert res.positive_lr == INFINITE
        assert res.diagnostic_or == INFINITE
        assert res.specificity.lower < 1.0

    def test_no_positive_results(self):
        res = diagnostic_accuracy(tp=0, fp=0, fn=10, tn=50)
        assert res.positive_lr == UNDEFINED
        assert "no positive test results" in res.positive_lr.reason
        assert res.diagnostic_or == UNDEFINED
        assert res.negative_lr == pytest.approx(1.0)
        assert res.ppv == UNDEFINED
        assert res.npv.value == pytest.approx(50 / 60)

    def test_no_diseased_subjects(self):
        with pytest.raises(DataError, match="sensitivity"):
            diagnostic_accuracy(tp=0, fp=5, fn=0, tn=20)

    def test_zero_specificity(self):
        with pytest.raises(DataError):
            diagnostic_accuracy(tp=10, fp=5, fn=2, tn=0)


class TestFagan:

    def test_post_test_probabilities(self):
        res = fagan_nomogram(0.25, 4.5, 0.125)
        assert res.pre_test_odds == pytest.approx(1 / 3)
        assert res.post_test_prob_positive == pytest.approx(0.6)
        assert res.post_test_prob_negative == pytest.approx(0.04)

    def test_unit_lr_leaves_probability_unchanged(self):
        res = fagan_nomogram(0.3, 1.0, 1.0)
        assert res.post_test_prob_positive == pytest.approx(0.3)

    def test_bad_inputs(self):
        with pytest.raises(DomainError):
            fagan_nomogram(1.0, 2.0, 0.5)
        with pytest.raises(DomainError):
            fagan_nomogram(0.2, -1.0, 0.5)
        with pytest.raises(DomainError):
            fagan_nomogram(0.2, 2.0, math.nan)

    def test_infinite_positive_lr(self):
        res = fagan_nomogram(0.25, INFINITE, 0.2)
        assert res.post_test_odds_positive == INFINITE
        assert res.post_test_prob_positive == 1.0
        assert res.post_test_prob_negative == pytest.approx(0.0625)

    def test_zero_negative_lr(self):
        res = fagan_nomogram(0.25, 4.0, 0.0)
        assert res.post_test_prob_negative == 0.0

    def test_chains_from_perfect_specificity(self):
        acc = diagnostic_accuracy(tp=40, fp=0, fn=10, tn=50)
        res = fagan_nomogram(0.1, acc.positive_lr, acc.negative_lr)
        assert res.post_test_prob_positive == 1.0
        assert res.post_test_prob_negative == pytest.approx(0.1 * 0.2 / (0.9 + 0.1 * 0.2))

    def test_undefined_lr(self):
        with pytest.raises(DataError, match="undefined"):
            fagan_nomogram(0.2, UNDEFINED, 0.5)


class TestAUC:

    def test_single_point_is_balanced_accuracy(self):
        # Triangle plus trapezoid: 0.3 * 0.8 / 2 + 0.7 * 1.8 / 2 = 0.75
        res = auc_trapezoidal([0.8], [0.7], 50, 50)
        assert res.value == pytest.approx(0.75, rel=1e-12)

    def test_hanley_mcneil_se(self):
        res = auc_trapezoidal([0.8], [0.7], 50, 50)
        a = 0.75
        q1 = a / (2 - a)
        q2 = 2 * a * a / (1 + a)
        var = (a * (1 - a) + 49 * (q1 - a * a) + 49 * (q2 - a * a)) / 2500
        assert res.se == pytest.approx(math.sqrt(var), rel=1e-12)
        assert res.lower == pytest.approx(0.75 - 1.959963984540054 * res.se, rel=1e-9)

    def test_order_of_points_irrelevant(self):
        sens = [0.95, 0.8, 0.6, 0.3]
        spec = [0.4, 0.7, 0.85, 0.97]
        a = auc_trapezoidal(sens, spec, 30, 70)
        b = auc_trapezoidal(sens[::-1], spec[::-1], 30, 70)
        assert a.value == pytest.approx(b.value, rel=1e-12)

    def test_empirical_roc_matches_mann_whitney(self, rng):
        diseased = rng.integers(0, 10, size=40)
        healthy = rng.integers(0, 8, size=60)
        thresholds = np.unique(np.concatenate([diseased, healthy]))
        sens = [np.mean(diseased >= t) for t in thresholds]
        spec = [np.mean(healthy < t) for t in thresholds]
        res = auc_trapezoidal(sens, spec, 40, 60)
        u = stats.mannwhitneyu(diseased, healthy).statistic
        assert res.value == pytest.approx(u / (40 * 60), rel=1e-12)

    def test_perfect_test(self):
        res = auc_trapezoidal([1.0], [1.0], 20, 20)
        assert res.value == 1.0
        assert res.se == 0.0
        assert res.upper == 1.0

    def test_bad_inputs(self):
        with pytest.raises(DomainError):
            auc_trapezoidal([1.2], [0.5], 10, 10)
        with pytest.raises(DataError):
            auc_trapezoidal([0.8], [0.7], 0, 10)
        with pytest.raises(DataError):
            auc_trapezoidal([], [], 10, 10)


class TestAdditiveInteraction:

    def test_measures(self):
        res = additive_interaction(4.0, 2.0, 1.5)
        assert res.reri == pytest.approx(1.5)
        assert res.attributable_proportion == pytest.approx(0.375)
        assert res.synergy_index == pytest.approx(2.0)

    def test_no_interaction(self):
        res = additive_interaction(2.5, 2.0, 1.5)
        assert res.reri == pytest.approx(0.0, abs=1e-12)
        assert res.synergy_index == pytest.approx(1.0)

    def test_synergy_index_infinite(self):
        res = additive_interaction(3.0, 1.5, 0.5)
        assert res.synergy_index == INFINITE
        assert not math.isnan(res.reri)

    def test_nonpositive_rr(self):
        with pytest.raises(DomainError):
            additive_interaction(0.0, 1.0, 1.0)
