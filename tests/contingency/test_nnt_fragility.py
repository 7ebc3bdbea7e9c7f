"""
Tests for the number needed to treat and the fragility index.
"""

import pytest

from epistats.contingency import (
    ContingencyTable,
    fisher_exact,
    fragility_index,
    number_needed_to_treat,
)
from epistats.contingency._common import NNTResult
from epistats.core.exceptions import DomainError
from epistats.core.result import INFINITE, Estimate, Interval


def _nnt(rd, lower, upper):
    return NNTResult.from_risk_difference(Estimate(value=rd, ci=Interval(lower, upper)))


class TestNNT:

    def test_benefit(self):
        """Treatment halves a 30% event rate: RD = -0.15, NNTB = 7."""
        res = number_needed_to_treat(ContingencyTable.for_counts(15, 85, 30, 70))
        assert res.kind == "NNTB"
        assert res.value == 7
        assert str(res) == "NNTB = 7"
        assert not res.ci_spans_zero

    def test_harm(self):
        res = number_needed_to_treat(ContingencyTable.for_counts(30, 70, 15, 85))
        assert res.kind == "NNTH"
        assert res.value == 7

    def test_exact_reciprocal_not_rounded_up(self):
        """1 / 0.2 is 5 in floating point only after rounding."""
        assert _nnt(-(0.3 - 0.1), -0.35, -0.05).value == 5

    def test_zero_difference_is_infinite(self):
        res = number_needed_to_treat(ContingencyTable.for_counts(50, 50, 50, 50))
        assert res.value == INFINITE
        assert res.kind is None
        assert str(res) == "NNT = ∞"
        assert res.altman() == "NNTB 8 to ∞ to NNTH 8"

    def test_altman_interval_excluding_zero(self):
        res = _nnt(-0.15, -0.25, -0.05)
        assert res.altman() == "NNTB 4 to 20"

    def test_altman_harm_interval(self):
        res = _nnt(0.15, 0.05, 0.25)
        assert res.altman() == "NNTH 4 to 20"

    def test_altman_spanning_zero(self):
        res = _nnt(-0.05, -0.10, 0.04)
        assert res.ci_spans_zero
        assert res.nntb_bound == 10
        assert res.nnth_bound == 25
        assert res.altman() == "NNTB 10 to ∞ to NNTH 25"

    def test_altman_touching_zero(self):
        assert _nnt(-0.05, -0.10, 0.0).altman() == "NNTB 10 to ∞"
        assert _nnt(0.05, 0.0, 0.10).altman() == "∞ to NNTH 10"


class TestFragility:

    SIGNIFICANT = ContingencyTable.for_counts(1, 99, 12, 88)

    def test_index_restores_non_significance(self):
        res = fragility_index(self.SIGNIFICANT)
        assert res.original_p < 0.05
        assert res.modified_p >= 0.05
        assert res.index >= 1
        assert res.arm == "unexposed"
        assert not res.already_nonsignificant

    def test_one_fewer_flip_still_significant(self):
        res = fragility_index(self.SIGNIFICANT)
        a, b, c, d = res.modified_table
        previous = ContingencyTable(a, b, c + 1, d - 1)
        assert fisher_exact(previous).p_value < 0.05

    def test_flips_move_events_to_non_events(self):
        res = fragility_index(self.SIGNIFICANT)
        a, b, c, d = res.modified_table
        assert (a, b) == (1, 99)
        assert c == 12 - res.index
        assert d == 88 + res.index

    def test_exposed_arm_when_exposed_risk_higher(self):
        res = fragility_index(ContingencyTable.for_counts(12, 88, 1, 99))
        assert res.arm == "exposed"

    def test_already_nonsignificant(self):
        res = fragility_index(ContingencyTable.for_counts(10, 90, 12, 88))
        assert res.index == 0
        assert res.arm is None
        assert res.already_nonsignificant
        assert res.modified_table == (10, 90, 12, 88)

    def test_stricter_alpha_is_less_fragile(self):
        loose = fragility_index(self.SIGNIFICANT, alpha=0.05)
        strict = fragility_index(self.SIGNIFICANT, alpha=0.01)
        assert strict.index <= loose.index

    def test_bad_alpha(self):
        with pytest.raises(DomainError):
            fragility_index(self.SIGNIFICANT, alpha=0.0)
