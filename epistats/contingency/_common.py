"""
Parameter payloads for contingency-table results.

Each dataclass is a frozen payload; TwoByTwoParams is carried inside a
Result[P] envelope by TwoByTwoSolution.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from epistats.core.result import INFINITE, DegenerateResult, Estimate


@dataclass(frozen=True)
class TableTestParams:
    """Outcome of a significance test on a table."""

    statistic: float | None      # None for exact tests
    df: int | None               # None for exact tests
    p_value: float
    method: str
    extras: dict[str, Any] = field(default_factory=dict)


def _nnt_ceil(x: float) -> int:
    # 1/(0.3 - 0.1) evaluates to 5.000000000000001; round before the ceiling
    return math.ceil(round(x, 9))


@dataclass(frozen=True)
class NNTResult:
    """Number needed to treat (benefit) or harm, from a risk difference.

    The risk difference is exposed minus unexposed (EER - CER), so a
    negative difference means the exposure prevents events (NNTB) and a
    positive one means it causes them (NNTH).
    """

    risk_difference: Estimate    # p1 - p2 with Newcombe interval
    value: int | DegenerateResult
    kind: str | None             # "NNTB", "NNTH", or None when infinite

    @classmethod
    def from_risk_difference(cls, rd: Estimate) -> NNTResult:
        if rd.value == 0:
            return cls(risk_difference=rd, value=INFINITE, kind=None)
        return cls(
            risk_difference=rd,
            value=_nnt_ceil(1.0 / abs(rd.value)),
            kind="NNTB" if rd.value < 0 else "NNTH",
        )

    @property
    def is_infinite(self) -> bool:
        return self.value == INFINITE

    @property
    def ci_spans_zero(self) -> bool:
        return self.risk_difference.lower <= 0 <= self.risk_difference.upper

    @property
    def nntb_bound(self) -> int | DegenerateResult:
        """NNTB at the benefit end of the interval (INFINITE if none)."""
        lower = self.risk_difference.lower
        return _nnt_ceil(1.0 / abs(lower)) if lower < 0 else INFINITE

    @property
    def nnth_bound(self) -> int | DegenerateResult:
        """NNTH at the harm end of the interval (INFINITE if none)."""
        upper = self.risk_difference.upper
        return _nnt_ceil(1.0 / upper) if upper > 0 else INFINITE

    def altman(self) -> str:
        """
        Confidence interval in Altman's notation.

        When the risk-difference interval includes zero the NNT interval
        passes through infinity and is written "NNTB x to ∞ to NNTH y".

        References:
            Altman, D. G. (1998). Confidence intervals for the number
                needed to treat. BMJ, 317, 1309-1312.
        """
        lower, upper = self.risk_difference.lower, self.risk_difference.upper
        if lower <= 0 <= upper:
            if lower < 0 and upper > 0:
                return f"NNTB {self.nntb_bound} to ∞ to NNTH {self.nnth_bound}"
            if lower < 0:
                return f"NNTB {self.nntb_bound} to ∞"
            if upper > 0:
                return f"∞ to NNTH {self.nnth_bound}"
            return "∞"
        near = _nnt_ceil(1.0 / max(abs(lower), abs(upper)))
        far = _nnt_ceil(1.0 / min(abs(lower), abs(upper)))
        prefix = "NNTH" if lower > 0 else "NNTB"
        return f"{prefix} {near} to {far}"

    def __str__(self) -> str:
        if self.is_infinite:
            return "NNT = ∞"
        return f"{self.kind} = {self.value}"


@dataclass(frozen=True)
class FragilityParams:
    """Fragility index search outcome."""

    index: int
    original_p: float
    modified_p: float
    modified_table: tuple[int, int, int, int]   # (a, b, c, d) after flips
    arm: str | None                             # "exposed", "unexposed", or None
    alpha: float

    @property
    def already_nonsignificant(self) -> bool:
        return self.original_p >= self.alpha


@dataclass(frozen=True)
class TwoByTwoParams:
    """All derived measures of a 2x2 table."""

    p1: float
    p2: float
    risk_ratio: Estimate
    odds_ratio: Estimate
    risk_difference: Estimate            # Wald interval
    risk_difference_newcombe: Estimate   # hybrid score interval
    nnt: NNTResult
    chisq: TableTestParams | None        # None when an outcome column is empty
    chisq_yates: TableTestParams | None
    fisher: TableTestParams
    af_exposed: float                    # (RR - 1) / RR
    paf: float                           # Levin's population attributable fraction
    continuity_corrected: bool
    conf_level: float


@dataclass(frozen=True)
class MantelHaenszelParams:
    """Pooled estimate across strata of 2x2 tables."""

    measure: str                 # "OR" or "RR"
    estimate: Estimate           # log_se carries SE of the log estimate
    stratum_estimates: tuple[float, ...]
    breslow_day: TableTestParams | None  # OR only
    n_strata: int


@dataclass(frozen=True)
class DiagnosticParams:
    """Test accuracy measures from a diagnostic 2x2 table."""

    sensitivity: Estimate
    specificity: Estimate
    ppv: Estimate | DegenerateResult
    npv: Estimate | DegenerateResult
    positive_lr: float | DegenerateResult
    negative_lr: float
    diagnostic_or: float | DegenerateResult
    accuracy: float
    prevalence: float
    youden_j: float


@dataclass(frozen=True)
class FaganParams:
    """Post-test probabilities from Bayes' theorem on the odds scale."""

    pre_test_prob: float
    pre_test_odds: float
    post_test_odds_positive: float | DegenerateResult
    post_test_odds_negative: float | DegenerateResult
    post_test_prob_positive: float
    post_test_prob_negative: float


@dataclass(frozen=True)
class InteractionParams:
    """Additive interaction measures from three relative risks."""

    reri: float                  # relative excess risk due to interaction
    attributable_proportion: float
    synergy_index: float | DegenerateResult
