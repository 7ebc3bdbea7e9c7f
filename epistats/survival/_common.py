"""
Parameter payloads for survival analysis results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from epistats.core.result import DegenerateResult, Estimate, Interval


@dataclass(frozen=True)
class KMRow:
    """One row of a Kaplan-Meier life table.

    ``n_risk`` counts subjects at risk just before ``time``; ``censored``
    counts those censored at exactly ``time``.
    """

    time: float
    n_risk: int
    events: int
    censored: int
    survival: float
    se: float                    # Greenwood standard error of S(t)
    ci_lower: float
    ci_upper: float


@dataclass(frozen=True)
class KMGroupParams:
    """Kaplan-Meier estimate for one group.

    ``table[0]`` is the origin row (time 0, survival 1); one row follows
    for every distinct observed time. ``median`` and either bound of
    ``median_ci`` may be NOT_REACHED.
    """

    label: str
    n: int
    n_events: int
    table: tuple[KMRow, ...]
    median: float | DegenerateResult
    median_ci: Interval
    conf_level: float
    conf_type: str               # "log-log" (default), "log", "plain"


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier estimates keyed by group label, in sorted label order."""

    groups: dict[str, KMGroupParams]
    conf_level: float
    conf_type: str


@dataclass(frozen=True)
class LogRankParams:
    """
    Two-group log-rank test.

    ``hazard_ratio`` is the O/E ratio (O1/E1)/(O2/E2) with log SE
    sqrt(1/E1 + 1/E2). It is an approximation from the log-rank
    quantities, not a Cox partial-likelihood estimate.
    ``peto_hazard_ratio`` is the one-step exp((O1 - E1)/V), SE 1/sqrt(V).
    Group 1 is ``group_labels[0]``.
    """

    statistic: float             # chi-squared, 1 df
    df: int
    p_value: float
    group_labels: tuple[str, str]
    observed: tuple[int, int]
    expected: tuple[float, float]
    variance: float              # hypergeometric variance of O1 - E1
    n_per_group: tuple[int, int]
    hazard_ratio: Estimate | DegenerateResult
    peto_hazard_ratio: Estimate


@dataclass(frozen=True)
class RMSTParams:
    """Restricted mean survival time up to ``tau``."""

    label: str
    tau: float
    estimate: Estimate           # area under S(t) on [0, tau] with normal CI
