"""
Common data types for meta-analysis.

Contains the frozen parameter payloads that go inside Result[P] envelopes.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from epistats.core.result import Estimate, Interval
from epistats.meta.design import StudyEffect


@dataclass(frozen=True)
class FixedEffectParams:
    """Inverse-variance fixed-effect estimate."""
    pooled: float
    se: float
    ci: Interval
    z: float
    p_value: float


@dataclass(frozen=True)
class PooledParams:
    """
    Parameter payload for one pooling run.

    ``I2`` is a fraction in [0, 1]; ``weights`` are percentages that sum
    to 100 and belong to the model named by ``method``. ``statistic`` is
    a z value, or a t value on k-1 df when ``hksj`` is set.
    """
    pooled: float
    ci: Interval
    se: float
    statistic: float
    p_value: float
    Q: float
    df: int
    p_het: float
    I2: float
    I2_ci: Interval | None
    H2: float
    tau2: float
    tau2_truncated: bool
    pred_interval: Interval | None
    weights: NDArray[np.float64]
    method: str                    # 'fixed' or 'random'
    hksj: bool
    k: int
    fixed: FixedEffectParams

    @property
    def estimate(self) -> Estimate:
        return Estimate(value=self.pooled, ci=self.ci, se=self.se)

    @property
    def tau(self) -> float:
        return float(np.sqrt(self.tau2))


@dataclass(frozen=True)
class EggerParams:
    """Egger's regression test for funnel-plot asymmetry."""
    intercept: float
    slope: float
    se: float               # SE of the intercept
    t: float
    df: int
    p_value: float


@dataclass(frozen=True)
class SensitivityRow:
    """One pooling run of a leave-one-out or cumulative analysis.

    For leave-one-out ``label`` names the excluded study; for cumulative
    it names the study added last.
    """
    label: str
    n_studies: int
    pooled: PooledParams


@dataclass(frozen=True)
class SensitivityParams:
    kind: str                      # 'leave_one_out' or 'cumulative'
    rows: tuple[SensitivityRow, ...]


@dataclass(frozen=True)
class TrimFillParams:
    """Duval & Tweedie trim-and-fill outcome."""
    k0: int
    estimator: str                 # 'L0' or 'R0'
    original: PooledParams
    adjusted: PooledParams
    imputed: tuple[StudyEffect, ...]


@dataclass(frozen=True)
class SubgroupParams:
    """Per-subgroup pooling and the between-subgroup heterogeneity test."""
    subgroups: dict[str, PooledParams]
    overall: PooledParams
    Q_within: float
    Q_between: float
    df_between: int
    p_between: float
