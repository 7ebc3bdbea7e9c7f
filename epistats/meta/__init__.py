"""
Meta-analysis engine.

Inverse-variance fixed and DerSimonian-Laird random effects with optional
Hartung-Knapp-Sidik-Jonkman adjustment, heterogeneity statistics, and
sensitivity and bias analyses built on one pooling routine.

Public API:
    meta_analysis(studies)                 - pooled estimate
    meta_from_tables(tables, measure)      - pooling of 2x2 tables (+ MH)
    leave_one_out(studies)                 - k runs omitting one study
    cumulative_meta_analysis(studies)      - studies added in order
    egger_test(effects, se)                - funnel-plot asymmetry
    trim_and_fill(studies)                 - Duval & Tweedie adjustment
    subgroup_analysis(studies, groups)     - Q-between test
"""

from epistats.meta.design import StudyEffect, MetaDesign
from epistats.meta.solvers import (
    meta_analysis,
    meta_from_tables,
    leave_one_out,
    cumulative_meta_analysis,
    egger_test,
    trim_and_fill,
    subgroup_analysis,
)
from epistats.meta._common import (
    FixedEffectParams,
    PooledParams,
    EggerParams,
    SensitivityRow,
    SensitivityParams,
    TrimFillParams,
    SubgroupParams,
)
from epistats.meta.solution import MetaSolution, SensitivitySolution

__all__ = [
    "StudyEffect",
    "MetaDesign",
    "meta_analysis",
    "meta_from_tables",
    "leave_one_out",
    "cumulative_meta_analysis",
    "egger_test",
    "trim_and_fill",
    "subgroup_analysis",
    "FixedEffectParams",
    "PooledParams",
    "EggerParams",
    "SensitivityRow",
    "SensitivityParams",
    "TrimFillParams",
    "SubgroupParams",
    "MetaSolution",
    "SensitivitySolution",
]
