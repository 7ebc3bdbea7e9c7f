"""
Public API for meta-analysis.

    meta_analysis(studies) → MetaSolution
    meta_from_tables(tables, measure) → MetaSolution
    leave_one_out(studies) → SensitivitySolution
    cumulative_meta_analysis(studies, order) → SensitivitySolution
    egger_test(effects, se) → EggerParams
    trim_and_fill(studies) → TrimFillParams
    subgroup_analysis(studies, groups) → SubgroupParams

Each function validates inputs, builds a MetaDesign, calls the shared
pooling routine, and wraps the Result in a Solution where one exists.
"""

from __future__ import annotations

import math
from typing import Callable, Hashable, Literal, Sequence

import numpy as np
from numpy.typing import ArrayLike

from epistats.contingency._mantel_haenszel import mantel_haenszel as _mantel_haenszel
from epistats.contingency.design import ContingencyTable
from epistats.core.compute.timing import Timer
from epistats.core.exceptions import DataError, ValidationError
from epistats.core.result import Result
from epistats.core.validation import (
    check_1d,
    check_array,
    check_conf_level,
    check_consistent_length,
    check_finite,
)
from epistats.meta._bias import egger_regression
from epistats.meta._bias import trim_and_fill as _trim_and_fill
from epistats.meta._common import EggerParams, PooledParams, SensitivityParams, SubgroupParams, TrimFillParams
from epistats.meta._pooling import _pool
from epistats.meta._sensitivity import (
    cumulative_rows,
    leave_one_out_rows,
    order_studies,
    subgroup_pooling,
)
from epistats.meta.design import MetaDesign, StudyEffect, as_design
from epistats.meta.solution import MetaSolution, SensitivitySolution

Method = Literal["fixed", "random"]


def _pool_warnings(params: PooledParams) -> list[str]:
    warnings = []
    if params.tau2_truncated:
        warnings.append("tau^2 estimate was negative and truncated at zero")
    return warnings


def _run(design: MetaDesign, method: str, hksj: bool, conf_level: float, info: dict,
         extra_warnings=()) -> MetaSolution:
    timer = Timer()
    timer.start()
    with timer.section("pooling"):
        params = _pool(design.effects, design.variances, method, hksj, conf_level)
    timer.stop()

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name="cpu_meta",
        warnings=tuple(extra_warnings) + tuple(_pool_warnings(params)),
    )
    return MetaSolution(_result=result, _design=design)


def meta_analysis(
    studies: Sequence[StudyEffect] | MetaDesign,
    *,
    method: Method = "random",
    hksj: bool = False,
    conf_level: float = 0.95,
) -> MetaSolution:
    """Inverse-variance meta-analysis.

    Matches R's meta::metagen(TE, seTE, method.tau = "DL").

    Parameters
    ----------
    studies : sequence of StudyEffect or MetaDesign
        At least two studies; ratio measures on the log scale.
    method : str
        "random" (DerSimonian-Laird, default) or "fixed".
    hksj : bool
        Hartung-Knapp-Sidik-Jonkman CI on k - 1 df (k >= 3, random only).
    conf_level : float
        Confidence level for the pooled CI and the prediction interval.

    Returns
    -------
    MetaSolution

    Raises
    ------
    DataError
        If k < 2, or ``hksj`` with k < 3.
    """
    check_conf_level(conf_level)
    design = as_design(studies)
    return _run(
        design, method, hksj, conf_level,
        info={"method": method, "hksj": hksj, "tau2_estimator": "DL"},
    )


def _table_effect(table: ContingencyTable, measure: str, correction: float) -> tuple[float, float]:
    a, b, c, d = table.corrected_cells(correction)
    n1, n2 = a + b, c + d
    if measure == "OR":
        return math.log(a * d / (b * c)), 1.0 / a + 1.0 / b + 1.0 / c + 1.0 / d
    if measure == "RR":
        return math.log((a / n1) / (c / n2)), 1.0 / a - 1.0 / n1 + 1.0 / c - 1.0 / n2
    p1, p2 = a / n1, c / n2
    return p1 - p2, p1 * (1.0 - p1) / n1 + p2 * (1.0 - p2) / n2


def meta_from_tables(
    tables: Sequence[ContingencyTable | ArrayLike],
    *,
    measure: Literal["OR", "RR", "RD"] = "OR",
    names: Sequence[str] | None = None,
    method: Method = "random",
    hksj: bool = False,
    conf_level: float = 0.95,
    correction: float = 0.5,
) -> MetaSolution:
    """Meta-analysis of 2x2 tables.

    Study effects are log OR, log RR or RD with ``correction`` added to
    every cell of a table that has a zero cell. For OR and RR, tables
    with no events (or only events) in both arms carry no information
    and are dropped with a warning; the Mantel-Haenszel estimate over
    the remaining tables is attached as ``mantel_haenszel``.
    """
    if measure not in ("OR", "RR", "RD"):
        raise ValidationError(f"measure must be 'OR', 'RR' or 'RD', got {measure!r}")
    check_conf_level(conf_level)
    tables = [t if isinstance(t, ContingencyTable) else ContingencyTable.from_array(t) for t in tables]
    if names is None:
        names = [f"Study {i + 1}" for i in range(len(tables))]
    elif len(names) != len(tables):
        raise DataError(
            f"names has {len(names)} entries for {len(tables)} tables",
            required=f"len(names) = {len(tables)}", actual=f"len(names) = {len(names)}",
        )

    warnings = []
    kept_tables = []
    studies = []
    for name, table in zip(names, tables):
        table.require_row_totals()
        if measure != "RD" and (table.m1 == 0 or table.m2 == 0):
            warnings.append(f"{name}: no events or only events in both arms; study dropped")
            continue
        effect, variance = _table_effect(table, measure, correction)
        studies.append(StudyEffect(name=str(name), effect=effect, variance=variance))
        kept_tables.append(table)
        if table.has_zero_cell and correction > 0:
            warnings.append(f"{name}: continuity correction {correction} applied")

    design = MetaDesign.for_studies(studies)
    mh = None
    if measure != "RD":
        mh = _mantel_haenszel(kept_tables, measure=measure, conf_level=conf_level)

    return _run(
        design, method, hksj, conf_level,
        info={
            "method": method,
            "hksj": hksj,
            "tau2_estimator": "DL",
            "measure": measure,
            "mantel_haenszel": mh,
        },
        extra_warnings=warnings,
    )


def leave_one_out(
    studies: Sequence[StudyEffect] | MetaDesign,
    *,
    method: Method = "random",
    hksj: bool = False,
    conf_level: float = 0.95,
) -> SensitivitySolution:
    """Re-pool k times, omitting one study each time.

    Raises
    ------
    DataError
        If k < 3 (k < 4 with ``hksj``), so that every run keeps enough studies.
    """
    check_conf_level(conf_level)
    design = as_design(studies, min_k=4 if hksj else 3)

    timer = Timer()
    timer.start()
    rows = leave_one_out_rows(design, method, hksj, conf_level)
    timer.stop()

    warnings = []
    n_truncated = sum(r.pooled.tau2_truncated for r in rows)
    if n_truncated:
        warnings.append(f"tau^2 truncated at zero in {n_truncated} of {len(rows)} runs")

    result = Result(
        params=SensitivityParams(kind="leave_one_out", rows=rows),
        info={"method": method, "hksj": hksj},
        timing=timer.result(),
        backend_name="cpu_meta",
        warnings=tuple(warnings),
    )
    return SensitivitySolution(_result=result)


def cumulative_meta_analysis(
    studies: Sequence[StudyEffect] | MetaDesign,
    *,
    order: Sequence | Callable[[StudyEffect], object] | None = None,
    method: Method = "random",
    hksj: bool = False,
    conf_level: float = 0.95,
) -> SensitivitySolution:
    """Pool studies cumulatively in the given order.

    Parameters
    ----------
    order : None, sequence or callable
        None keeps input order; a sequence gives one sort key per study
        (e.g. publication year); a callable is a key on StudyEffect.
    """
    check_conf_level(conf_level)
    design = as_design(studies)
    ordered = order_studies(design.studies, order)

    timer = Timer()
    timer.start()
    rows, n_without_hksj = cumulative_rows(ordered, method, hksj, conf_level)
    timer.stop()

    warnings = []
    if n_without_hksj:
        warnings.append("HKSJ adjustment not applied to the 2-study step (needs k >= 3)")

    result = Result(
        params=SensitivityParams(kind="cumulative", rows=rows),
        info={"method": method, "hksj": hksj},
        timing=timer.result(),
        backend_name="cpu_meta",
        warnings=tuple(warnings),
    )
    return SensitivitySolution(_result=result)


def egger_test(effects: ArrayLike, se: ArrayLike) -> EggerParams:
    """Egger's regression test for funnel-plot asymmetry (k >= 3)."""
    effects = check_array(effects, "effects")
    se = check_array(se, "se")
    check_1d(effects, "effects")
    check_1d(se, "se")
    check_consistent_length(effects, se, names=("effects", "se"))
    check_finite(effects, "effects")
    check_finite(se, "se")
    if np.any(se <= 0):
        raise ValidationError("se: every standard error must be positive")
    return egger_regression(effects, se)


def trim_and_fill(
    studies: Sequence[StudyEffect] | MetaDesign,
    *,
    estimator: Literal["L0", "R0"] = "L0",
    side: Literal["left", "right"] = "left",
    method: Method = "random",
    conf_level: float = 0.95,
) -> TrimFillParams:
    """Duval & Tweedie trim and fill (k >= 3)."""
    check_conf_level(conf_level)
    design = as_design(studies, min_k=3)
    return _trim_and_fill(
        design.studies,
        estimator=estimator,
        side=side,
        method=method,
        conf_level=conf_level,
    )


def subgroup_analysis(
    studies: Sequence[StudyEffect] | MetaDesign,
    groups: Sequence[Hashable],
    *,
    method: Method = "random",
    conf_level: float = 0.95,
) -> SubgroupParams:
    """Pool within subgroups; Q-between tests for subgroup differences."""
    check_conf_level(conf_level)
    design = as_design(studies)
    return subgroup_pooling(design, groups, method, conf_level)
