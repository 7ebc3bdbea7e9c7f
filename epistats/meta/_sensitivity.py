"""
Sensitivity views built on repeated calls to _pool().

    leave_one_out   - k runs, each excluding one study
    cumulative      - studies added one at a time in a caller-given order
    subgroups       - pooling within each subgroup plus Q-between
"""

from __future__ import annotations

from typing import Callable, Hashable, Sequence

import numpy as np

from epistats.core.exceptions import DataError, DimensionError
from epistats.distributions import chi2_sf
from epistats.meta._common import SensitivityRow, SubgroupParams
from epistats.meta._pooling import _pool, _single_study
from epistats.meta.design import MetaDesign, StudyEffect


def leave_one_out_rows(
    design: MetaDesign,
    method: str,
    hksj: bool,
    conf_level: float,
) -> tuple[SensitivityRow, ...]:
    effects, variances = design.effects, design.variances
    rows = []
    for i, study in enumerate(design.studies):
        mask = np.arange(design.k) != i
        rows.append(
            SensitivityRow(
                label=study.name,
                n_studies=design.k - 1,
                pooled=_pool(effects[mask], variances[mask], method, hksj, conf_level),
            )
        )
    return tuple(rows)


def order_studies(
    studies: tuple[StudyEffect, ...],
    order: Sequence | Callable[[StudyEffect], object] | None,
) -> tuple[StudyEffect, ...]:
    """
    Arrange studies for a cumulative analysis.

    ``order`` is None (input order), a callable key applied to each
    study, or a sequence of sort keys, one per study (e.g. publication
    years). Sorting is stable.
    """
    if order is None:
        return studies
    if callable(order):
        return tuple(sorted(studies, key=order))
    keys = list(order)
    if len(keys) != len(studies):
        raise DimensionError(
            f"order has {len(keys)} keys for {len(studies)} studies"
        )
    idx = sorted(range(len(studies)), key=lambda i: keys[i])
    return tuple(studies[i] for i in idx)


def cumulative_rows(
    studies: tuple[StudyEffect, ...],
    method: str,
    hksj: bool,
    conf_level: float,
) -> tuple[tuple[SensitivityRow, ...], int]:
    """
    Pool every prefix of ``studies``.

    A one-study prefix reports that study's own normal interval. When
    HKSJ is requested, the two-study prefix is pooled without it.

    Returns
    -------
    rows, n_without_hksj
    """
    effects = np.array([s.effect for s in studies], dtype=np.float64)
    variances = np.array([s.variance for s in studies], dtype=np.float64)

    rows = []
    skipped = 0
    for m in range(1, len(studies) + 1):
        if m == 1:
            pooled = _single_study(float(effects[0]), float(variances[0]), conf_level)
        else:
            use_hksj = hksj and m >= 3
            if hksj and not use_hksj:
                skipped += 1
            pooled = _pool(effects[:m], variances[:m], method, use_hksj, conf_level)
        rows.append(SensitivityRow(label=studies[m - 1].name, n_studies=m, pooled=pooled))
    return tuple(rows), skipped


def subgroup_pooling(
    design: MetaDesign,
    groups: Sequence[Hashable],
    method: str,
    conf_level: float,
) -> SubgroupParams:
    """
    Pool within subgroups and test for differences between them.

    Q_between = Q_overall - sum(Q_within), on (number of subgroups - 1)
    df. A subgroup with a single study reports that study alone and
    contributes no within-subgroup heterogeneity.
    """
    if len(groups) != design.k:
        raise DimensionError(f"groups has {len(groups)} labels for {design.k} studies")

    labels = list(dict.fromkeys(groups))
    if len(labels) < 2:
        raise DataError(
            "subgroup analysis needs at least two subgroups",
            required="2 or more distinct group labels", actual=f"{len(labels)}",
        )

    effects, variances = design.effects, design.variances
    group_arr = np.array([str(g) for g in groups])
    subgroups = {}
    for g in labels:
        mask = group_arr == str(g)
        if mask.sum() == 1:
            i = int(np.flatnonzero(mask)[0])
            subgroups[str(g)] = _single_study(float(effects[i]), float(variances[i]), conf_level)
        else:
            subgroups[str(g)] = _pool(effects[mask], variances[mask], method, False, conf_level)

    overall = _pool(effects, variances, method, False, conf_level)
    q_within = sum(p.Q for p in subgroups.values())
    q_between = max(0.0, overall.Q - q_within)
    df_between = len(labels) - 1

    return SubgroupParams(
        subgroups=subgroups,
        overall=overall,
        Q_within=q_within,
        Q_between=q_between,
        df_between=df_between,
        p_between=chi2_sf(q_between, df_between),
    )
