"""
Public API for survival analysis.

    kaplan_meier(time, event, group) → KMSolution
    logrank_test(time, event, group) → LogRankSolution
    restricted_mean_survival(km_group, tau) → RMSTParams

Each function validates inputs, creates a SurvivalDesign, runs the
estimator, and wraps the Result in a Solution.
"""

from __future__ import annotations

from typing import Literal

from epistats.core.compute.timing import Timer
from epistats.core.exceptions import DataError, ValidationError
from epistats.core.result import Result
from epistats.core.validation import check_conf_level
from epistats.survival._common import KMGroupParams, KMParams, RMSTParams
from epistats.survival._km import CONF_TYPES, kaplan_meier_fit, restricted_mean
from epistats.survival._logrank import logrank_test as _logrank_test
from epistats.survival.design import SurvivalDesign
from epistats.survival.solution import KMSolution, LogRankSolution


def kaplan_meier(
    time,
    event,
    group=None,
    *,
    conf_level: float = 0.95,
    conf_type: Literal["log-log", "log", "plain"] = "log-log",
) -> KMSolution:
    """Kaplan-Meier survival curves.

    Matches R's survival::survfit(Surv(time, event) ~ group,
    conf.type = "log-log").

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    group : array-like or None
        Group labels; one curve per distinct label, in sorted order.
    conf_level : float
        Confidence level for CI (default 0.95).
    conf_type : str
        CI transformation: "log-log" (default), "log", "plain".

    Returns
    -------
    KMSolution
    """
    design = SurvivalDesign.for_survival(time, event, group)
    check_conf_level(conf_level)
    if conf_type not in CONF_TYPES:
        raise ValidationError(
            f"conf_type must be 'log-log', 'log', or 'plain', got '{conf_type}'"
        )

    timer = Timer()
    timer.start()

    groups = {}
    for label in design.group_labels:
        t, e = design.subset(label)
        groups[label] = kaplan_meier_fit(
            t, e, label=label, conf_level=conf_level, conf_type=conf_type,
        )

    timer.stop()

    result = Result(
        params=KMParams(groups=groups, conf_level=conf_level, conf_type=conf_type),
        info={"method": "Kaplan-Meier", "n": design.n},
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=(),
    )

    return KMSolution(_result=result)


def logrank_test(
    time,
    event,
    group,
    *,
    conf_level: float = 0.95,
) -> LogRankSolution:
    """Two-group log-rank test with an observed/expected hazard ratio.

    The chi-squared statistic matches R's survival::survdiff(). The
    hazard ratio is (O1/E1)/(O2/E2), not a coxph() estimate.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    group : array-like
        Exactly two distinct labels. Group 1 is the first in sorted order.

    Returns
    -------
    LogRankSolution

    Raises
    ------
    DataError
        If there are not exactly two groups.
    """
    if group is None:
        raise DataError("log-rank test needs group labels", required="2 groups", actual="none")
    design = SurvivalDesign.for_survival(time, event, group)
    check_conf_level(conf_level)

    timer = Timer()
    timer.start()

    params = _logrank_test(
        design.time, design.event, design.group,
        conf_level=conf_level, labels=design.group_labels,
    )

    timer.stop()

    warnings = []
    if min(params.expected) < 5:
        warnings.append(
            f"smallest expected event count is {min(params.expected):.3g} (< 5); "
            f"the chi-squared approximation may be poor"
        )

    result = Result(
        params=params,
        info={"method": "Log-rank test", "hazard_ratio": "observed/expected"},
        timing=timer.result(),
        backend_name="cpu_logrank",
        warnings=tuple(warnings),
    )

    return LogRankSolution(_result=result)


def restricted_mean_survival(
    km_group: KMGroupParams,
    tau: float,
    *,
    conf_level: float = 0.95,
) -> RMSTParams:
    """Restricted mean survival time of one Kaplan-Meier group up to ``tau``."""
    check_conf_level(conf_level)
    return restricted_mean(km_group, tau, conf_level=conf_level)
