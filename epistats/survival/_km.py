"""
Kaplan-Meier product-limit estimator.

- Product-limit survival estimate: S(t) = prod(1 - d_j / n_j)
- Greenwood variance: Var(S(t)) = S(t)^2 * sum(d_j / (n_j * (n_j - d_j)))
- Confidence intervals via log-log (default), log, or plain transformation

Ties: all events and censorings at one time form a single row. The risk
set at that time includes the subjects censored there; they leave after
the row.

The median is the first time with S(t) <= 0.5, never interpolated. Its
interval runs from the first time the lower band reaches 0.5 to the first
time the upper band does (Brookmeyer & Crowley).

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
    Brookmeyer, R., & Crowley, J. (1982). A confidence interval for the
        median survival time. Biometrics, 38, 29-41.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from epistats.core.exceptions import DataError, ValidationError
from epistats.core.result import NOT_REACHED, Estimate, Interval
from epistats.distributions import normal_cdf, z_for_conf_level
from epistats.survival._common import KMGroupParams, KMRow, RMSTParams

CONF_TYPES = ("log-log", "log", "plain")


def _ci(survival: float, greenwood: float, z: float, conf_type: str) -> tuple[float, float]:
    """Pointwise CI for S(t); collapses to S when S is 0 or 1."""
    if survival <= 0.0 or survival >= 1.0:
        return survival, survival

    if conf_type == "log-log":
        log_s = math.log(survival)
        se_loglog = math.sqrt(greenwood) / abs(log_s)
        loglog = math.log(-log_s)
        lower = math.exp(-math.exp(loglog + z * se_loglog))
        upper = math.exp(-math.exp(loglog - z * se_loglog))
    elif conf_type == "log":
        # se of log(S) = se(S) / S = sqrt(greenwood)
        half = z * math.sqrt(greenwood)
        lower = survival * math.exp(-half)
        upper = survival * math.exp(half)
    elif conf_type == "plain":
        se = survival * math.sqrt(greenwood)
        lower = survival - z * se
        upper = survival + z * se
    else:
        raise ValidationError(
            f"Unknown conf_type '{conf_type}'. Choose from 'log-log', 'log', 'plain'."
        )
    return max(0.0, lower), min(1.0, upper)


def kaplan_meier_fit(
    time: NDArray,
    event: NDArray,
    label: str = "all",
    conf_level: float = 0.95,
    conf_type: str = "log-log",
) -> KMGroupParams:
    """Compute the Kaplan-Meier curve for one group.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    label : str
        Group label carried into the result.
    conf_level : float
        Confidence level for pointwise and median CIs.
    conf_type : str
        "log-log" (default), "log", or "plain".

    Returns
    -------
    KMGroupParams
    """
    if conf_type not in CONF_TYPES:
        raise ValidationError(
            f"Unknown conf_type '{conf_type}'. Choose from 'log-log', 'log', 'plain'."
        )
    n = len(time)
    if n == 0:
        raise DataError(f"group {label!r} has no observations", required="n >= 1", actual="n = 0")

    z = z_for_conf_level(conf_level)
    unique_times, inverse = np.unique(time, return_inverse=True)
    d_at = np.bincount(inverse, weights=event, minlength=len(unique_times)).astype(int)
    total_at = np.bincount(inverse, minlength=len(unique_times))

    rows = [KMRow(time=0.0, n_risk=n, events=0, censored=0, survival=1.0, se=0.0,
                  ci_lower=1.0, ci_upper=1.0)]
    n_risk = n
    survival = 1.0
    greenwood = 0.0

    for t, d, total in zip(unique_times, d_at, total_at):
        d = int(d)
        c = int(total) - d
        if d > 0:
            survival *= 1.0 - d / n_risk
            if n_risk > d:
                greenwood += d / (n_risk * (n_risk - d))
        lower, upper = _ci(survival, greenwood, z, conf_type)
        rows.append(
            KMRow(
                time=float(t),
                n_risk=n_risk,
                events=d,
                censored=c,
                survival=survival,
                se=survival * math.sqrt(greenwood),
                ci_lower=lower,
                ci_upper=upper,
            )
        )
        n_risk -= d + c

    table = tuple(rows)
    return KMGroupParams(
        label=label,
        n=n,
        n_events=int(d_at.sum()),
        table=table,
        median=_first_time_at_or_below(table, "survival"),
        median_ci=Interval(
            _first_time_at_or_below(table, "ci_lower"),
            _first_time_at_or_below(table, "ci_upper"),
        ),
        conf_level=conf_level,
        conf_type=conf_type,
    )


def _first_time_at_or_below(table: tuple[KMRow, ...], column: str, level: float = 0.5):
    for row in table[1:]:
        if getattr(row, column) <= level:
            return row.time
    return NOT_REACHED


def survival_at(km: KMGroupParams, t: float) -> float:
    """S(t) read off the step function (right-continuous)."""
    value = 1.0
    for row in km.table:
        if row.time > t:
            break
        value = row.survival
    return value


def restricted_mean(km: KMGroupParams, tau: float, conf_level: float = 0.95) -> RMSTParams:
    """
    Restricted mean survival time: the area under S(t) on [0, tau].

    Variance (Klein & Moeschberger 4.5):
        sum over event times t_j <= tau of A_j^2 d_j / (n_j (n_j - d_j)),
    where A_j is the area under S(t) from t_j to tau.

    Raises
    ------
    DataError
        If tau exceeds the largest observed time, where S(t) is unknown.
    """
    last = km.table[-1].time
    if not tau > 0:
        raise DataError(f"tau must be positive, got {tau}", required="tau > 0")
    if tau > last:
        raise DataError(
            f"tau = {tau} exceeds the last observed time {last} in group {km.label!r}",
            required=f"tau <= {last}", actual=f"tau = {tau}",
        )

    # Step function knots up to tau
    knots = [row.time for row in km.table if row.time < tau] + [tau]
    levels = [row.survival for row in km.table if row.time < tau]
    pieces = np.diff(knots) * np.array(levels)
    area = float(pieces.sum())

    # Area from each knot to tau
    tail = np.cumsum(pieces[::-1])[::-1]
    variance = 0.0
    for row, a_j in zip(km.table[1:], tail[1:]):
        if row.time >= tau:
            break
        if row.events > 0 and row.n_risk > row.events:
            variance += a_j ** 2 * row.events / (row.n_risk * (row.n_risk - row.events))

    se = math.sqrt(variance)
    z = z_for_conf_level(conf_level)
    return RMSTParams(
        label=km.label,
        tau=tau,
        estimate=Estimate(value=area, ci=Interval(area - z * se, area + z * se), se=se),
    )


def rmst_difference(a: RMSTParams, b: RMSTParams, conf_level: float = 0.95) -> tuple[Estimate, float]:
    """Difference a - b of two independent RMSTs with its two-sided p-value."""
    diff = a.estimate.value - b.estimate.value
    se = math.sqrt(a.estimate.se ** 2 + b.estimate.se ** 2)
    z = z_for_conf_level(conf_level)
    if se == 0:
        raise DataError(
            "RMST difference has zero standard error (no events before tau)",
            required="at least one event before tau",
        )
    est = Estimate(value=diff, ci=Interval(diff - z * se, diff + z * se), se=se)
    return est, 2.0 * (1.0 - normal_cdf(abs(diff / se)))
