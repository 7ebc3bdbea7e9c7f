"""
Two-group log-rank (Mantel-Cox) test.

Algorithm:
    1. At each distinct event time t_j, with n_1j, n_2j at risk and
       d_j = d_1j + d_2j events:
           E_1j = n_1j d_j / n_j
           V_j  = n_1j n_2j d_j (n_j - d_j) / (n_j^2 (n_j - 1))
    2. chi2 = (O_1 - E_1)^2 / V on 1 df

Hazard ratio from the same quantities:
    HR = (O_1 / E_1) / (O_2 / E_2),  SE(log HR) = sqrt(1/E_1 + 1/E_2)
This is the observed/expected approximation used by calculators and
older trial reports. It is not a Cox partial-likelihood estimate and can
differ from coxph() when hazards are far apart or groups unbalanced. The
Peto one-step estimate exp((O_1 - E_1)/V) is reported alongside.

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemother Rep, 50,
        163-170.
    Peto, R., et al. (1977). Design and analysis of randomized clinical
        trials requiring prolonged observation of each patient. II.
        Br J Cancer, 35, 1-39.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from epistats.core.exceptions import DataError
from epistats.core.result import INFINITE, DegenerateResult, Estimate, Interval
from epistats.distributions import chi2_sf, z_for_conf_level
from epistats.survival._common import LogRankParams


def _log_estimate(log_value: float, log_se: float, z: float) -> Estimate:
    return Estimate(
        value=math.exp(log_value),
        ci=Interval(math.exp(log_value - z * log_se), math.exp(log_value + z * log_se)),
        log_se=log_se,
    )


def logrank_test(
    time: NDArray,
    event: NDArray,
    group: NDArray,
    conf_level: float = 0.95,
    labels: tuple[str, ...] | None = None,
) -> LogRankParams:
    """Compute the two-group log-rank test and hazard ratio.

    Parameters
    ----------
    time, event : NDArray
        (n,) follow-up time and event indicator.
    group : NDArray
        (n,) group labels; exactly two distinct values. Group 1 is the
        first label in sorted order.
    labels : tuple of str, optional
        The distinct labels in the order to use instead of sorting.

    Raises
    ------
    DataError
        If there are not exactly two groups, or the test statistic has
        zero variance (no informative event times).
    """
    if labels is None:
        labels = tuple(np.unique(group))
    if len(labels) != 2:
        raise DataError(
            f"log-rank test compares exactly two groups, got {len(labels)}",
            required="2 groups", actual=f"{len(labels)} groups",
        )
    in_1 = group == labels[0]

    event_times = np.unique(time[event == 1])
    O1 = 0
    E1 = 0.0
    V = 0.0
    for t in event_times:
        at_risk = time >= t
        n1 = int(np.sum(at_risk & in_1))
        n2 = int(np.sum(at_risk & ~in_1))
        died = (time == t) & (event == 1)
        d1 = int(np.sum(died & in_1))
        d = int(np.sum(died))
        n_t = n1 + n2

        O1 += d1
        E1 += n1 * d / n_t
        if n_t > 1:
            V += n1 * n2 * d * (n_t - d) / (n_t * n_t * (n_t - 1))

    if V <= 0:
        raise DataError(
            "log-rank variance is zero; no event time has subjects at risk in both groups",
            required="events with both groups at risk",
        )

    total_events = int(np.sum(event))
    O2 = total_events - O1
    E2 = total_events - E1
    statistic = (O1 - E1) ** 2 / V
    z = z_for_conf_level(conf_level)

    hazard_ratio: Estimate | DegenerateResult
    if E1 <= 0 or E2 <= 0 or O1 == 0:
        hazard_ratio = DegenerateResult(
            "undefined",
            reason="hazard ratio needs observed events in group 1 and expected events in both groups",
        )
    elif O2 == 0:
        hazard_ratio = DegenerateResult(INFINITE.kind, reason="no events observed in group 2")
    else:
        log_hr = math.log((O1 / E1) / (O2 / E2))
        hazard_ratio = _log_estimate(log_hr, math.sqrt(1.0 / E1 + 1.0 / E2), z)

    return LogRankParams(
        statistic=statistic,
        df=1,
        p_value=chi2_sf(statistic, 1),
        group_labels=(str(labels[0]), str(labels[1])),
        observed=(O1, O2),
        expected=(E1, E2),
        variance=V,
        n_per_group=(int(np.sum(in_1)), int(np.sum(~in_1))),
        hazard_ratio=hazard_ratio,
        peto_hazard_ratio=_log_estimate((O1 - E1) / V, 1.0 / math.sqrt(V), z),
    )
