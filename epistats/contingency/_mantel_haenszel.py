"""
Mantel-Haenszel pooled odds ratio and risk ratio across strata.

OR_MH = sum(a d / n) / sum(b c / n), with the Robins-Breslow-Greenland
variance of log OR_MH and the Breslow-Day test of homogeneity.

RR_MH = sum(a n2 / n) / sum(c n1 / n), with the Greenland-Robins variance
of log RR_MH.

References:
    Robins, J., Breslow, N., & Greenland, S. (1986). Estimators of the
        Mantel-Haenszel variance consistent in both sparse data and
        large-strata limiting models. Biometrics, 42, 311-323.
    Breslow, N. E., & Day, N. E. (1980). Statistical Methods in Cancer
        Research, Vol. I.
"""

from __future__ import annotations

import math
from typing import Sequence

from epistats.contingency._common import MantelHaenszelParams, TableTestParams
from epistats.contingency.design import ContingencyTable
from epistats.core.exceptions import DataError, ValidationError
from epistats.core.result import Estimate, Interval
from epistats.distributions import chi2_sf, z_for_conf_level


def mantel_haenszel(
    tables: Sequence[ContingencyTable],
    measure: str = "OR",
    conf_level: float = 0.95,
) -> MantelHaenszelParams:
    """Pool stratified 2x2 tables with the Mantel-Haenszel estimator."""
    if measure not in ("OR", "RR"):
        raise ValidationError(f"measure must be 'OR' or 'RR', got {measure!r}")
    if len(tables) < 1:
        raise DataError("need at least one stratum", required="k >= 1", actual="k = 0")

    z = z_for_conf_level(conf_level)
    if measure == "OR":
        return _mh_odds_ratio(tables, z)
    return _mh_risk_ratio(tables, z)


def _mh_odds_ratio(tables: Sequence[ContingencyTable], z: float) -> MantelHaenszelParams:
    sum_r = sum_s = 0.0
    sum_pr = sum_ps = sum_qs_pr = 0.0
    stratum = []

    for t in tables:
        n = t.n
        r = t.a * t.d / n
        s = t.b * t.c / n
        p = (t.a + t.d) / n
        q = (t.b + t.c) / n
        sum_r += r
        sum_s += s
        sum_pr += p * r
        sum_ps += q * s
        sum_qs_pr += p * s + q * r
        stratum.append(t.a * t.d / (t.b * t.c) if t.b * t.c > 0 else math.inf)

    if sum_r == 0 or sum_s == 0:
        raise DataError(
            "Mantel-Haenszel odds ratio is 0 or infinite; every stratum has a zero in ad or bc",
            required="sum(ad/n) > 0 and sum(bc/n) > 0",
        )

    or_mh = sum_r / sum_s
    var_log = (
        sum_pr / (2.0 * sum_r ** 2)
        + sum_qs_pr / (2.0 * sum_r * sum_s)
        + sum_ps / (2.0 * sum_s ** 2)
    )
    log_se = math.sqrt(var_log)
    log_or = math.log(or_mh)

    return MantelHaenszelParams(
        measure="OR",
        estimate=Estimate(
            value=or_mh,
            ci=Interval(math.exp(log_or - z * log_se), math.exp(log_or + z * log_se)),
            log_se=log_se,
        ),
        stratum_estimates=tuple(stratum),
        breslow_day=_breslow_day(tables, or_mh) if len(tables) > 1 else None,
        n_strata=len(tables),
    )


def _expected_a(t: ContingencyTable, common_or: float) -> float:
    """Cell a expected under a common odds ratio, given the stratum margins.

    Solves A (n - r1 - c1 + A) = OR (r1 - A)(c1 - A) for the root inside
    the admissible range.
    """
    n, r1, c1 = t.n, t.n1, t.m1
    lo, hi = max(0, r1 + c1 - n), min(r1, c1)
    if abs(common_or - 1.0) < 1e-12:
        return r1 * c1 / n

    qa = 1.0 - common_or
    qb = (n - r1 - c1) + common_or * (r1 + c1)
    qc = -common_or * r1 * c1
    disc = math.sqrt(max(0.0, qb * qb - 4.0 * qa * qc))
    for root in ((-qb + disc) / (2.0 * qa), (-qb - disc) / (2.0 * qa)):
        if lo - 1e-9 <= root <= hi + 1e-9:
            return root
    raise DataError(f"no admissible expected count for stratum {t}")


def _breslow_day(tables: Sequence[ContingencyTable], common_or: float) -> TableTestParams:
    statistic = 0.0
    for t in tables:
        ea = _expected_a(t, common_or)
        eb = t.n1 - ea
        ec = t.m1 - ea
        ed = t.n - t.n1 - ec
        if min(ea, eb, ec, ed) <= 0:
            continue
        var_a = 1.0 / (1.0 / ea + 1.0 / eb + 1.0 / ec + 1.0 / ed)
        statistic += (t.a - ea) ** 2 / var_a

    df = len(tables) - 1
    return TableTestParams(
        statistic=statistic,
        df=df,
        p_value=chi2_sf(statistic, df),
        method="Breslow-Day test of homogeneity of odds ratios",
    )


def _mh_risk_ratio(tables: Sequence[ContingencyTable], z: float) -> MantelHaenszelParams:
    num = den = var_num = 0.0
    stratum = []

    for t in tables:
        n = t.n
        num += t.a * t.n2 / n
        den += t.c * t.n1 / n
        var_num += (t.n1 * t.n2 * t.m1 - t.a * t.c * n) / n ** 2
        stratum.append((t.a / t.n1) / (t.c / t.n2) if t.c > 0 and t.n1 > 0 else math.inf)

    if num == 0 or den == 0:
        raise DataError(
            "Mantel-Haenszel risk ratio is 0 or infinite",
            required="events in both exposure groups",
        )

    rr_mh = num / den
    log_se = math.sqrt(var_num / (num * den))
    log_rr = math.log(rr_mh)

    return MantelHaenszelParams(
        measure="RR",
        estimate=Estimate(
            value=rr_mh,
            ci=Interval(math.exp(log_rr - z * log_se), math.exp(log_rr + z * log_se)),
            log_se=log_se,
        ),
        stratum_estimates=tuple(stratum),
        breslow_day=None,
        n_strata=len(tables),
    )
