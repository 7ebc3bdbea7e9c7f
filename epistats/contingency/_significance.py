"""
Significance tests on 2x2 and 2xk tables.

    chisq_test           - Pearson chi-squared, 1 df, optional Yates correction
    fisher_exact         - two-sided exact conditional test
    mcnemar_test         - paired proportions, asymptotic or exact binomial
    two_proportion_z_test
    cochran_armitage_trend

Fisher's two-sided p-value sums the probabilities of every table with the
observed margins whose probability does not exceed that of the observed
table; scipy.stats.fisher_exact computes it the way R's fisher.test() does.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike
from scipy import stats

from epistats.contingency._common import TableTestParams
from epistats.contingency.design import ContingencyTable
from epistats.core.exceptions import DataError
from epistats.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_nonnegative_count,
)
from epistats.distributions import binomial_cdf, chi2_sf, hypergeometric_pmf, normal_cdf


def chisq_test(table: ContingencyTable, correct: bool = False) -> TableTestParams:
    """
    Pearson chi-squared test of independence on a 2x2 table (1 df).

    With ``correct=True`` Yates' continuity correction is applied:
    n (max(0, |ad - bc| - n/2))^2 / (r1 r2 c1 c2).

    Raises
    ------
    DataError
        If a row or column total is zero (statistic undefined).
    """
    a, b, c, d = table.a, table.b, table.c, table.d
    n = table.n
    denom = float(table.n1) * table.n2 * table.m1 * table.m2
    if denom == 0:
        raise DataError(
            "chi-squared statistic is undefined when a row or column total is zero",
            required="all margins > 0",
            actual=f"rows=({table.n1}, {table.n2}), cols=({table.m1}, {table.m2})",
        )

    cross = float(a) * d - float(b) * c
    if correct:
        numerator = n * max(0.0, abs(cross) - n / 2.0) ** 2
        method = "Pearson's Chi-squared test with Yates' continuity correction"
    else:
        numerator = n * cross ** 2
        method = "Pearson's Chi-squared test"

    statistic = numerator / denom
    expected = np.outer([table.n1, table.n2], [table.m1, table.m2]) / n

    return TableTestParams(
        statistic=statistic,
        df=1,
        p_value=chi2_sf(statistic, 1),
        method=method,
        extras={"expected": expected, "min_expected": float(expected.min())},
    )


def fisher_exact(table: ContingencyTable) -> TableTestParams:
    """
    Fisher's exact test, two-sided.

    Conditions on all margins; the count in cell a follows a
    hypergeometric distribution.
    """
    _, p_value = stats.fisher_exact(table.to_array(), alternative="two-sided")
    p_obs = hypergeometric_pmf(table.a, table.n, table.n1, table.m1)

    return TableTestParams(
        statistic=None,
        df=None,
        p_value=float(p_value),
        method="Fisher's Exact Test for Count Data",
        extras={"p_observed": p_obs},
    )


def mcnemar_test(b: int, c: int, exact: bool = False, correct: bool = False) -> TableTestParams:
    """
    McNemar's test for paired binary data.

    Parameters
    ----------
    b, c : int
        Discordant pair counts.
    exact : bool
        Use the exact two-sided binomial test on b given b + c.
    correct : bool
        Continuity correction for the asymptotic statistic,
        (|b - c| - 1)^2 / (b + c).

    Raises
    ------
    DataError
        If b + c = 0 (no discordant pairs).
    """
    b = check_nonnegative_count(b, "b")
    c = check_nonnegative_count(c, "c")
    n = b + c
    if n == 0:
        raise DataError(
            "McNemar's test needs at least one discordant pair",
            required="b + c > 0", actual="b + c = 0",
        )

    if exact:
        p_value = min(1.0, 2.0 * binomial_cdf(min(b, c), n, 0.5))
        return TableTestParams(
            statistic=None,
            df=None,
            p_value=p_value,
            method="Exact McNemar test (binomial)",
        )

    diff = abs(b - c)
    if correct:
        statistic = max(0.0, diff - 1.0) ** 2 / n
        method = "McNemar's Chi-squared test with continuity correction"
    else:
        statistic = float(diff) ** 2 / n
        method = "McNemar's Chi-squared test"

    return TableTestParams(
        statistic=statistic,
        df=1,
        p_value=chi2_sf(statistic, 1),
        method=method,
    )


def two_proportion_z_test(
    x1: int,
    n1: int,
    x2: int,
    n2: int,
    pooled: bool = True,
    correct: bool = False,
) -> TableTestParams:
    """Two-sample z-test for proportions (pooled or unpooled SE)."""
    x1 = check_nonnegative_count(x1, "x1")
    x2 = check_nonnegative_count(x2, "x2")
    n1 = check_nonnegative_count(n1, "n1")
    n2 = check_nonnegative_count(n2, "n2")
    if x1 > n1 or x2 > n2:
        raise DataError(
            "successes cannot exceed trials",
            required="x1 <= n1 and x2 <= n2",
            actual=f"x1={x1}, n1={n1}, x2={x2}, n2={n2}",
        )
    table = ContingencyTable.for_counts(x1, n1 - x1, x2, n2 - x2)
    p1, p2 = table.p1, table.p2
    diff = p1 - p2

    if pooled:
        p_pool = (x1 + x2) / (n1 + n2)
        se = math.sqrt(p_pool * (1.0 - p_pool) * (1.0 / n1 + 1.0 / n2))
    else:
        se = math.sqrt(p1 * (1.0 - p1) / n1 + p2 * (1.0 - p2) / n2)
    if se == 0:
        raise DataError(
            "standard error is zero; both groups are all events or all non-events",
            required="0 < pooled proportion < 1",
        )

    cc = 0.5 * (1.0 / n1 + 1.0 / n2) if correct else 0.0
    z = max(0.0, abs(diff) - cc) / se
    return TableTestParams(
        statistic=z,
        df=None,
        p_value=2.0 * (1.0 - normal_cdf(z)),
        method="Two-proportion z-test" + (" (pooled)" if pooled else " (unpooled)"),
        extras={"p1": p1, "p2": p2, "difference": diff, "se": se},
    )


def cochran_armitage_trend(
    counts: ArrayLike,
    totals: ArrayLike,
    scores: ArrayLike | None = None,
) -> TableTestParams:
    """
    Cochran-Armitage test for trend in proportions across ordered groups.

    Parameters
    ----------
    counts : array-like
        Events per group.
    totals : array-like
        Subjects per group.
    scores : array-like or None
        Dose scores; defaults to 0, 1, 2, ...
    """
    counts = check_array(counts, "counts")
    totals = check_array(totals, "totals")
    check_1d(counts, "counts")
    check_1d(totals, "totals")
    check_consistent_length(counts, totals, names=("counts", "totals"))
    k = counts.shape[0]
    if k < 2:
        raise DataError(
            "trend test needs at least two groups",
            required="k >= 2", actual=f"k = {k}",
        )
    if scores is None:
        scores = np.arange(k, dtype=np.float64)
    else:
        scores = check_array(scores, "scores")
        check_consistent_length(counts, scores, names=("counts", "scores"))

    N = totals.sum()
    p_bar = counts.sum() / N
    s_bar = np.sum(totals * scores) / N
    T = float(np.sum(counts * (scores - s_bar)))
    var_t = p_bar * (1.0 - p_bar) * (np.sum(totals * scores ** 2) - np.sum(totals * scores) ** 2 / N)
    if var_t <= 0:
        raise DataError(
            "trend statistic has zero variance (constant scores or no variation in outcome)",
        )
    z = T / math.sqrt(var_t)
    return TableTestParams(
        statistic=z,
        df=None,
        p_value=2.0 * (1.0 - normal_cdf(abs(z))),
        method="Cochran-Armitage test for trend",
        extras={"T": T, "var_T": float(var_t)},
    )
