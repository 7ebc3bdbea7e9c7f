"""
Confidence intervals for a binomial proportion and for a difference of
two proportions.

    wald_ci            - normal approximation, clipped to [0, 1]
    wilson_ci          - score interval (Wilson 1927)
    agresti_coull_ci   - adjusted Wald (Agresti & Coull 1998)
    clopper_pearson_ci - exact interval from Beta quantiles
    newcombe_ci        - hybrid score interval for p1 - p2 (Newcombe 1998, method 10)

References:
    Newcombe, R. G. (1998). Interval estimation for the difference between
        independent proportions. Statistics in Medicine, 17, 873-890.
    Brown, L. D., Cai, T. T., & DasGupta, A. (2001). Interval estimation
        for a binomial proportion. Statistical Science, 16(2), 101-133.
"""

from __future__ import annotations

import math

from scipy import stats

from epistats.core.exceptions import DataError, DomainError
from epistats.core.result import Estimate, Interval
from epistats.core.validation import check_nonnegative_count, check_open_unit, check_probability
from epistats.distributions import z_for_conf_level

Z_95 = z_for_conf_level(0.95)


def _check_n(n: float) -> None:
    if not n >= 1:
        raise DataError(
            f"n must be at least 1, got {n}",
            required="n >= 1", actual=f"n = {n}",
        )


def wald_ci(p: float, n: float, z: float | None = None) -> Estimate:
    """Wald interval p ± z·sqrt(p(1-p)/n), clipped to [0, 1]."""
    check_probability(p, "p")
    _check_n(n)
    z = Z_95 if z is None else z
    se = math.sqrt(p * (1.0 - p) / n)
    return Estimate(
        value=p,
        ci=Interval(max(0.0, p - z * se), min(1.0, p + z * se)),
        se=se,
    )


def wilson_ci(p: float, n: float, z: float | None = None) -> Interval:
    """
    Wilson score interval.

    Valid for any n >= 1. For p = 0 or p = 1 the interval is asymmetric
    and has positive width, unlike the Wald interval.
    """
    check_probability(p, "p")
    _check_n(n)
    z = Z_95 if z is None else z
    z2 = z * z
    denom = 1.0 + z2 / n
    center = (p + z2 / (2.0 * n)) / denom
    margin = (z / denom) * math.sqrt(p * (1.0 - p) / n + z2 / (4.0 * n * n))
    return Interval(max(0.0, center - margin), min(1.0, center + margin))


def agresti_coull_ci(p: float, n: float, z: float | None = None) -> Interval:
    """Agresti-Coull interval: Wald interval around the adjusted proportion."""
    check_probability(p, "p")
    _check_n(n)
    z = Z_95 if z is None else z
    n_tilde = n + z * z
    p_tilde = (p * n + z * z / 2.0) / n_tilde
    se = math.sqrt(p_tilde * (1.0 - p_tilde) / n_tilde)
    return Interval(max(0.0, p_tilde - z * se), min(1.0, p_tilde + z * se))


def clopper_pearson_ci(x: int, n: int, alpha: float = 0.05) -> Interval:
    """
    Clopper-Pearson exact interval.

    lower = Beta^{-1}(alpha/2; x, n-x+1), 0 when x = 0
    upper = Beta^{-1}(1-alpha/2; x+1, n-x), 1 when x = n

    Coverage is at least 1 - alpha for every true proportion.
    """
    x = check_nonnegative_count(x, "x")
    n = check_nonnegative_count(n, "n")
    _check_n(n)
    if x > n:
        raise DomainError(
            f"x must not exceed n, got x={x}, n={n}",
            name="x", value=x, valid_range=f"[0, {n}]",
        )
    check_open_unit(alpha, "alpha")

    lower = 0.0 if x == 0 else float(stats.beta.ppf(alpha / 2.0, x, n - x + 1))
    upper = 1.0 if x == n else float(stats.beta.ppf(1.0 - alpha / 2.0, x + 1, n - x))
    return Interval(lower, upper)


def newcombe_ci(
    p1: float,
    n1: float,
    p2: float,
    n2: float,
    z: float | None = None,
) -> Estimate:
    """
    Hybrid score interval for the risk difference p1 - p2.

    Combines the two Wilson intervals (l1, u1) and (l2, u2):

        lower = d - sqrt((p1 - l1)^2 + (u2 - p2)^2)
        upper = d + sqrt((u1 - p1)^2 + (p2 - l2)^2)
    """
    z = Z_95 if z is None else z
    w1 = wilson_ci(p1, n1, z)
    w2 = wilson_ci(p2, n2, z)
    diff = p1 - p2
    lower = diff - math.sqrt((p1 - w1.lower) ** 2 + (p2 - w2.upper) ** 2)
    upper = diff + math.sqrt((p1 - w1.upper) ** 2 + (p2 - w2.lower) ** 2)
    return Estimate(value=diff, ci=Interval(lower, upper))
