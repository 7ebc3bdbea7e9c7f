"""
Binomial, Poisson and hypergeometric distributions.

Thin wrappers over scipy.stats that return 0 outside the support instead
of relying on scipy's handling of out-of-range arguments.
"""

from __future__ import annotations

import math

from scipy import stats


def binomial_pmf(k: int, n: int, p: float) -> float:
    """P(X = k) for X ~ Binomial(n, p)."""
    if k < 0 or k > n:
        return 0.0
    return float(stats.binom.pmf(k, n, p))


def binomial_cdf(k: int, n: int, p: float) -> float:
    """P(X <= k) for X ~ Binomial(n, p)."""
    if k < 0:
        return 0.0
    return float(stats.binom.cdf(math.floor(k), n, p))


def poisson_cdf(k: int, lam: float) -> float:
    """P(X <= k) for X ~ Poisson(lam)."""
    if k < 0:
        return 0.0
    return float(stats.poisson.cdf(math.floor(k), lam))


def hypergeometric_pmf(k: int, N: int, K: int, n: int) -> float:
    """
    P(X = k) drawing n items without replacement from N containing K successes.

    Returns 0 outside the support max(0, n + K - N) <= k <= min(n, K).
    """
    if k < max(0, n + K - N) or k > min(n, K):
        return 0.0
    return float(stats.hypergeom.pmf(k, N, K, n))
