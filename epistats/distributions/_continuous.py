"""
Chi-squared, Student t and F distributions.

Used for heterogeneity and contingency p-values (chi-squared), HKSJ and
prediction-interval critical values (t), and Clopper-Pearson bounds (F).
"""

from __future__ import annotations

import math

from scipy import stats

from epistats.core.exceptions import DomainError
from epistats.distributions._normal import normal_quantile


def _check_df(df: float, name: str = "df") -> None:
    if not df > 0:
        raise DomainError(
            f"{name} must be positive, got {df}",
            name=name, value=df, valid_range="(0, inf]",
        )


def _check_p(p: float, fn: str) -> None:
    if not (0.0 < p < 1.0):
        raise DomainError(
            f"{fn}: p must be in (0, 1), got {p}",
            name="p", value=p, valid_range="(0, 1)",
        )


def chi2_cdf(x: float, df: float) -> float:
    """P(X <= x) for X ~ chi-squared(df)."""
    _check_df(df)
    if x <= 0:
        return 0.0
    return float(stats.chi2.cdf(x, df))


def chi2_sf(x: float, df: float) -> float:
    """Upper tail P(X > x); use this for p-values to avoid 1 - cdf cancellation."""
    _check_df(df)
    if x <= 0:
        return 1.0
    return float(stats.chi2.sf(x, df))


def chi2_quantile(p: float, df: float) -> float:
    """Inverse chi-squared CDF."""
    _check_df(df)
    _check_p(p, "chi2_quantile")
    return float(stats.chi2.ppf(p, df))


def t_cdf(x: float, df: float) -> float:
    """Student t CDF."""
    _check_df(df)
    if math.isinf(df):
        return float(stats.norm.cdf(x))
    return float(stats.t.cdf(x, df))


def t_quantile(p: float, df: float) -> float:
    """
    Inverse Student t CDF.

    df may be ``math.inf``, in which case the normal quantile is returned.
    """
    _check_df(df)
    _check_p(p, "t_quantile")
    if math.isinf(df):
        return normal_quantile(p)
    return float(stats.t.ppf(p, df))


def t_two_sided_p(t_stat: float, df: float) -> float:
    """Two-sided p-value 2 * P(T > |t|)."""
    _check_df(df)
    if math.isinf(df):
        return float(2.0 * stats.norm.sf(abs(t_stat)))
    return float(2.0 * stats.t.sf(abs(t_stat), df))


def f_quantile(p: float, df1: float, df2: float) -> float:
    """Inverse F CDF."""
    _check_df(df1, "df1")
    _check_df(df2, "df2")
    _check_p(p, "f_quantile")
    return float(stats.f.ppf(p, df1, df2))
