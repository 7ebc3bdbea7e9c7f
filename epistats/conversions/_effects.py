"""
Closed-form conversions between effect measures.

    or_to_rr(OR, p0)   = OR / (1 - p0 + p0 OR)                (Zhang & Yu 1998)
    rr_to_or(RR, p0)   = RR (1 - p0) / (1 - RR p0)
    or_to_d(OR)        = ln(OR) / 1.81                        (logit-probit, pi/sqrt(3))
    d_to_or(d)         = exp(1.81 d)
    d_to_hedges_g(d)   = d (1 - 3 / (4 (n1 + n2 - 2) - 1))
    r_to_d(r)          = 2 r / sqrt(1 - r^2)
    d_to_r(d)          = d / sqrt(d^2 + 4)

p0 is the risk in the unexposed (control) group.

References:
    Zhang, J., & Yu, K. F. (1998). What's the relative risk? JAMA, 280,
        1690-1691.
    Chinn, S. (2000). A simple method for converting an odds ratio to
        effect size for use in meta-analysis. Stat Med, 19, 3127-3131.
    Hedges, L. V., & Olkin, I. (1985). Statistical Methods for
        Meta-Analysis.
"""

from __future__ import annotations

import math

from epistats.core.exceptions import DataError, DomainError
from epistats.core.validation import check_positive

LOGIT_PROBIT = 1.81


def _check_baseline_risk(p0: float) -> None:
    if not (0.0 <= p0 < 1.0):
        raise DomainError(
            f"p0 must be in [0, 1), got {p0}",
            name="p0", value=p0, valid_range="[0, 1)",
        )


def _check_finite(x: float, name: str) -> None:
    if not math.isfinite(x):
        raise DomainError(
            f"{name} must be finite, got {x}",
            name=name, value=x, valid_range="(-inf, inf)",
        )


def or_to_rr(or_: float, p0: float) -> float:
    check_positive(or_, "or_")
    _check_baseline_risk(p0)
    return or_ / (1.0 - p0 + p0 * or_)


def rr_to_or(rr: float, p0: float) -> float:
    check_positive(rr, "rr")
    _check_baseline_risk(p0)
    if rr * p0 >= 1.0:
        raise DomainError(
            f"rr * p0 must be < 1 (exposed risk below 1), got {rr} * {p0} = {rr * p0}",
            name="rr", value=rr, valid_range=f"(0, {1.0 / p0})" if p0 > 0 else "(0, inf)",
        )
    return rr * (1.0 - p0) / (1.0 - rr * p0)


def or_to_d(or_: float) -> float:
    check_positive(or_, "or_")
    return math.log(or_) / LOGIT_PROBIT


def d_to_or(d: float) -> float:
    _check_finite(d, "d")
    return math.exp(LOGIT_PROBIT * d)


def hedges_correction(n1: int, n2: int) -> float:
    """Small-sample bias correction factor J = 1 - 3 / (4 df - 1)."""
    df = n1 + n2 - 2
    if df < 1:
        raise DataError(
            f"Hedges' correction needs n1 + n2 >= 3, got {n1} + {n2}",
            required="n1 + n2 >= 3", actual=f"n1 + n2 = {n1 + n2}",
        )
    return 1.0 - 3.0 / (4.0 * df - 1.0)


def d_to_hedges_g(d: float, n1: int, n2: int) -> float:
    _check_finite(d, "d")
    return d * hedges_correction(n1, n2)


def hedges_g_to_d(g: float, n1: int, n2: int) -> float:
    _check_finite(g, "g")
    return g / hedges_correction(n1, n2)


def r_to_d(r: float) -> float:
    if not (-1.0 < r < 1.0):
        raise DomainError(
            f"r must be in (-1, 1), got {r}",
            name="r", value=r, valid_range="(-1, 1)",
        )
    return 2.0 * r / math.sqrt(1.0 - r * r)


def d_to_r(d: float) -> float:
    _check_finite(d, "d")
    return d / math.sqrt(d * d + 4.0)


def cohen_label(d: float) -> str:
    """Cohen's conventional magnitude label for a standardized difference."""
    size = abs(d)
    if size < 0.2:
        return "negligible"
    if size < 0.5:
        return "small"
    if size < 0.8:
        return "medium"
    return "large"
