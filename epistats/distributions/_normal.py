"""
Standard normal distribution.

normal_quantile uses Acklam's rational approximation (relative error
~1.15e-9) followed by one Halley refinement step against the exact
erfc-based CDF, which brings the absolute error to near machine precision
on the whole of (0, 1).

References:
    Acklam, P. J. (2003). An algorithm for computing the inverse normal
        cumulative distribution function.
"""

from __future__ import annotations

import math

from scipy import special

from epistats.core.exceptions import DomainError

# Acklam coefficients
_A = (
    -3.969683028665376e+01, 2.209460984245205e+02,
    -2.759285104469687e+02, 1.383577518672690e+02,
    -3.066479806614716e+01, 2.506628277459239e+00,
)
_B = (
    -5.447609879822406e+01, 1.615858368580409e+02,
    -1.556989798598866e+02, 6.680131188771972e+01,
    -1.328068155288572e+01,
)
_C = (
    -7.784894002430293e-03, -3.223964580411365e-01,
    -2.400758277161838e+00, -2.549732539343734e+00,
    4.374664141464968e+00, 2.938163982698783e+00,
)
_D = (
    7.784695709041462e-03, 3.224671290700398e-01,
    2.445134137142996e+00, 3.754408661907416e+00,
)

_P_LOW = 0.02425
_P_HIGH = 1.0 - _P_LOW
_SQRT2 = math.sqrt(2.0)
_SQRT2PI = math.sqrt(2.0 * math.pi)


def normal_pdf(x: float) -> float:
    """Standard normal density."""
    return math.exp(-0.5 * x * x) / _SQRT2PI


def normal_cdf(x: float) -> float:
    """Standard normal CDF, Phi(x), via the complementary error function."""
    return 0.5 * float(special.erfc(-x / _SQRT2))


def _acklam(p: float) -> float:
    if p < _P_LOW:
        q = math.sqrt(-2.0 * math.log(p))
        return ((((((_C[0] * q + _C[1]) * q + _C[2]) * q + _C[3]) * q + _C[4]) * q + _C[5])
                / ((((_D[0] * q + _D[1]) * q + _D[2]) * q + _D[3]) * q + 1.0))
    if p <= _P_HIGH:
        q = p - 0.5
        r = q * q
        return ((((((_A[0] * r + _A[1]) * r + _A[2]) * r + _A[3]) * r + _A[4]) * r + _A[5]) * q
                / (((((_B[0] * r + _B[1]) * r + _B[2]) * r + _B[3]) * r + _B[4]) * r + 1.0))
    q = math.sqrt(-2.0 * math.log(1.0 - p))
    return -((((((_C[0] * q + _C[1]) * q + _C[2]) * q + _C[3]) * q + _C[4]) * q + _C[5])
             / ((((_D[0] * q + _D[1]) * q + _D[2]) * q + _D[3]) * q + 1.0))


def normal_quantile(p: float) -> float:
    """
    Inverse standard normal CDF.

    Parameters
    ----------
    p : float
        Probability in the open interval (0, 1).

    Returns
    -------
    float
        x such that Phi(x) = p.

    Raises
    ------
    DomainError
        If p is not in (0, 1).
    """
    if not (0.0 < p < 1.0):
        raise DomainError(
            f"normal_quantile: p must be in (0, 1), got {p}",
            name="p", value=p, valid_range="(0, 1)",
        )
    if p == 0.5:
        return 0.0
    if p > 0.5:
        # 1 - p is exact here; Phi(x) - p is not
        return -normal_quantile(1.0 - p)

    x = _acklam(p)

    # One step of Halley's method
    e = normal_cdf(x) - p
    u = e * _SQRT2PI * math.exp(0.5 * x * x)
    return x - u / (1.0 + 0.5 * x * u)


def z_for_conf_level(conf_level: float) -> float:
    """Two-sided critical value, e.g. 1.959964 for conf_level=0.95."""
    if not (0.0 < conf_level < 1.0):
        raise DomainError(
            f"conf_level must be in (0, 1), got {conf_level}",
            name="conf_level", value=conf_level, valid_range="(0, 1)",
        )
    return normal_quantile(0.5 + conf_level / 2.0)
