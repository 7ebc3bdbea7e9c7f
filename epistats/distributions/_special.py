"""
Gamma and beta special functions used by the exact interval estimators.

Thin wrappers over scipy.special that add argument checks so that bad
input raises DomainError instead of quietly returning NaN.
"""

from __future__ import annotations

from scipy import special

from epistats.core.exceptions import DomainError


def log_gamma(x: float) -> float:
    """log |Gamma(x)|."""
    return float(special.gammaln(x))


def log_beta(a: float, b: float) -> float:
    """log B(a, b) for a, b > 0."""
    if a <= 0 or b <= 0:
        raise DomainError(
            f"log_beta: a and b must be positive, got a={a}, b={b}",
            name="a, b", value=(a, b), valid_range="(0, inf)",
        )
    return float(special.betaln(a, b))


def regularized_incomplete_beta(x: float, a: float, b: float) -> float:
    """I_x(a, b), the Beta(a, b) CDF evaluated at x."""
    if not (0.0 <= x <= 1.0):
        raise DomainError(
            f"regularized_incomplete_beta: x must be in [0, 1], got {x}",
            name="x", value=x, valid_range="[0, 1]",
        )
    if a <= 0 or b <= 0:
        raise DomainError(
            f"regularized_incomplete_beta: a and b must be positive, got a={a}, b={b}",
            name="a, b", value=(a, b), valid_range="(0, inf)",
        )
    return float(special.betainc(a, b, x))


def regularized_lower_gamma(a: float, x: float) -> float:
    """P(a, x), the Gamma(a) CDF evaluated at x."""
    if a <= 0:
        raise DomainError(
            f"regularized_lower_gamma: a must be positive, got {a}",
            name="a", value=a, valid_range="(0, inf)",
        )
    if x <= 0:
        return 0.0
    return float(special.gammainc(a, x))


def log_choose(n: int, k: int) -> float:
    """log C(n, k); -inf outside 0 <= k <= n."""
    if k < 0 or k > n:
        return float("-inf")
    if k == 0 or k == n:
        return 0.0
    return float(special.gammaln(n + 1) - special.gammaln(k + 1) - special.gammaln(n - k + 1))
