"""
Power of two-arm comparisons at a given size.

Each function inverts its sample-size counterpart: the far rejection
tail is ignored, so power at the size sample_size_* returned is at
least the target.
"""

from __future__ import annotations

import math

from epistats.core.exceptions import DataError
from epistats.core.validation import check_open_unit, check_positive
from epistats.distributions import normal_cdf, normal_quantile


def _check_size(n: float, name: str) -> None:
    if not (math.isfinite(n) and n >= 1):
        raise DataError(
            f"{name} must be at least 1, got {n}",
            required=f"{name} >= 1", actual=f"{name} = {n}",
        )


def power_two_proportions(
    p1: float,
    p2: float,
    n1: int,
    alpha: float = 0.05,
    ratio: float = 1.0,
) -> float:
    """Power to detect p1 vs p2 with n1 and ceil(n1 * ratio) subjects.

        power = Phi((|p1 - p2| - z_a se0) / se1)

    se0 uses the pooled proportion, se1 the separate ones.
    """
    check_open_unit(p1, "p1")
    check_open_unit(p2, "p2")
    check_open_unit(alpha, "alpha")
    check_positive(ratio, "ratio")
    _check_size(n1, "n1")
    n2 = math.ceil(n1 * ratio)
    za = normal_quantile(1.0 - alpha / 2.0)
    p_bar = (p1 * n1 + p2 * n2) / (n1 + n2)
    se0 = math.sqrt(p_bar * (1.0 - p_bar) * (1.0 / n1 + 1.0 / n2))
    se1 = math.sqrt(p1 * (1.0 - p1) / n1 + p2 * (1.0 - p2) / n2)
    return normal_cdf((abs(p1 - p2) - za * se0) / se1)


def power_two_means(
    delta: float,
    sd: float,
    n1: int,
    alpha: float = 0.05,
    ratio: float = 1.0,
) -> float:
    """Power to detect a mean difference ``delta`` with common SD ``sd``."""
    check_positive(sd, "sd")
    check_open_unit(alpha, "alpha")
    check_positive(ratio, "ratio")
    _check_size(n1, "n1")
    n2 = math.ceil(n1 * ratio)
    za = normal_quantile(1.0 - alpha / 2.0)
    return normal_cdf(abs(delta) / (sd * math.sqrt(1.0 / n1 + 1.0 / n2)) - za)


def power_logrank(
    hazard_ratio: float,
    events: int,
    alpha: float = 0.05,
    ratio: float = 1.0,
) -> float:
    """Power of the log-rank test given the number of events (Schoenfeld)."""
    check_positive(hazard_ratio, "hazard_ratio")
    check_open_unit(alpha, "alpha")
    check_positive(ratio, "ratio")
    _check_size(events, "events")
    za = normal_quantile(1.0 - alpha / 2.0)
    p = ratio / (1.0 + ratio)
    return normal_cdf(abs(math.log(hazard_ratio)) * math.sqrt(events * p * (1.0 - p)) - za)
