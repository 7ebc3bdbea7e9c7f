"""
Sample size for two-arm comparisons, normal approximation.

All sizes are for a two-sided test at level alpha. ``ratio`` is the
allocation n2 / n1, so group 2 has ceil(n1 * ratio) subjects.

Two proportions (pooled variance under H0, unpooled under H1):

    n1 = (z_a sqrt((1 + 1/r) pbar qbar) + z_b sqrt(p1 q1 + p2 q2 / r))^2 / (p1 - p2)^2

with pbar = (p1 + r p2) / (1 + r). "fleiss" applies the Fleiss-Tytun-Ury
continuity correction; "arcsine" works on Cohen's h = 2 asin(sqrt p1) -
2 asin(sqrt p2), whose estimate has variance 1/n1 + 1/n2.

Schoenfeld's formula gives events rather than subjects:

    D = (z_a + z_b)^2 (1 + r)^2 / (r log(HR)^2)

References:
    Fleiss, J. L., Tytun, A., & Ury, H. K. (1980). A simple approximation
        for calculating sample sizes for comparing independent
        proportions. Biometrics, 36, 343-346.
    Schoenfeld, D. A. (1983). Sample-size formula for the proportional-
        hazards regression model. Biometrics, 39, 499-503.
"""

from __future__ import annotations

import math
from typing import Literal

from epistats.core.exceptions import DataError, ValidationError
from epistats.core.validation import check_open_unit, check_positive
from epistats.distributions import normal_quantile
from epistats.planning._common import EventsParams, SampleSizeParams

ProportionMethod = Literal["normal", "fleiss", "arcsine"]


def _z_values(alpha: float, power: float) -> tuple[float, float]:
    check_open_unit(alpha, "alpha")
    check_open_unit(power, "power")
    return normal_quantile(1.0 - alpha / 2.0), normal_quantile(power)


def _per_arm(n1: float, alpha: float, power: float, ratio: float, method: str) -> SampleSizeParams:
    size1 = math.ceil(n1)
    size2 = math.ceil(n1 * ratio)
    return SampleSizeParams(
        n1=size1,
        n2=size2,
        total=size1 + size2,
        n1_exact=n1,
        alpha=alpha,
        power=power,
        ratio=ratio,
        method=method,
    )


def sample_size_two_proportions(
    p1: float,
    p2: float,
    alpha: float = 0.05,
    power: float = 0.80,
    ratio: float = 1.0,
    method: ProportionMethod = "normal",
) -> SampleSizeParams:
    """Subjects per arm to detect p1 vs p2.

    Parameters
    ----------
    p1, p2 : float
        Anticipated proportions, each in (0, 1).
    alpha : float
        Two-sided significance level.
    power : float
        Target power, 1 - beta.
    ratio : float
        Allocation n2 / n1.
    method : str
        "normal" (default), "fleiss" or "arcsine".

    Raises
    ------
    DataError
        If p1 == p2; no finite sample detects a zero difference.
    ValidationError
        If the method is unknown.
    """
    check_open_unit(p1, "p1")
    check_open_unit(p2, "p2")
    check_positive(ratio, "ratio")
    za, zb = _z_values(alpha, power)
    diff = abs(p1 - p2)
    if diff == 0:
        raise DataError(
            "p1 and p2 are equal; there is no difference to detect",
            required="p1 != p2", actual=f"p1 = p2 = {p1}",
        )

    if method == "arcsine":
        h = 2.0 * math.asin(math.sqrt(p1)) - 2.0 * math.asin(math.sqrt(p2))
        n1 = (za + zb) ** 2 * (1.0 + 1.0 / ratio) / (h * h)
        return _per_arm(n1, alpha, power, ratio, method)
    if method not in ("normal", "fleiss"):
        raise ValidationError(
            f"Unknown method '{method}'. Choose from 'normal', 'fleiss', 'arcsine'."
        )

    p_bar = (p1 + ratio * p2) / (1.0 + ratio)
    n1 = (za * math.sqrt((1.0 + 1.0 / ratio) * p_bar * (1.0 - p_bar))
          + zb * math.sqrt(p1 * (1.0 - p1) + p2 * (1.0 - p2) / ratio)) ** 2 / (diff * diff)
    if method == "fleiss":
        n1 = n1 / 4.0 * (1.0 + math.sqrt(1.0 + 2.0 * (1.0 + 1.0 / ratio) / (n1 * diff))) ** 2
    return _per_arm(n1, alpha, power, ratio, method)


def sample_size_two_means(
    delta: float,
    sd1: float,
    sd2: float | None = None,
    alpha: float = 0.05,
    power: float = 0.80,
    ratio: float = 1.0,
) -> SampleSizeParams:
    """Subjects per arm to detect a mean difference ``delta``.

        n1 = (z_a + z_b)^2 (sd1^2 + sd2^2 / r) / delta^2

    ``sd2`` defaults to ``sd1``.
    """
    check_positive(sd1, "sd1")
    sd2 = sd1 if sd2 is None else sd2
    check_positive(sd2, "sd2")
    check_positive(ratio, "ratio")
    za, zb = _z_values(alpha, power)
    if not (math.isfinite(delta) and delta != 0):
        raise DataError(
            f"delta must be a non-zero finite difference, got {delta}",
            required="delta != 0", actual=f"delta = {delta}",
        )
    n1 = (za + zb) ** 2 * (sd1 * sd1 + sd2 * sd2 / ratio) / (delta * delta)
    return _per_arm(n1, alpha, power, ratio, "normal")


def schoenfeld_events(
    hazard_ratio: float,
    alpha: float = 0.05,
    power: float = 0.80,
    ratio: float = 1.0,
    p_event: float | None = None,
) -> EventsParams:
    """Events needed for a log-rank comparison (Schoenfeld).

    When ``p_event``, the probability that a subject has an event during
    follow-up, is given, the total enrolment ceil(events / p_event) is
    reported as well.
    """
    check_positive(hazard_ratio, "hazard_ratio")
    check_positive(ratio, "ratio")
    za, zb = _z_values(alpha, power)
    if hazard_ratio == 1.0:
        raise DataError(
            "hazard ratio of 1 has no effect to detect",
            required="hazard_ratio != 1", actual="hazard_ratio = 1",
        )
    log_hr = math.log(hazard_ratio)
    events = (za + zb) ** 2 * (1.0 + ratio) ** 2 / (ratio * log_hr * log_hr)
    required = math.ceil(events)

    total_n = None
    if p_event is not None:
        if not (0.0 < p_event <= 1.0):
            raise DataError(
                f"p_event must be in (0, 1], got {p_event}",
                required="0 < p_event <= 1", actual=f"p_event = {p_event}",
            )
        total_n = math.ceil(required / p_event)

    return EventsParams(
        events=required,
        events_exact=events,
        total_n=total_n,
        hazard_ratio=hazard_ratio,
        alpha=alpha,
        power=power,
        ratio=ratio,
    )
