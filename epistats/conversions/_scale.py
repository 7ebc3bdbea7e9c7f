"""
Moving ratio estimates between the natural and the log scale.

Meta-analysis pools ratio measures on the log scale; calculators report
them on the natural scale.
"""

from __future__ import annotations

import math

from epistats.core.exceptions import DomainError
from epistats.core.result import Estimate, Interval
from epistats.distributions import z_for_conf_level


def to_log_scale(estimate: Estimate, conf_level: float = 0.95) -> Estimate:
    """
    Log-transform a ratio estimate.

    The standard error on the log scale is ``estimate.log_se`` when
    present, otherwise it is recovered from the interval width,
    (ln upper - ln lower) / (2 z).
    """
    for name, x in (("value", estimate.value), ("lower", estimate.lower), ("upper", estimate.upper)):
        if not x > 0:
            raise DomainError(
                f"ratio estimate {name} must be > 0 to take logs, got {x}",
                name=name, value=x, valid_range="(0, inf)",
            )
    log_lower = math.log(estimate.lower)
    log_upper = math.log(estimate.upper)
    se = estimate.log_se
    if se is None:
        se = (log_upper - log_lower) / (2.0 * z_for_conf_level(conf_level))
    return Estimate(
        value=math.log(estimate.value),
        ci=Interval(log_lower, log_upper),
        se=se,
    )


def from_log_scale(estimate: Estimate) -> Estimate:
    """Exponentiate a log-scale estimate; its ``se`` becomes ``log_se``."""
    return Estimate(
        value=math.exp(estimate.value),
        ci=Interval(math.exp(estimate.lower), math.exp(estimate.upper)),
        log_se=estimate.se,
    )
