"""
Interval estimators.

Public API:
    wald_ci(p, n, z)                    - Wald interval for a proportion
    wilson_ci(p, n, z)                  - Wilson score interval
    agresti_coull_ci(p, n, z)           - Agresti-Coull interval
    clopper_pearson_ci(x, n, alpha)     - exact binomial interval
    newcombe_ci(p1, n1, p2, n2, z)      - hybrid score interval for p1 - p2
    poisson_exact_ci(events, alpha)     - exact Poisson interval for a count
    incidence_rate(events, pt, alpha)   - rate with exact interval
    log_rate_ci(events, pt, alpha)      - rate with log-Wald interval
    rate_ratio(e1, pt1, e2, pt2, alpha) - incidence rate ratio
    smr(observed, expected, alpha)      - standardized mortality ratio
    direct_standardization(events, pops, standard_pop, alpha)
                                        - directly standardized rate
"""

from epistats.intervals._binomial import (
    wald_ci,
    wilson_ci,
    agresti_coull_ci,
    clopper_pearson_ci,
    newcombe_ci,
)
from epistats.intervals._poisson import (
    poisson_exact_ci,
    incidence_rate,
    log_rate_ci,
    rate_ratio,
    smr,
    direct_standardization,
)

__all__ = [
    "wald_ci",
    "wilson_ci",
    "agresti_coull_ci",
    "clopper_pearson_ci",
    "newcombe_ci",
    "poisson_exact_ci",
    "incidence_rate",
    "log_rate_ci",
    "rate_ratio",
    "smr",
    "direct_standardization",
]
