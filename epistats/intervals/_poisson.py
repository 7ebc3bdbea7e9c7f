"""
Poisson intervals for counts and incidence rates.

The exact interval uses the relationship between the Poisson and
chi-squared distributions:

    lower = chi2_{alpha/2}(2x) / 2          (0 when x = 0)
    upper = chi2_{1-alpha/2}(2x + 2) / 2

Dividing by person-time gives the interval for a rate.

Direct standardization weights stratum-specific rates by a standard
population; each stratum count is treated as Poisson, so

    Var(rate_std) = sum(w_i^2 * events_i / population_i^2) / (sum w_i)^2
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from epistats.core.exceptions import DataError, DomainError
from epistats.core.result import Estimate, Interval
from epistats.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_nonnegative_count,
    check_open_unit,
)
from epistats.distributions import chi2_quantile, normal_quantile


def _check_person_time(person_time: float, name: str = "person_time") -> None:
    if not (math.isfinite(person_time) and person_time > 0):
        raise DataError(
            f"{name} must be positive, got {person_time}",
            required=f"{name} > 0", actual=f"{name} = {person_time}",
        )


def poisson_exact_ci(events: int, alpha: float = 0.05) -> Interval:
    """Exact interval for a Poisson mean given an observed count."""
    events = check_nonnegative_count(events, "events")
    check_open_unit(alpha, "alpha")
    lower = 0.0 if events == 0 else chi2_quantile(alpha / 2.0, 2 * events) / 2.0
    upper = chi2_quantile(1.0 - alpha / 2.0, 2 * (events + 1)) / 2.0
    return Interval(lower, upper)


def incidence_rate(events: int, person_time: float, alpha: float = 0.05) -> Estimate:
    """Incidence rate events / person_time with exact Poisson CI."""
    _check_person_time(person_time)
    ci = poisson_exact_ci(events, alpha)
    return Estimate(
        value=events / person_time,
        ci=Interval(ci.lower / person_time, ci.upper / person_time),
        se=math.sqrt(events) / person_time,
    )


def log_rate_ci(events: int, person_time: float, alpha: float = 0.05) -> Estimate:
    """Wald interval for a rate on the log scale; SE(log rate) = 1/sqrt(events)."""
    events = check_nonnegative_count(events, "events")
    _check_person_time(person_time)
    check_open_unit(alpha, "alpha")
    if events == 0:
        raise DataError(
            "log-rate interval needs at least one event; use incidence_rate() for zero counts",
            required="events >= 1", actual="events = 0",
        )
    z = normal_quantile(1.0 - alpha / 2.0)
    rate = events / person_time
    log_se = 1.0 / math.sqrt(events)
    return Estimate(
        value=rate,
        ci=Interval(math.exp(math.log(rate) - z * log_se), math.exp(math.log(rate) + z * log_se)),
        se=math.sqrt(events) / person_time,
        log_se=log_se,
    )


def rate_ratio(
    events1: int,
    person_time1: float,
    events2: int,
    person_time2: float,
    alpha: float = 0.05,
) -> Estimate:
    """Ratio of two incidence rates with a log-scale Wald interval."""
    events1 = check_nonnegative_count(events1, "events1")
    events2 = check_nonnegative_count(events2, "events2")
    _check_person_time(person_time1, "person_time1")
    _check_person_time(person_time2, "person_time2")
    check_open_unit(alpha, "alpha")
    if events1 == 0 or events2 == 0:
        raise DataError(
            "rate ratio needs at least one event in each group",
            required="events1 >= 1 and events2 >= 1",
            actual=f"events1 = {events1}, events2 = {events2}",
        )
    z = normal_quantile(1.0 - alpha / 2.0)
    ratio = (events1 / person_time1) / (events2 / person_time2)
    log_se = math.sqrt(1.0 / events1 + 1.0 / events2)
    log_ratio = math.log(ratio)
    return Estimate(
        value=ratio,
        ci=Interval(math.exp(log_ratio - z * log_se), math.exp(log_ratio + z * log_se)),
        log_se=log_se,
    )


def smr(observed: int, expected: float, alpha: float = 0.05) -> Estimate:
    """Standardized mortality ratio observed / expected with exact Poisson CI."""
    _check_person_time(expected, "expected")
    ci = poisson_exact_ci(observed, alpha)
    return Estimate(
        value=observed / expected,
        ci=Interval(ci.lower / expected, ci.upper / expected),
    )


def direct_standardization(
    events: ArrayLike,
    populations: ArrayLike,
    standard_population: ArrayLike,
    alpha: float = 0.05,
) -> Estimate:
    """
    Directly standardized rate with a normal-approximation interval.

    Parameters
    ----------
    events : array-like
        Event count in each stratum (e.g. age band) of the study population.
    populations : array-like
        Population or person-time in each stratum.
    standard_population : array-like
        Size of each stratum in the standard population; only the
        proportions matter.
    alpha : float
        1 - confidence level.

    Returns
    -------
    Estimate
        Rate per unit of population. The lower limit is floored at 0.

    Raises
    ------
    DomainError
        If an event count is negative or non-integral.
    DataError
        If a stratum population is not positive, a standard weight is
        negative, or the standard population is empty.
    DimensionError
        If the three arrays differ in length.
    """
    check_open_unit(alpha, "alpha")
    arrays = []
    for values, name in ((events, "events"), (populations, "populations"),
                         (standard_population, "standard_population")):
        arr = check_array(values, name).ravel()
        check_1d(arr, name)
        check_finite(arr, name)
        arrays.append(arr)
    counts, pop, weights = arrays
    check_consistent_length(counts, pop, weights, names=("events", "populations", "standard_population"))

    if np.any((counts < 0) | (counts != np.floor(counts))):
        bad = counts[(counts < 0) | (counts != np.floor(counts))][0]
        raise DomainError(
            f"events must be non-negative integers, got {bad}",
            name="events", value=float(bad), valid_range="{0, 1, 2, ...}",
        )
    if np.any(pop <= 0):
        raise DataError(
            "every stratum needs a positive population",
            required="populations > 0", actual=f"min = {pop.min()}",
        )
    if np.any(weights < 0) or weights.sum() <= 0:
        raise DataError(
            "standard population weights must be non-negative with a positive total",
            required="weights >= 0, sum > 0", actual=f"sum = {weights.sum()}",
        )

    w = weights / weights.sum()
    rate = float(np.sum(w * counts / pop))
    se = float(np.sqrt(np.sum(w * w * counts / (pop * pop))))
    z = normal_quantile(1.0 - alpha / 2.0)
    return Estimate(value=rate, ci=Interval(max(0.0, rate - z * se), rate + z * se), se=se)
