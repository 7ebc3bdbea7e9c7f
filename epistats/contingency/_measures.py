"""
Effect measures from a 2x2 table.

    RR = (a/(a+b)) / (c/(c+d)),  SE(log RR) = sqrt(1/a - 1/(a+b) + 1/c - 1/(c+d))
    OR = ad / bc,                SE(log OR) = sqrt(1/a + 1/b + 1/c + 1/d)
    RD = a/(a+b) - c/(c+d),      SE(RD)     = sqrt(p1(1-p1)/n1 + p2(1-p2)/n2)

If any cell is zero, `correction` (0.5 by default) is added to all four
cells before the ratio measures and their variances are computed. The
risk difference is defined for zero cells and uses the raw counts.

References:
    Rothman, K. J., Greenland, S., & Lash, T. L. (2008). Modern
        Epidemiology, 3rd ed., ch. 14.
"""

from __future__ import annotations

import math

from epistats.contingency.design import ContingencyTable
from epistats.core.exceptions import DataError
from epistats.core.result import Estimate, Interval
from epistats.distributions import z_for_conf_level


def _log_estimate(log_value: float, log_se: float, z: float) -> Estimate:
    return Estimate(
        value=math.exp(log_value),
        ci=Interval(math.exp(log_value - z * log_se), math.exp(log_value + z * log_se)),
        log_se=log_se,
    )


def _ratio_cells(table: ContingencyTable, correction: float) -> tuple[float, float, float, float]:
    cells = table.corrected_cells(correction)
    if min(cells) <= 0:
        raise DataError(
            "ratio measures are undefined with a zero cell and no continuity correction",
            required="correction > 0 when a cell is zero",
            actual=f"correction = {correction}",
        )
    return cells


def risk_ratio(
    table: ContingencyTable,
    conf_level: float = 0.95,
    correction: float = 0.5,
) -> Estimate:
    """Risk ratio with a log-scale Wald interval."""
    table.require_row_totals()
    z = z_for_conf_level(conf_level)
    a, b, c, d = _ratio_cells(table, correction)
    rr = (a / (a + b)) / (c / (c + d))
    log_se = math.sqrt(1.0 / a - 1.0 / (a + b) + 1.0 / c - 1.0 / (c + d))
    return _log_estimate(math.log(rr), log_se, z)


def odds_ratio(
    table: ContingencyTable,
    conf_level: float = 0.95,
    correction: float = 0.5,
) -> Estimate:
    """Sample (Woolf) odds ratio with a log-scale Wald interval."""
    table.require_row_totals()
    z = z_for_conf_level(conf_level)
    a, b, c, d = _ratio_cells(table, correction)
    log_or = math.log(a) + math.log(d) - math.log(b) - math.log(c)
    log_se = math.sqrt(1.0 / a + 1.0 / b + 1.0 / c + 1.0 / d)
    return _log_estimate(log_or, log_se, z)


def risk_difference(table: ContingencyTable, conf_level: float = 0.95) -> Estimate:
    """Risk difference p1 - p2 with a Wald interval."""
    z = z_for_conf_level(conf_level)
    p1, p2 = table.p1, table.p2
    rd = p1 - p2
    se = math.sqrt(p1 * (1.0 - p1) / table.n1 + p2 * (1.0 - p2) / table.n2)
    return Estimate(value=rd, ci=Interval(rd - z * se, rd + z * se), se=se)


def attributable_fractions(rr: float, exposure_prevalence: float) -> tuple[float, float]:
    """
    Attributable fraction among the exposed and Levin's population
    attributable fraction.

        AF_e = (RR - 1) / RR
        PAF  = Pe (RR - 1) / (1 + Pe (RR - 1))
    """
    af_exposed = (rr - 1.0) / rr
    excess = exposure_prevalence * (rr - 1.0)
    return af_exposed, excess / (1.0 + excess)
