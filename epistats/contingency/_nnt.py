"""
Number needed to treat / harm.

NNT = ceil(1 / |RD|), where RD = p1 - p2 is the risk difference between
the exposed (treated) and unexposed (control) rows. A fractional patient
cannot be treated, hence the ceiling. The interval comes from the
Newcombe hybrid-score interval for RD; when that interval contains zero
the NNT interval runs through infinity (see NNTResult.altman()).
"""

from __future__ import annotations

from epistats.contingency._common import NNTResult
from epistats.contingency.design import ContingencyTable
from epistats.distributions import z_for_conf_level
from epistats.intervals import newcombe_ci


def number_needed_to_treat(table: ContingencyTable, conf_level: float = 0.95) -> NNTResult:
    """NNT (or NNH) with an Altman-style interval.

    Returns
    -------
    NNTResult
        ``value`` is INFINITE when the risk difference is exactly zero.
    """
    z = z_for_conf_level(conf_level)
    rd = newcombe_ci(table.p1, table.n1, table.p2, table.n2, z)
    return NNTResult.from_risk_difference(rd)
