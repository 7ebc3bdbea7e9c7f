"""
Public API for 2x2 contingency-table analysis.

    two_by_two(table) → TwoByTwoSolution
    mantel_haenszel(tables, measure) → MantelHaenszelSolution

The single-measure functions (risk_ratio, odds_ratio, fisher_exact, ...)
are re-exported from their algorithm modules and return plain value
objects.
"""

from __future__ import annotations

from typing import Sequence

from numpy.typing import ArrayLike

from epistats.contingency._common import TwoByTwoParams
from epistats.contingency._mantel_haenszel import mantel_haenszel as _mantel_haenszel
from epistats.contingency._measures import (
    attributable_fractions,
    odds_ratio,
    risk_difference,
    risk_ratio,
)
from epistats.contingency._nnt import number_needed_to_treat
from epistats.contingency._significance import chisq_test, fisher_exact
from epistats.contingency.design import ContingencyTable
from epistats.contingency.solution import MantelHaenszelSolution, TwoByTwoSolution
from epistats.core.compute.timing import Timer
from epistats.core.result import Result
from epistats.core.validation import check_conf_level, check_nonnegative_count
from epistats.distributions import z_for_conf_level
from epistats.intervals import newcombe_ci

# Pearson's approximation is doubtful below this expected cell count
_MIN_EXPECTED = 5.0


def _as_table(table) -> ContingencyTable:
    if isinstance(table, ContingencyTable):
        return table
    return ContingencyTable.from_array(table)


def two_by_two(
    table: ContingencyTable | ArrayLike,
    *,
    conf_level: float = 0.95,
    correction: float = 0.5,
) -> TwoByTwoSolution:
    """Risk ratio, odds ratio, risk difference, NNT and tests for a 2x2 table.

    Parameters
    ----------
    table : ContingencyTable or array-like
        Counts; an array-like must be [[a, b], [c, d]].
    conf_level : float
        Confidence level for every interval (default 0.95).
    correction : float
        Added to every cell of the ratio measures when any cell is zero.

    Returns
    -------
    TwoByTwoSolution

    Raises
    ------
    DataError
        If either exposure row is empty.
    """
    table = _as_table(table)
    check_conf_level(conf_level)
    table.require_row_totals()

    warnings = []
    timer = Timer()
    timer.start()

    with timer.section("measures"):
        rr = risk_ratio(table, conf_level, correction)
        or_ = odds_ratio(table, conf_level, correction)
        rd = risk_difference(table, conf_level)
        rd_newcombe = newcombe_ci(
            table.p1, table.n1, table.p2, table.n2, z_for_conf_level(conf_level),
        )
        nnt = number_needed_to_treat(table, conf_level)
        af_e, paf = attributable_fractions(rr.value, table.n1 / table.n)

    if table.has_zero_cell and correction > 0:
        warnings.append(
            f"continuity correction {correction} applied to all cells "
            f"(zero cell present)"
        )

    with timer.section("tests"):
        if table.m1 > 0 and table.m2 > 0:
            chisq = chisq_test(table, correct=False)
            chisq_yates = chisq_test(table, correct=True)
        else:
            chisq = chisq_yates = None
        fisher = fisher_exact(table)

    if chisq is None:
        warnings.append(
            "chi-squared test undefined with an empty outcome column "
            "(no events or no non-events in either arm); only Fisher's exact test reported"
        )
    elif chisq.extras["min_expected"] < _MIN_EXPECTED:
        warnings.append(
            f"smallest expected count is {chisq.extras['min_expected']:.3g} (< 5); "
            f"prefer Fisher's exact test"
        )

    timer.stop()

    params = TwoByTwoParams(
        p1=table.p1,
        p2=table.p2,
        risk_ratio=rr,
        odds_ratio=or_,
        risk_difference=rd,
        risk_difference_newcombe=rd_newcombe,
        nnt=nnt,
        chisq=chisq,
        chisq_yates=chisq_yates,
        fisher=fisher,
        af_exposed=af_e,
        paf=paf,
        continuity_corrected=table.has_zero_cell and correction > 0,
        conf_level=conf_level,
    )

    result = Result(
        params=params,
        info={"method": "2x2 table", "correction": correction},
        timing=timer.result(),
        backend_name="cpu_2x2",
        warnings=tuple(warnings),
    )

    return TwoByTwoSolution(_result=result, _table=table)


def mantel_haenszel(
    tables: Sequence[ContingencyTable | ArrayLike],
    *,
    measure: str = "OR",
    conf_level: float = 0.95,
) -> MantelHaenszelSolution:
    """Mantel-Haenszel pooled OR or RR over strata.

    Strata with an empty exposure row contribute nothing and are dropped
    with a warning.
    """
    check_conf_level(conf_level)
    strata = [_as_table(t) for t in tables]
    usable = [t for t in strata if t.n1 > 0 and t.n2 > 0]

    warnings = []
    if len(usable) < len(strata):
        warnings.append(
            f"{len(strata) - len(usable)} stratum/strata with an empty row dropped"
        )

    timer = Timer()
    timer.start()
    params = _mantel_haenszel(usable, measure=measure, conf_level=conf_level)
    timer.stop()

    result = Result(
        params=params,
        info={"method": "Mantel-Haenszel", "measure": measure},
        timing=timer.result(),
        backend_name="cpu_mantel_haenszel",
        warnings=tuple(warnings),
    )
    return MantelHaenszelSolution(_result=result)


def table_from_counts(events1, n1, events2, n2) -> ContingencyTable:
    """Build a table from events and totals per arm."""
    events1 = check_nonnegative_count(events1, "events1")
    events2 = check_nonnegative_count(events2, "events2")
    n1 = check_nonnegative_count(n1, "n1")
    n2 = check_nonnegative_count(n2, "n2")
    return ContingencyTable.for_counts(events1, n1 - events1, events2, n2 - events2)
