"""
2x2 contingency-table engine.

Rows are exposure (exposed, unexposed); columns are outcome (event,
no event).

Public API:
    two_by_two(table)               - every measure and test for one table
    risk_ratio, odds_ratio, risk_difference
    chisq_test(table, correct)      - Pearson chi-squared (Yates optional)
    fisher_exact(table)             - two-sided exact test
    mcnemar_test(b, c)              - paired proportions
    number_needed_to_treat(table)   - NNT/NNH with Altman interval
    fragility_index(table, alpha)   - iterative Fisher-based fragility
    two_proportion_z_test           - pooled/unpooled z-test
    cochran_armitage_trend          - trend in proportions
    mantel_haenszel(tables)         - stratified OR / RR
    diagnostic_accuracy(tp, fp, fn, tn)
    auc_trapezoidal(sens, spec, n1, n2) - ROC area, Hanley-McNeil SE
    fagan_nomogram(pre, plr, nlr)
    additive_interaction(rr11, rr10, rr01)
"""

from epistats.contingency.design import ContingencyTable
from epistats.contingency.solvers import two_by_two, mantel_haenszel, table_from_counts
from epistats.contingency._measures import risk_ratio, odds_ratio, risk_difference
from epistats.contingency._significance import (
    chisq_test,
    fisher_exact,
    mcnemar_test,
    two_proportion_z_test,
    cochran_armitage_trend,
)
from epistats.contingency._nnt import number_needed_to_treat
from epistats.contingency._fragility import fragility_index
from epistats.contingency._diagnostic import (
    diagnostic_accuracy,
    auc_trapezoidal,
    fagan_nomogram,
    additive_interaction,
)
from epistats.contingency._common import (
    TableTestParams,
    NNTResult,
    FragilityParams,
    TwoByTwoParams,
    MantelHaenszelParams,
    DiagnosticParams,
    FaganParams,
    InteractionParams,
)
from epistats.contingency.solution import TwoByTwoSolution, MantelHaenszelSolution

__all__ = [
    "ContingencyTable",
    "two_by_two",
    "mantel_haenszel",
    "table_from_counts",
    "risk_ratio",
    "odds_ratio",
    "risk_difference",
    "chisq_test",
    "fisher_exact",
    "mcnemar_test",
    "two_proportion_z_test",
    "cochran_armitage_trend",
    "number_needed_to_treat",
    "fragility_index",
    "diagnostic_accuracy",
    "auc_trapezoidal",
    "fagan_nomogram",
    "additive_interaction",
    "TableTestParams",
    "NNTResult",
    "FragilityParams",
    "TwoByTwoParams",
    "MantelHaenszelParams",
    "DiagnosticParams",
    "FaganParams",
    "InteractionParams",
    "TwoByTwoSolution",
    "MantelHaenszelSolution",
]
