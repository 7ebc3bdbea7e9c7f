"""
Fragility index.

The number of patients whose outcome would have to change from event to
non-event, one at a time, before a statistically significant Fisher
exact result loses significance. Events are removed from the arm with
the higher event proportion, which moves the table toward the null
fastest.

References:
    Walsh, M. et al. (2014). The statistical significance of randomized
        controlled trial results is frequently fragile. J Clin Epidemiol,
        67(6), 622-628.
"""

from __future__ import annotations

from epistats.contingency._common import FragilityParams
from epistats.contingency._significance import fisher_exact
from epistats.contingency.design import ContingencyTable
from epistats.core.exceptions import NumericalError
from epistats.core.validation import check_open_unit


def fragility_index(table: ContingencyTable, alpha: float = 0.05) -> FragilityParams:
    """
    Iterative fragility index search.

    Returns index 0 when the original result is already non-significant
    (p >= alpha).

    Raises
    ------
    NumericalError
        If the chosen arm runs out of events before significance is lost.
    """
    check_open_unit(alpha, "alpha")
    original_p = fisher_exact(table).p_value

    if original_p >= alpha:
        return FragilityParams(
            index=0,
            original_p=original_p,
            modified_p=original_p,
            modified_table=(table.a, table.b, table.c, table.d),
            arm=None,
            alpha=alpha,
        )

    a, b, c, d = table.a, table.b, table.c, table.d
    exposed_arm = table.p1 > table.p2
    flips = 0
    p = original_p

    while p < alpha:
        if exposed_arm:
            if a == 0:
                raise NumericalError("fragility search exhausted events in the exposed arm")
            a, b = a - 1, b + 1
        else:
            if c == 0:
                raise NumericalError("fragility search exhausted events in the unexposed arm")
            c, d = c - 1, d + 1
        flips += 1
        p = fisher_exact(ContingencyTable(a, b, c, d)).p_value

    return FragilityParams(
        index=flips,
        original_p=original_p,
        modified_p=p,
        modified_table=(a, b, c, d),
        arm="exposed" if exposed_arm else "unexposed",
        alpha=alpha,
    )
