"""
Diagnostic test accuracy, ROC area, Fagan nomogram, and additive interaction.

Diagnostic layout:

                 disease+   disease-
    test+          tp          fp
    test-          fn          tn

Proportions carry Wilson score intervals. The ROC area carries the
Hanley-McNeil standard error.

References:
    Hanley, J. A., & McNeil, B. J. (1982). The meaning and use of the area
        under a receiver operating characteristic (ROC) curve. Radiology,
        143, 29-36.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from epistats.contingency._common import DiagnosticParams, FaganParams, InteractionParams
from epistats.core.exceptions import DataError, DomainError
from epistats.core.result import INFINITE, DegenerateResult, Estimate, Interval, is_degenerate
from epistats.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_nonnegative_count,
    check_open_unit,
    check_positive,
)
from epistats.distributions import z_for_conf_level
from epistats.intervals import wilson_ci


def _proportion(x: int, n: int, z: float, name: str) -> Estimate:
    if n == 0:
        raise DataError(
            f"{name} is undefined: its denominator is zero",
            required=f"{name} denominator > 0", actual="0",
        )
    p = x / n
    return Estimate(value=p, ci=wilson_ci(p, n, z))


def diagnostic_accuracy(tp, fp, fn, tn, conf_level: float = 0.95) -> DiagnosticParams:
    """Sensitivity, specificity, predictive values and likelihood ratios."""
    tp = check_nonnegative_count(tp, "tp")
    fp = check_nonnegative_count(fp, "fp")
    fn = check_nonnegative_count(fn, "fn")
    tn = check_nonnegative_count(tn, "tn")
    z = z_for_conf_level(conf_level)
    n = tp + fp + fn + tn

    sens = _proportion(tp, tp + fn, z, "sensitivity")
    spec = _proportion(tn, tn + fp, z, "specificity")
    # Predictive values need at least one result of that sign
    ppv = (_proportion(tp, tp + fp, z, "PPV") if tp + fp > 0
           else DegenerateResult("undefined", reason="no positive test results"))
    npv = (_proportion(tn, tn + fn, z, "NPV") if tn + fn > 0
           else DegenerateResult("undefined", reason="no negative test results"))

    if spec.value < 1.0:
        plr = sens.value / (1.0 - spec.value)
    elif sens.value > 0.0:
        plr = INFINITE
    else:
        plr = DegenerateResult(
            "undefined", reason="no positive test results (sensitivity 0, specificity 1)",
        )
    if spec.value == 0.0:
        raise DataError("negative likelihood ratio is undefined when specificity is 0")
    nlr = (1.0 - sens.value) / spec.value
    if fp * fn > 0:
        dor = (tp * tn) / (fp * fn)
    elif tp * tn > 0:
        dor = INFINITE
    else:
        dor = DegenerateResult("undefined", reason="tp * tn and fp * fn are both zero")

    return DiagnosticParams(
        sensitivity=sens,
        specificity=spec,
        ppv=ppv,
        npv=npv,
        positive_lr=plr,
        negative_lr=nlr,
        diagnostic_or=dor,
        accuracy=(tp + tn) / n,
        prevalence=(tp + fn) / n,
        youden_j=sens.value + spec.value - 1.0,
    )


def auc_trapezoidal(
    sensitivities: ArrayLike,
    specificities: ArrayLike,
    n_diseased: int,
    n_healthy: int,
    conf_level: float = 0.95,
) -> Estimate:
    """
    Area under the ROC curve by the trapezoidal rule.

    The operating points are sorted by false positive rate and anchored
    at (0, 0) and (1, 1). For the empirical ROC curve of a continuous
    test this equals the Mann-Whitney estimate P(X_diseased > X_healthy)
    with ties counted as one half.

        Q1 = A / (2 - A),  Q2 = 2A^2 / (1 + A)
        SE^2 = (A(1 - A) + (n1 - 1)(Q1 - A^2) + (n2 - 1)(Q2 - A^2)) / (n1 n2)

    Parameters
    ----------
    sensitivities, specificities : array-like
        One pair per threshold, each in [0, 1].
    n_diseased, n_healthy : int
        Subjects with and without the condition (n1 and n2 above).
    conf_level : float
        Confidence level for the Wald interval, clipped to [0, 1].

    Raises
    ------
    DomainError
        If a sensitivity or specificity lies outside [0, 1].
    DataError
        If either group is empty or no operating point is given.
    """
    check_open_unit(conf_level, "conf_level")
    tpr = check_array(sensitivities, "sensitivities").ravel()
    spec = check_array(specificities, "specificities").ravel()
    check_1d(tpr, "sensitivities")
    check_consistent_length(tpr, spec, names=("sensitivities", "specificities"))
    if tpr.shape[0] == 0:
        raise DataError(
            "ROC curve needs at least one operating point",
            required="n >= 1", actual="n = 0",
        )
    for arr, name in ((tpr, "sensitivities"), (spec, "specificities")):
        if not np.all((arr >= 0.0) & (arr <= 1.0)):
            raise DomainError(
                f"{name} must lie in [0, 1]",
                name=name, value=arr, valid_range="[0, 1]",
            )
    n1 = check_nonnegative_count(n_diseased, "n_diseased")
    n2 = check_nonnegative_count(n_healthy, "n_healthy")
    if n1 == 0 or n2 == 0:
        raise DataError(
            "ROC area needs subjects with and without the condition",
            required="n_diseased > 0 and n_healthy > 0",
            actual=f"n_diseased = {n1}, n_healthy = {n2}",
        )

    fpr = np.concatenate([[0.0], 1.0 - spec, [1.0]])
    tpr = np.concatenate([[0.0], tpr, [1.0]])
    order = np.lexsort((tpr, fpr))
    fpr, tpr = fpr[order], tpr[order]
    auc = float(np.sum(np.diff(fpr) * (tpr[1:] + tpr[:-1]) / 2.0))

    q1 = auc / (2.0 - auc)
    q2 = 2.0 * auc * auc / (1.0 + auc)
    variance = (auc * (1.0 - auc) + (n1 - 1) * (q1 - auc * auc)
                + (n2 - 1) * (q2 - auc * auc)) / (n1 * n2)
    se = math.sqrt(max(variance, 0.0))
    z = z_for_conf_level(conf_level)
    return Estimate(
        value=auc,
        ci=Interval(max(0.0, auc - z * se), min(1.0, auc + z * se)),
        se=se,
    )


def _post_test(pre_odds: float, lr, name: str) -> tuple[float | DegenerateResult, float]:
    """(post-test odds, post-test probability) for one likelihood ratio."""
    if is_degenerate(lr):
        if lr != INFINITE:
            raise DataError(
                f"{name} is {lr}; the post-test probability is undefined",
                required=f"finite or infinite {name}", actual=str(lr),
            )
        return INFINITE, 1.0
    if lr == math.inf:
        return INFINITE, 1.0
    if not (math.isfinite(lr) and lr >= 0):
        raise DomainError(
            f"{name} must be a non-negative number, got {lr}",
            name=name, value=lr, valid_range="[0, inf]",
        )
    odds = pre_odds * lr
    return odds, odds / (1.0 + odds)


def fagan_nomogram(pre_test_prob: float, positive_lr, negative_lr) -> FaganParams:
    """Post-test probabilities for a positive and a negative result.

    Likelihood ratios may be INFINITE (a perfectly specific test), which
    gives a post-test probability of 1, or 0, which gives 0.
    """
    check_open_unit(pre_test_prob, "pre_test_prob")

    pre_odds = pre_test_prob / (1.0 - pre_test_prob)
    post_pos, prob_pos = _post_test(pre_odds, positive_lr, "positive_lr")
    post_neg, prob_neg = _post_test(pre_odds, negative_lr, "negative_lr")
    return FaganParams(
        pre_test_prob=pre_test_prob,
        pre_test_odds=pre_odds,
        post_test_odds_positive=post_pos,
        post_test_odds_negative=post_neg,
        post_test_prob_positive=prob_pos,
        post_test_prob_negative=prob_neg,
    )


def additive_interaction(rr11: float, rr10: float, rr01: float) -> InteractionParams:
    """
    RERI, attributable proportion and synergy index.

        RERI = RR11 - RR10 - RR01 + 1
        AP   = RERI / RR11
        S    = (RR11 - 1) / ((RR10 - 1) + (RR01 - 1))
    """
    check_positive(rr11, "rr11")
    check_positive(rr10, "rr10")
    check_positive(rr01, "rr01")
    reri = rr11 - rr10 - rr01 + 1.0
    denom = (rr10 - 1.0) + (rr01 - 1.0)
    return InteractionParams(
        reri=reri,
        attributable_proportion=reri / rr11,
        synergy_index=INFINITE if denom == 0 else (rr11 - 1.0) / denom,
    )
