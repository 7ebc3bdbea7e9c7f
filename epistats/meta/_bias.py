"""
Small-study effects and publication bias.

Egger's test regresses the standardized effect theta/se on precision
1/se by ordinary least squares; an intercept away from zero indicates
funnel-plot asymmetry.

Trim and fill (Duval & Tweedie) estimates the number k0 of studies
missing from one side of the funnel with the L0 or R0 rank estimator,
iterating trim/re-centre until k0 is stable, then imputes their mirror
images about the trimmed centre and re-pools.

References:
    Egger, M., Davey Smith, G., Schneider, M., & Minder, C. (1997). Bias in
        meta-analysis detected by a simple, graphical test. BMJ, 315, 629-634.
    Duval, S., & Tweedie, R. (2000). Trim and fill: A simple funnel-plot-based
        method of testing and adjusting for publication bias in
        meta-analysis. Biometrics, 56, 455-463.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from epistats.core.exceptions import DataError, NumericalError, ValidationError
from epistats.distributions import t_two_sided_p
from epistats.meta._common import EggerParams, TrimFillParams
from epistats.meta._pooling import _pool
from epistats.meta.design import StudyEffect


def egger_regression(effects: NDArray[np.float64], se: NDArray[np.float64]) -> EggerParams:
    """
    Raises
    ------
    DataError
        If k < 3, or all standard errors are equal (precision has no spread).
    """
    k = effects.shape[0]
    if k < 3:
        raise DataError(
            f"Egger's test needs at least 3 studies, got {k}",
            required="k >= 3", actual=f"k = {k}",
        )

    x = 1.0 / se
    y = effects / se
    x_bar = float(x.mean())
    sxx = float(np.sum((x - x_bar) ** 2))
    if sxx == 0:
        raise DataError(
            "Egger's test is undefined when every study has the same standard error",
            required="at least two distinct standard errors",
        )

    slope = float(np.sum((x - x_bar) * (y - y.mean())) / sxx)
    intercept = float(y.mean() - slope * x_bar)
    resid = y - (intercept + slope * x)
    df = k - 2
    mse = float(np.sum(resid ** 2)) / df
    se_intercept = math.sqrt(mse * (1.0 / k + x_bar ** 2 / sxx))
    if se_intercept == 0:
        raise DataError(
            "Egger regression fits the studies exactly; intercept SE is zero",
        )

    t = intercept / se_intercept
    return EggerParams(
        intercept=intercept,
        slope=slope,
        se=se_intercept,
        t=t,
        df=df,
        p_value=t_two_sided_p(t, df),
    )


def _k0_estimate(resid: NDArray[np.float64], estimator: str) -> int:
    k = resid.shape[0]
    ranks = stats.rankdata(np.abs(resid))
    if estimator == "L0":
        s_pos = float(ranks[resid > 0].sum())
        return max(0, int(round((4.0 * s_pos - k * (k + 1)) / (2.0 * k - 1.0))))

    # R0: length of the run of positive residuals at the top of the ranking
    order = np.argsort(-np.abs(resid), kind="stable")
    run = 0
    for i in order:
        if resid[i] <= 0:
            break
        run += 1
    return max(0, run - 1)


def trim_and_fill(
    studies: tuple[StudyEffect, ...],
    *,
    estimator: str = "L0",
    side: str = "left",
    method: str = "random",
    conf_level: float = 0.95,
    max_iter: int = 100,
) -> TrimFillParams:
    """
    Trim and fill.

    ``side`` is where studies are presumed missing: "left" means the
    funnel is asymmetric towards large positive effects.

    Raises
    ------
    NumericalError
        If k0 does not stabilise within ``max_iter`` iterations.
    """
    if estimator not in ("L0", "R0"):
        raise ValidationError(f"estimator must be 'L0' or 'R0', got {estimator!r}")
    if side not in ("left", "right"):
        raise ValidationError(f"side must be 'left' or 'right', got {side!r}")

    effects = np.array([s.effect for s in studies], dtype=np.float64)
    variances = np.array([s.variance for s in studies], dtype=np.float64)
    k = effects.shape[0]
    original = _pool(effects, variances, method=method, conf_level=conf_level)

    # Work as if the missing studies are on the left
    sign = 1.0 if side == "left" else -1.0
    y = sign * effects
    by_size = np.argsort(-y, kind="stable")

    k0 = 0
    for _ in range(max_iter):
        keep = np.sort(by_size[k0:])
        center = _pool(y[keep], variances[keep], method=method, conf_level=conf_level).pooled
        k0_new = min(_k0_estimate(y - center, estimator), k - 2)
        if k0_new == k0:
            break
        k0 = k0_new
    else:
        raise NumericalError(f"trim and fill did not converge in {max_iter} iterations")

    imputed = []
    for i in by_size[:k0]:
        mirrored = sign * (2.0 * center - y[i])
        imputed.append(
            StudyEffect(
                name=f"Filled: {studies[i].name}",
                effect=float(mirrored),
                variance=float(variances[i]),
            )
        )

    if imputed:
        all_effects = np.concatenate([effects, [s.effect for s in imputed]])
        all_variances = np.concatenate([variances, [s.variance for s in imputed]])
        adjusted = _pool(all_effects, all_variances, method=method, conf_level=conf_level)
    else:
        adjusted = original

    return TrimFillParams(
        k0=k0,
        estimator=estimator,
        original=original,
        adjusted=adjusted,
        imputed=tuple(imputed),
    )
