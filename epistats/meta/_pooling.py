"""
Inverse-variance pooling: fixed effect and DerSimonian-Laird random effects.

Every meta-analysis view (the main analysis, leave-one-out, cumulative,
trim-and-fill, subgroups) goes through _pool().

    w_i     = 1 / v_i
    theta_F = sum(w theta) / sum(w),  Var = 1 / sum(w)
    Q       = sum(w (theta - theta_F)^2),  df = k - 1
    tau2    = max(0, (Q - df) / (S1 - S2 / S1))
    w_i*    = 1 / (v_i + tau2)
    I2      = max(0, (Q - df) / Q),  H2 = Q / df

Hartung-Knapp-Sidik-Jonkman:
    q*  = sum(w* (theta - theta_R)^2) / (k - 1)
    SE  = sqrt(q* / sum(w*)),  CI from t on k - 1 df

Prediction interval: theta_R +/- t_{k-2} sqrt(tau2 + SE^2), k >= 3.

References:
    DerSimonian, R., & Laird, N. (1986). Meta-analysis in clinical trials.
        Controlled Clinical Trials, 7, 177-188.
    Higgins, J. P. T., & Thompson, S. G. (2002). Quantifying heterogeneity
        in a meta-analysis. Stat Med, 21, 1539-1558.
    IntHout, J., Ioannidis, J. P. A., & Borm, G. F. (2014). The
        Hartung-Knapp-Sidik-Jonkman method for random effects
        meta-analysis is straightforward and considerably outperforms the
        standard DerSimonian-Laird method. BMC Med Res Methodol, 14, 25.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from epistats.core.exceptions import DataError, ValidationError
from epistats.core.result import Interval
from epistats.distributions import (
    chi2_sf,
    normal_cdf,
    t_quantile,
    t_two_sided_p,
    z_for_conf_level,
)
from epistats.meta._common import FixedEffectParams, PooledParams

METHODS = ("fixed", "random")


def _fixed_effect(
    effects: NDArray[np.float64],
    w: NDArray[np.float64],
    z: float,
) -> FixedEffectParams:
    sum_w = float(w.sum())
    pooled = float(np.sum(w * effects) / sum_w)
    se = math.sqrt(1.0 / sum_w)
    stat = pooled / se
    return FixedEffectParams(
        pooled=pooled,
        se=se,
        ci=Interval(pooled - z * se, pooled + z * se),
        z=stat,
        p_value=2.0 * (1.0 - normal_cdf(abs(stat))),
    )


def i2_interval(Q: float, k: int, z: float) -> Interval | None:
    """
    Higgins & Thompson (2002) interval for I2 via the test-based CI of H.

    Returns None when k = 2 and Q <= k, where the variance of ln H is
    undefined.
    """
    df = k - 1
    if Q > k:
        se_ln_h = 0.5 * (math.log(Q) - math.log(df)) / (math.sqrt(2.0 * Q) - math.sqrt(2.0 * k - 3.0))
    elif k > 2:
        se_ln_h = math.sqrt(1.0 / (2.0 * (k - 2) * (1.0 - 1.0 / (3.0 * (k - 2) ** 2))))
    else:
        return None

    ln_h = 0.5 * math.log(Q / df) if Q > 0 else 0.0
    h_lo = max(1.0, math.exp(ln_h - z * se_ln_h))
    h_hi = max(1.0, math.exp(ln_h + z * se_ln_h))
    return Interval((h_lo ** 2 - 1.0) / h_lo ** 2, (h_hi ** 2 - 1.0) / h_hi ** 2)


def _pool(
    effects: NDArray[np.float64],
    variances: NDArray[np.float64],
    method: str = "random",
    hksj: bool = False,
    conf_level: float = 0.95,
) -> PooledParams:
    """
    Pool k >= 2 study effects.

    Raises
    ------
    ValidationError
        If ``method`` is unknown or HKSJ is requested for a fixed-effect model.
    DataError
        If k < 2, or HKSJ is requested with k < 3.
    """
    if method not in METHODS:
        raise ValidationError(f"method must be 'fixed' or 'random', got {method!r}")
    if hksj and method != "random":
        raise ValidationError("HKSJ adjustment applies to the random-effects model only")

    k = effects.shape[0]
    if k < 2:
        raise DataError(
            f"pooling needs at least 2 studies, got {k}",
            required="k >= 2", actual=f"k = {k}",
        )
    if hksj and k < 3:
        raise DataError(
            f"HKSJ adjustment needs at least 3 studies, got {k}",
            required="k >= 3", actual=f"k = {k}",
        )

    z = z_for_conf_level(conf_level)
    df = k - 1

    w = 1.0 / variances
    fixed = _fixed_effect(effects, w, z)

    Q = float(np.sum(w * (effects - fixed.pooled) ** 2))
    p_het = chi2_sf(Q, df)
    I2 = max(0.0, (Q - df) / Q) if Q > 0 else 0.0
    H2 = Q / df

    S1 = float(w.sum())
    S2 = float(np.sum(w ** 2))
    C = S1 - S2 / S1
    tau2_raw = (Q - df) / C if C > 0 else 0.0
    tau2 = max(0.0, tau2_raw)

    if method == "fixed":
        model_w = w
        pooled, se = fixed.pooled, fixed.se
    else:
        model_w = 1.0 / (variances + tau2)
        sum_w = float(model_w.sum())
        pooled = float(np.sum(model_w * effects) / sum_w)
        se = math.sqrt(1.0 / sum_w)

    if hksj:
        if np.all(effects == effects[0]):
            raise DataError(
                "HKSJ variance is zero because every study has the same effect",
                required="at least two distinct effects",
            )
        q_star = float(np.sum(model_w * (effects - pooled) ** 2)) / df
        se = math.sqrt(q_star / float(model_w.sum()))
        crit = t_quantile(1.0 - (1.0 - conf_level) / 2.0, df)
        statistic = pooled / se
        p_value = t_two_sided_p(statistic, df)
    else:
        crit = z
        statistic = pooled / se
        p_value = 2.0 * (1.0 - normal_cdf(abs(statistic)))

    pred = None
    if method == "random" and k >= 3:
        t_pred = t_quantile(1.0 - (1.0 - conf_level) / 2.0, k - 2)
        half = t_pred * math.sqrt(tau2 + se * se)
        pred = Interval(pooled - half, pooled + half)

    return PooledParams(
        pooled=pooled,
        ci=Interval(pooled - crit * se, pooled + crit * se),
        se=se,
        statistic=statistic,
        p_value=p_value,
        Q=Q,
        df=df,
        p_het=p_het,
        I2=I2,
        I2_ci=i2_interval(Q, k, z),
        H2=H2,
        tau2=tau2,
        tau2_truncated=tau2_raw < 0,
        pred_interval=pred,
        weights=100.0 * model_w / model_w.sum(),
        method=method,
        hksj=hksj,
        k=k,
        fixed=fixed,
    )


def _single_study(effect: float, variance: float, conf_level: float = 0.95) -> PooledParams:
    """
    A one-study "pool": the study's own estimate with a normal CI.

    Heterogeneity is absent by construction: Q = 0, df = 0, I2 = 0,
    H2 = 1, tau2 = 0, p_het = 1.
    """
    z = z_for_conf_level(conf_level)
    se = math.sqrt(variance)
    ci = Interval(effect - z * se, effect + z * se)
    stat = effect / se
    p_value = 2.0 * (1.0 - normal_cdf(abs(stat)))
    return PooledParams(
        pooled=effect,
        ci=ci,
        se=se,
        statistic=stat,
        p_value=p_value,
        Q=0.0,
        df=0,
        p_het=1.0,
        I2=0.0,
        I2_ci=None,
        H2=1.0,
        tau2=0.0,
        tau2_truncated=False,
        pred_interval=None,
        weights=np.array([100.0]),
        method="single",
        hksj=False,
        k=1,
        fixed=FixedEffectParams(pooled=effect, se=se, ci=ci, z=stat, p_value=p_value),
    )
