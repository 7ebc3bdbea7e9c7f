"""
Public API for effect-measure conversion.

    convert_effect(kind, value, p0, n1, n2) → ConvertedEffects

Starting from any one scale, every other scale is derived through the
odds ratio, so the results are mutually consistent.
"""

from __future__ import annotations

import math
from typing import Literal

from epistats.conversions._common import ConvertedEffects
from epistats.conversions._effects import (
    d_to_hedges_g,
    d_to_or,
    hedges_g_to_d,
    or_to_d,
    or_to_rr,
    rr_to_or,
)
from epistats.core.exceptions import DomainError, ValidationError

EffectKind = Literal["or", "rr", "rd", "d", "g", "log_or", "log_rr"]


def convert_effect(
    kind: EffectKind,
    value: float,
    p0: float,
    *,
    n1: int = 100,
    n2: int = 100,
) -> ConvertedEffects:
    """Express an effect on every scale.

    Parameters
    ----------
    kind : str
        Scale of ``value``: "or", "rr", "rd", "d", "g", "log_or", "log_rr".
    value : float
        The effect.
    p0 : float
        Risk in the unexposed group, needed for the risk scales.
    n1, n2 : int
        Group sizes for Hedges' small-sample correction.

    Raises
    ------
    DomainError
        If the implied exposed risk falls outside (0, 1).
    """
    if kind == "or":
        or_ = value
    elif kind == "rr":
        or_ = rr_to_or(value, p0)
    elif kind == "rd":
        if p0 <= 0:
            raise DomainError(
                f"p0 must be > 0 to convert a risk difference, got {p0}",
                name="p0", value=p0, valid_range="(0, 1)",
            )
        exposed_risk = p0 + value
        if not (0.0 < exposed_risk < 1.0):
            raise DomainError(
                f"p0 + rd must be in (0, 1), got {exposed_risk}",
                name="value", value=value, valid_range=f"({-p0}, {1.0 - p0})",
            )
        or_ = rr_to_or(exposed_risk / p0, p0)
    elif kind == "d":
        or_ = d_to_or(value)
    elif kind == "g":
        or_ = d_to_or(hedges_g_to_d(value, n1, n2))
    elif kind == "log_or":
        or_ = math.exp(value)
    elif kind == "log_rr":
        or_ = rr_to_or(math.exp(value), p0)
    else:
        raise ValidationError(
            f"kind must be one of 'or', 'rr', 'rd', 'd', 'g', 'log_or', 'log_rr'; got {kind!r}"
        )

    rr = or_to_rr(or_, p0)
    d = or_to_d(or_)
    return ConvertedEffects(
        odds_ratio=or_,
        risk_ratio=rr,
        rd=rr * p0 - p0,
        d=d,
        g=d_to_hedges_g(d, n1, n2),
        log_or=math.log(or_),
        log_rr=math.log(rr),
        p0=p0,
    )
