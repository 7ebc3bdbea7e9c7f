"""
Effect-measure conversions.

Public API:
    or_to_rr(or_, p0), rr_to_or(rr, p0)   - Zhang & Yu
    or_to_d(or_), d_to_or(d)              - logit-probit constant 1.81
    d_to_hedges_g(d, n1, n2), hedges_g_to_d(g, n1, n2)
    r_to_d(r), d_to_r(d)
    to_log_scale(estimate), from_log_scale(estimate)
    convert_effect(kind, value, p0)       - one effect on every scale
    cohen_label(d)
"""

from epistats.conversions._effects import (
    or_to_rr,
    rr_to_or,
    or_to_d,
    d_to_or,
    hedges_correction,
    d_to_hedges_g,
    hedges_g_to_d,
    r_to_d,
    d_to_r,
    cohen_label,
)
from epistats.conversions._scale import to_log_scale, from_log_scale
from epistats.conversions._common import ConvertedEffects
from epistats.conversions.solvers import convert_effect

__all__ = [
    "or_to_rr",
    "rr_to_or",
    "or_to_d",
    "d_to_or",
    "hedges_correction",
    "d_to_hedges_g",
    "hedges_g_to_d",
    "r_to_d",
    "d_to_r",
    "cohen_label",
    "to_log_scale",
    "from_log_scale",
    "ConvertedEffects",
    "convert_effect",
]
