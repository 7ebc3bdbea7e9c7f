"""
Parameter payload for effect conversion results.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConvertedEffects:
    """One effect expressed on every supported scale.

    ``rd`` is exposed minus unexposed risk; ``g`` is Hedges' g for the
    group sizes passed to convert_effect().
    """

    odds_ratio: float
    risk_ratio: float
    rd: float
    d: float
    g: float
    log_or: float
    log_rr: float
    p0: float
