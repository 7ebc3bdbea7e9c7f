"""
Shared compute infrastructure for epistats.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical tolerance tiers used by tests and docs
"""

from epistats.core.compute.timing import Timer, timed
from epistats.core.compute.tolerances import (
    EXACT,
    REFERENCE,
    TABLE_3SF,
    ToleranceTier,
    get_tolerance,
)

__all__ = [
    "Timer",
    "timed",
    "ToleranceTier",
    "EXACT",
    "REFERENCE",
    "TABLE_3SF",
    "get_tolerance",
]
