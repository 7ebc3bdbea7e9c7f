"""
Core infrastructure for epistats.

This module provides shared abstractions and utilities used by all
domain-specific submodules (intervals, contingency, meta, survival).

Key components:
    result: Generic Result[P] envelope, Interval, Estimate, DegenerateResult
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and tolerance tiers
"""

from epistats.core.result import (
    Result,
    Interval,
    Estimate,
    DegenerateResult,
    INFINITE,
    NOT_REACHED,
    UNDEFINED,
    is_degenerate,
)
from epistats.core.exceptions import (
    EpiStatsError,
    ValidationError,
    DimensionError,
    DomainError,
    DataError,
    NumericalError,
)

__all__ = [
    # Result
    "Result",
    "Interval",
    "Estimate",
    "DegenerateResult",
    "INFINITE",
    "NOT_REACHED",
    "UNDEFINED",
    "is_degenerate",
    # Exceptions
    "EpiStatsError",
    "ValidationError",
    "DimensionError",
    "DomainError",
    "DataError",
    "NumericalError",
]
