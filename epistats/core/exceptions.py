"""
Exception hierarchy for epistats.

All exceptions inherit from EpiStatsError to allow catching any
library-specific error. The calculator front-end catches these and shows
a message; the engine itself never catches and retries them.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information

Limiting values that are legitimate answers (an infinite NNT, a median
survival that is not reached) are not errors. They are returned as
DegenerateResult values, see epistats.core.result.
"""

from __future__ import annotations

from typing import Any


class EpiStatsError(Exception):
    """Base exception for all epistats errors."""
    pass


class ValidationError(EpiStatsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail structural checks (type,
    shape, length).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent lengths.
    """
    pass


class DomainError(ValidationError):
    """
    Input lies outside the mathematically valid range.

    Examples: a probability outside [0, 1], a quantile argument outside
    (0, 1), a negative count, a non-positive odds ratio.

    Attributes:
        name: Parameter name
        value: Offending value
        valid_range: Human-readable description of the valid range
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        value: Any = None,
        valid_range: str | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.value = value
        self.valid_range = valid_range


class DataError(EpiStatsError):
    """
    Data are insufficient or inconsistent for the requested computation.

    Examples: fewer than two studies in a meta-analysis, no discordant
    pairs for McNemar's test, non-positive person-time.

    Attributes:
        required: What the computation needs (e.g. 'k >= 2')
        actual: What was supplied (e.g. 'k = 1')
    """

    def __init__(
        self,
        message: str,
        required: str | None = None,
        actual: str | None = None,
    ):
        super().__init__(message)
        self.required = required
        self.actual = actual


class NumericalError(EpiStatsError):
    """
    Numerical computation failed.

    Raised when a root finder cannot bracket a solution or an iterative
    search exceeds its limit.
    """
    pass
