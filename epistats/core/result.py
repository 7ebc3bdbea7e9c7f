"""
Generic result container and shared value types for all epistats computations.

The Result class provides a standardized envelope that every domain-specific
solution wraps. Interval, Estimate and DegenerateResult are the small value
objects that flow out of every calculator call.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, corrections applied)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True); each result is produced fresh per call
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (estimates, tables, statistics)
        info: Structured metadata (method, corrections, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the routine that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=PooledParams(...),
        ...     info={'method': 'random', 'hksj': False},
        ...     timing={'total_seconds': 0.0004},
        ...     backend_name='cpu_meta'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)


@dataclass(frozen=True)
class DegenerateResult:
    """
    A valid computation whose answer is a limiting value.

    This is not an error. Callers must render it distinctly from an
    ordinary number (e.g. "∞" or "not reached").

    Attributes:
        kind: 'infinite', 'not_reached' or 'undefined'
        reason: Short explanation of how the limit arose
    """
    kind: str
    reason: str = ""

    def __str__(self) -> str:
        if self.kind == "infinite":
            return "∞"
        if self.kind == "not_reached":
            return "not reached"
        return "undefined"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DegenerateResult):
            return NotImplemented
        return self.kind == other.kind

    def __hash__(self) -> int:
        return hash(self.kind)


INFINITE = DegenerateResult("infinite")
NOT_REACHED = DegenerateResult("not_reached")
UNDEFINED = DegenerateResult("undefined")


def is_degenerate(value: Any) -> bool:
    """True if value is a DegenerateResult rather than a number."""
    return isinstance(value, DegenerateResult)


@dataclass(frozen=True)
class Interval:
    """Two-sided confidence interval. Bounds may be DegenerateResult."""
    lower: Any
    upper: Any

    def contains(self, x: float) -> bool:
        """True if x lies within [lower, upper] (finite bounds only)."""
        if is_degenerate(self.lower) or is_degenerate(self.upper):
            raise TypeError("contains() requires numeric bounds")
        return self.lower <= x <= self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def as_tuple(self) -> tuple[Any, Any]:
        return (self.lower, self.upper)


@dataclass(frozen=True)
class Estimate:
    """
    Point estimate with confidence interval.

    For ratio measures ``value`` and ``ci`` are on the natural scale and
    ``log_se`` is the standard error of the log estimate.
    """
    value: float
    ci: Interval
    se: float | None = None
    log_se: float | None = None

    @property
    def lower(self) -> float:
        return self.ci.lower

    @property
    def upper(self) -> float:
        return self.ci.upper

    @property
    def is_finite(self) -> bool:
        return all(
            not is_degenerate(x) and math.isfinite(x)
            for x in (self.value, self.ci.lower, self.ci.upper)
        )
