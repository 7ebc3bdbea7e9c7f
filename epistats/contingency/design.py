"""
ContingencyTable: immutable 2x2 count table.

Layout (rows = exposure, columns = outcome):

                 event   no event
    exposed        a        b
    unexposed      c        d

Validates counts at construction time; all downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from epistats.core.exceptions import DataError, DimensionError
from epistats.core.validation import check_nonnegative_count


@dataclass(frozen=True)
class ContingencyTable:
    """Immutable 2x2 table of non-negative integer counts.

    Raises
    ------
    DomainError
        If any count is negative or non-integral.
    DataError
        If the table total is zero.
    """

    a: int
    b: int
    c: int
    d: int

    def __post_init__(self) -> None:
        for name in ("a", "b", "c", "d"):
            object.__setattr__(self, name, check_nonnegative_count(getattr(self, name), name))
        if self.a + self.b + self.c + self.d == 0:
            raise DataError(
                "contingency table is empty (a + b + c + d = 0)",
                required="total > 0", actual="total = 0",
            )

    @classmethod
    def for_counts(cls, a, b, c, d) -> ContingencyTable:
        """Create and validate a table from four counts."""
        return cls(a=a, b=b, c=c, d=d)

    @classmethod
    def from_array(cls, table: ArrayLike) -> ContingencyTable:
        """Create from a 2x2 array-like [[a, b], [c, d]]."""
        arr = np.asarray(table)
        if arr.shape != (2, 2):
            raise DimensionError(f"table must be 2x2, got shape {arr.shape}")
        return cls.for_counts(arr[0, 0], arr[0, 1], arr[1, 0], arr[1, 1])

    @property
    def n(self) -> int:
        return self.a + self.b + self.c + self.d

    @property
    def n1(self) -> int:
        """Exposed row total."""
        return self.a + self.b

    @property
    def n2(self) -> int:
        """Unexposed row total."""
        return self.c + self.d

    @property
    def m1(self) -> int:
        """Total events."""
        return self.a + self.c

    @property
    def m2(self) -> int:
        """Total non-events."""
        return self.b + self.d

    @property
    def p1(self) -> float:
        """Risk in the exposed row."""
        self.require_row_totals()
        return self.a / self.n1

    @property
    def p2(self) -> float:
        """Risk in the unexposed row."""
        self.require_row_totals()
        return self.c / self.n2

    @property
    def has_zero_cell(self) -> bool:
        return min(self.a, self.b, self.c, self.d) == 0

    def require_row_totals(self) -> None:
        """Raise DataError if either exposure row is empty."""
        if self.n1 == 0 or self.n2 == 0:
            raise DataError(
                f"both rows need at least one subject, got a+b={self.n1}, c+d={self.n2}",
                required="a+b > 0 and c+d > 0",
                actual=f"a+b = {self.n1}, c+d = {self.n2}",
            )

    def cells(self, correction: float = 0.0) -> tuple[float, float, float, float]:
        """The four cells as floats, each with ``correction`` added."""
        return (
            self.a + correction,
            self.b + correction,
            self.c + correction,
            self.d + correction,
        )

    def corrected_cells(self, correction: float = 0.5) -> tuple[float, float, float, float]:
        """Cells with the continuity correction applied only if any cell is zero."""
        return self.cells(correction if self.has_zero_cell else 0.0)

    def to_array(self) -> np.ndarray:
        return np.array([[self.a, self.b], [self.c, self.d]], dtype=np.int64)
